from collections.abc import Mapping

from psycopg import sql

from consolidator.config.settings import Settings
from consolidator.database.connection import get_connection
from consolidator.database.models import StoredRecord


class ArchivalRecordRepository:
    """Database operations for archival records and their storage paths."""

    def __init__(self, settings: Settings) -> None:
        self._records = sql.Identifier(settings.table_records)
        self._record_paths = sql.Identifier(settings.table_record_paths)

    def find_by_case(self, case_id: str) -> list[StoredRecord]:
        """Return the records already stored for a case with their artifact paths."""
        query = sql.SQL(
            """
            SELECT record_id, record_path
            FROM {}
            WHERE record_file = %s
            """
        ).format(self._record_paths)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (case_id,))
                rows = cur.fetchall()

        return [StoredRecord(record_id=str(row[0]), record_path=row[1]) for row in rows]

    def delete_by_ids(self, record_ids: list[str]) -> int:
        """Delete records and their storage paths in one transaction.

        Returns the number of records removed.
        """
        if not record_ids:
            return 0
        ids = list(record_ids)
        delete_paths = sql.SQL("DELETE FROM {} WHERE record_id = ANY(%s)").format(
            self._record_paths
        )
        delete_records = sql.SQL("DELETE FROM {} WHERE record_id = ANY(%s)").format(
            self._records
        )
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(delete_paths, (ids,))
                cur.execute(delete_records, (ids,))
                deleted = cur.rowcount
            conn.commit()
        return deleted

    def max_sequence(self, case_id: str) -> int | None:
        """Return the highest sequence number stored for a case, or None."""
        query = sql.SQL(
            """
            SELECT MAX(record_wj_xh)
            FROM {}
            WHERE record_file = %s
            """
        ).format(self._records)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (case_id,))
                row = cur.fetchone()

        if row is None or row[0] is None:
            return None
        return int(row[0])

    def insert(self, fields: Mapping[str, object], record_path: str) -> None:
        """Insert one archival record and the storage path its cleanup will read.

        Both rows are written in one transaction. ``fields`` must carry
        ``record_id`` and ``record_file``.
        """
        columns = list(fields)
        insert_record = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
            self._records,
            sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        insert_path = sql.SQL(
            """
            INSERT INTO {} (record_id, record_file, record_path)
            VALUES (%s, %s, %s)
            """
        ).format(self._record_paths)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(insert_record, tuple(fields[column] for column in columns))
                cur.execute(insert_path, (fields["record_id"], fields["record_file"], record_path))
            conn.commit()
