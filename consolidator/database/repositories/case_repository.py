from psycopg import sql
from psycopg.rows import dict_row

from consolidator.config.settings import Settings
from consolidator.database.connection import get_connection
from consolidator.database.models import Case, CaseOutcome


class CaseRepository:
    """Database operations for the work-list table."""

    def __init__(self, settings: Settings) -> None:
        self._cases = sql.Identifier(settings.table_cases)
        self._details = sql.Identifier(settings.table_case_details)

    def fetch_pending(self) -> list[Case]:
        """Return every case whose outcome is still pending.

        The result is a snapshot: cases added later are not observed by the run.
        """
        query = sql.SQL(
            """
            SELECT file_id, file_ajdh, process_type, move_jpg
            FROM {}
            WHERE outcome = %s
            ORDER BY file_id
            """
        ).format(self._cases)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (int(CaseOutcome.PENDING),))
                rows = cur.fetchall()

        return [
            Case(
                case_id=str(row["file_id"]),
                archive_code=row["file_ajdh"],
                process_type=int(row["process_type"]),
                relocate_images=int(row["move_jpg"]) == 1,
            )
            for row in rows
        ]

    def mark_succeeded(self, case_id: str, clear_image_set: bool) -> None:
        """Mark a case as succeeded.

        When clear_image_set is set, the detail row's image-set reference is
        cleared in the same transaction.
        """
        update_case = sql.SQL(
            """
            UPDATE {}
            SET outcome = %s, process_time = NOW()
            WHERE file_id = %s
            """
        ).format(self._cases)
        with get_connection() as conn:
            conn.execute(update_case, (int(CaseOutcome.SUCCEEDED), case_id))
            if clear_image_set:
                conn.execute(
                    sql.SQL(
                        """
                        UPDATE {}
                        SET file_slice_image = NULL
                        WHERE file_id = %s
                        """
                    ).format(self._details),
                    (case_id,),
                )
            conn.commit()

    def mark_failed(self, case_id: str, reason: str) -> None:
        """Mark a case as failed with a free-text reason."""
        query = sql.SQL(
            """
            UPDATE {}
            SET outcome = %s, process_time = NOW(), fail_reason = %s
            WHERE file_id = %s
            """
        ).format(self._cases)
        with get_connection() as conn:
            conn.execute(query, (int(CaseOutcome.FAILED), reason, case_id))
            conn.commit()
