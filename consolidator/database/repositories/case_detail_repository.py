from psycopg import sql
from psycopg.rows import dict_row

from consolidator.config.settings import Settings
from consolidator.database.connection import get_connection
from consolidator.database.models import CaseDetail
from consolidator.processor.exceptions import CaseDetailNotFoundError


class CaseDetailRepository:
    """Read-only lookups against the case-detail table."""

    def __init__(self, settings: Settings) -> None:
        self._details = sql.Identifier(settings.table_case_details)

    def find_by_ids(self, case_ids: list[str]) -> dict[str, CaseDetail]:
        """Fetch details for a batch of cases, keyed by case ID.

        Cases without a detail row are absent from the result.
        """
        if not case_ids:
            return {}
        query = sql.SQL(
            """
            SELECT file_id, file_ajdh, file_sproject, file_project, file_slice_image
            FROM {}
            WHERE file_id = ANY(%s)
            """
        ).format(self._details)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (list(case_ids),))
                rows = cur.fetchall()

        return {
            str(row["file_id"]): CaseDetail(
                case_id=str(row["file_id"]),
                archive_code=row["file_ajdh"],
                sub_project=row["file_sproject"],
                project=row["file_project"],
                image_set=row["file_slice_image"],
            )
            for row in rows
        }

    def find_by_id(self, case_id: str) -> CaseDetail:
        """Fetch the detail row of a single case.

        Raises:
            CaseDetailNotFoundError: if the case has no detail row.
        """
        detail = self.find_by_ids([case_id]).get(case_id)
        if detail is None:
            raise CaseDetailNotFoundError(f"Case detail {case_id} not found")
        return detail
