import shutil
from pathlib import Path
from typing import Any

from consolidator.assembler.models import CompositeDocument, Zone
from consolidator.database.models import CaseDetail
from consolidator.database.repositories.archival_record_repository import (
    ArchivalRecordRepository,
)
from consolidator.logging.logger import Log
from consolidator.recorder.exceptions import CleanupError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

ZONE_TITLES = {
    Zone.OUTER: "案卷合成文件（外部）",
    Zone.INNER: "案卷合成文件（内部）",
}

# Classification columns every generated record carries unchanged.
RECORD_DEFAULTS: dict[str, Any] = {
    "archives_id": "001",
    "record_borrow_state": 0,
    "record_inventory_status": 35,
    "record_status": 6,
    "record_suffix": ".pdf",
    "record_sys_from": 5,
    "url": "images",
    "upload_server_id": 4,
    "record_server_type": 1,
    "record_real_path": "J:\\imagess",
    "sync_state": 0,
    "record_is_full_text": 0,
    "record_is_filepdf": 2,
    "record_is_public": 1,
    "record_hcstatus": 1,
    "record_checkstatus": 2,
    "record_filestatus": 2,
    "record_updatemd5": 3,
    "record_sync": None,
    "record_process": 0,
    "record_sfysj": 2,
    "record_is_mj": 1,
}


def document_label(archive_code: str, sequence: int) -> str:
    return f"{archive_code}-{sequence:03d}"


def build_annotation(document: CompositeDocument) -> str:
    """Free-text note: assembly time, storage path and any damaged source images."""
    note = (
        f"PDF文件合成时间：{document.assembled_at.strftime(TIMESTAMP_FORMAT)},"
        f"图片路径：{document.storage_path}"
    )
    if document.damaged_images:
        note += f",存在损坏图片：{';'.join(document.damaged_images)}"
    return note


class MetadataRecorder:
    """Writes archival records for composite documents and clears stale ones."""

    def __init__(self, record_repo: ArchivalRecordRepository) -> None:
        self._record_repo = record_repo

    def cleanup(self, case_id: str) -> int:
        """Remove every earlier artifact and record of a case.

        Artifacts are deleted first; the rows are only deleted once all
        artifacts are gone. Returns the number of records removed.

        Raises:
            CleanupError: if an artifact exists but cannot be deleted.
        """
        records = self._record_repo.find_by_case(case_id)
        if not records:
            Log.debug(f"No earlier records to clean up for case {case_id}")
            return 0

        for record in records:
            self._remove_artifact(Path(record.record_path))

        self._record_repo.delete_by_ids([record.record_id for record in records])
        Log.info(f"Cleaned up {len(records)} earlier records for case {case_id}")
        return len(records)

    @staticmethod
    def _remove_artifact(path: Path) -> None:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CleanupError(f"Cannot delete earlier artifact {path}: {exc}") from exc

    def insert(self, document: CompositeDocument, detail: CaseDetail) -> int:
        """Store one archival record and return the sequence number it was given.

        The sequence is read fresh on every call; inserts for one case must
        not run concurrently.
        """
        current = self._record_repo.max_sequence(document.case_id)
        sequence = 1 if current is None else current + 1

        fields: dict[str, Any] = {
            "record_id": document.document_id,
            **RECORD_DEFAULTS,
            "record_pdf_size": document.size_bytes,
            "record_wj_xh": sequence,
            "record_wjdh": document_label(detail.archive_code, sequence),
            "record_wjtm": ZONE_TITLES[document.zone],
            "record_fz": build_annotation(document),
            "record_pdf_page": document.page_count,
            "record_sl": document.page_count,
            "record_slice_id": document.shard_name,
            "record_file": document.case_id,
            "record_sproject": detail.sub_project,
            "record_project": detail.project,
            "record_md5": document.md5,
            "record_sm3": document.sm3,
            "record_isinside": int(document.zone),
        }
        self._record_repo.insert(fields, str(document.storage_path))
        Log.info(
            f"Recorded {document.zone.name.lower()} document {document.document_id} "
            f"for case {document.case_id} as sequence {sequence}"
        )
        return sequence
