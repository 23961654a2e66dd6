import threading
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from consolidator.config.settings import Settings
from consolidator.database.models import Case, CaseDetail, CaseOutcome, StoredRecord
from consolidator.processor.exceptions import CaseDetailNotFoundError
from consolidator.processor.processor import build_processor
from consolidator.storage.shard_allocator import ShardAllocator
from consolidator.worker.case_runner import CaseRunner
from consolidator.worker.worker import RunSummary, Worker


class InMemoryArchive:
    """Tables of the archive store held in memory, shared by the in-memory repositories."""

    def __init__(self) -> None:
        self.cases: dict[str, dict[str, object]] = {}
        self.details: dict[str, CaseDetail] = {}
        self.records: list[dict[str, object]] = []
        self.record_paths: list[dict[str, str]] = []
        self.lock = threading.Lock()

    def add_case(
        self,
        case_id: str,
        process_type: int = 1,
        relocate: bool = False,
        image_set: str | None = "batch-1",
    ) -> None:
        archive_code = f"AJ-{case_id}"
        self.cases[case_id] = {
            "case": Case(case_id, archive_code, process_type, relocate),
            "outcome": CaseOutcome.PENDING,
            "reason": None,
        }
        self.details[case_id] = CaseDetail(
            case_id=case_id,
            archive_code=archive_code,
            sub_project="SP",
            project="P",
            image_set=image_set,
        )

    def reset(self, case_id: str) -> None:
        self.cases[case_id]["outcome"] = CaseOutcome.PENDING

    def outcome(self, case_id: str) -> CaseOutcome:
        return self.cases[case_id]["outcome"]  # type: ignore[return-value]

    def reason(self, case_id: str) -> str | None:
        return self.cases[case_id]["reason"]  # type: ignore[return-value]

    def records_of(self, case_id: str) -> list[dict[str, object]]:
        with self.lock:
            rows = [row for row in self.records if row["record_file"] == case_id]
        return sorted(rows, key=lambda row: row["record_wj_xh"])  # type: ignore[arg-type, return-value]

    def record_path(self, row: Mapping[str, object]) -> Path:
        with self.lock:
            [path] = [
                entry["record_path"]
                for entry in self.record_paths
                if entry["record_id"] == row["record_id"]
            ]
        return Path(path)


class InMemoryCaseRepository:
    def __init__(self, archive: InMemoryArchive) -> None:
        self._archive = archive

    def fetch_pending(self) -> list[Case]:
        with self._archive.lock:
            return [
                entry["case"]  # type: ignore[misc]
                for _, entry in sorted(self._archive.cases.items())
                if entry["outcome"] is CaseOutcome.PENDING
            ]

    def mark_succeeded(self, case_id: str, clear_image_set: bool) -> None:
        with self._archive.lock:
            self._archive.cases[case_id]["outcome"] = CaseOutcome.SUCCEEDED
            if clear_image_set:
                detail = self._archive.details[case_id]
                self._archive.details[case_id] = CaseDetail(
                    case_id=detail.case_id,
                    archive_code=detail.archive_code,
                    sub_project=detail.sub_project,
                    project=detail.project,
                    image_set=None,
                )

    def mark_failed(self, case_id: str, reason: str) -> None:
        with self._archive.lock:
            self._archive.cases[case_id]["outcome"] = CaseOutcome.FAILED
            self._archive.cases[case_id]["reason"] = reason


class InMemoryCaseDetailRepository:
    def __init__(self, archive: InMemoryArchive) -> None:
        self._archive = archive

    def find_by_id(self, case_id: str) -> CaseDetail:
        with self._archive.lock:
            detail = self._archive.details.get(case_id)
        if detail is None:
            raise CaseDetailNotFoundError(f"Case detail {case_id} not found")
        return detail


class InMemoryArchivalRecordRepository:
    def __init__(self, archive: InMemoryArchive) -> None:
        self._archive = archive

    def find_by_case(self, case_id: str) -> list[StoredRecord]:
        with self._archive.lock:
            return [
                StoredRecord(entry["record_id"], entry["record_path"])
                for entry in self._archive.record_paths
                if entry["record_file"] == case_id
            ]

    def delete_by_ids(self, record_ids: list[str]) -> int:
        with self._archive.lock:
            self._archive.record_paths = [
                entry
                for entry in self._archive.record_paths
                if entry["record_id"] not in record_ids
            ]
            before = len(self._archive.records)
            self._archive.records = [
                row for row in self._archive.records if row["record_id"] not in record_ids
            ]
            return before - len(self._archive.records)

    def max_sequence(self, case_id: str) -> int | None:
        sequences = [int(row["record_wj_xh"]) for row in self._archive.records_of(case_id)]  # type: ignore[call-overload]
        return max(sequences, default=None)

    def insert(self, fields: Mapping[str, object], record_path: str) -> None:
        with self._archive.lock:
            self._archive.records.append(dict(fields))
            self._archive.record_paths.append(
                {
                    "record_id": str(fields["record_id"]),
                    "record_file": str(fields["record_file"]),
                    "record_path": record_path,
                }
            )


@pytest.fixture
def make_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Settings]:
    """Return a helper building Settings rooted in tmp_path, isolated from .env and config.yaml."""
    monkeypatch.chdir(tmp_path)

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "image_root": tmp_path / "images",
            "storage_root": tmp_path / "pdf",
            "backup_root": tmp_path / "backup",
            "max_per_dir": 2,
            "concurrency": 2,
            "progress_interval_seconds": 60.0,
        }
        values.update(overrides)
        settings = Settings(**values)  # type: ignore[arg-type]
        settings.image_root.mkdir(parents=True, exist_ok=True)
        settings.storage_root.mkdir(parents=True, exist_ok=True)
        return settings

    return _make


@pytest.fixture
def archive() -> InMemoryArchive:
    return InMemoryArchive()


@pytest.fixture
def run_batch(
    archive: InMemoryArchive, make_settings: Callable[..., Settings]
) -> Callable[..., tuple[RunSummary, ShardAllocator]]:
    """Return a helper running one full batch pass against the in-memory archive."""

    def _run(**overrides: object) -> tuple[RunSummary, ShardAllocator]:
        settings = make_settings(**overrides)
        allocator = ShardAllocator.from_disk(settings.storage_root, settings.max_per_dir)
        case_repo = InMemoryCaseRepository(archive)
        processor = build_processor(
            settings,
            allocator,
            case_repo=case_repo,  # type: ignore[arg-type]
            detail_repo=InMemoryCaseDetailRepository(archive),  # type: ignore[arg-type]
            record_repo=InMemoryArchivalRecordRepository(archive),  # type: ignore[arg-type]
        )
        worker = Worker(case_repo, CaseRunner(processor, case_repo), allocator, settings)  # type: ignore[arg-type]
        return worker.run(), allocator

    return _run
