from dataclasses import dataclass
from enum import IntEnum


class CaseOutcome(IntEnum):
    """Values of the work-list outcome column."""

    PENDING = 1
    SUCCEEDED = 2
    FAILED = 3


@dataclass(frozen=True)
class Case:
    """Represents a pending row from the work-list table."""

    case_id: str
    archive_code: str
    process_type: int
    relocate_images: bool


@dataclass(frozen=True)
class CaseDetail:
    """Represents a row from the case-detail table."""

    case_id: str
    archive_code: str
    sub_project: str | None = None
    project: str | None = None
    image_set: str | None = None


@dataclass(frozen=True)
class StoredRecord:
    """An archival record together with the storage location of its artifact."""

    record_id: str
    record_path: str
