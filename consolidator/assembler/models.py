from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path


class Zone(IntEnum):
    """Sub-area of a case's images; the value is the stored zone marker."""

    OUTER = 1
    INNER = 2


@dataclass(frozen=True)
class CompositeDocument:
    """One assembled PDF for one zone of one case."""

    document_id: str
    case_id: str
    zone: Zone
    storage_path: Path
    shard_name: str
    file_path: Path
    page_count: int
    size_bytes: int
    md5: str
    sm3: str
    assembled_at: datetime
    damaged_images: tuple[str, ...] = field(default_factory=tuple)
