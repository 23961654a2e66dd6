import hashlib
from dataclasses import dataclass
from pathlib import Path

from gmssl import func, sm3


@dataclass(frozen=True)
class FileDigests:
    md5: str
    sm3: str
    size_bytes: int


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def sm3_hex(data: bytes) -> str:
    """Return the hex SM3 digest (GB/T 32905) of raw bytes."""
    return sm3.sm3_hash(func.bytes_to_list(data))


def file_digests(path: Path) -> FileDigests:
    """Read a file once and digest its exact bytes."""
    data = path.read_bytes()
    return FileDigests(md5=md5_hex(data), sm3=sm3_hex(data), size_bytes=len(data))
