import threading
from dataclasses import dataclass
from pathlib import Path

from consolidator.logging.logger import Log
from consolidator.storage.exceptions import StorageInitError

SHARD_NAME_WIDTH = 5
SOURCE_DIRNAME = "source"


def format_shard_name(number: int) -> str:
    return f"{number:0{SHARD_NAME_WIDTH}d}"


@dataclass(frozen=True)
class ShardAllocation:
    storage_path: Path
    shard_name: str


class ShardAllocator:
    """Hands out per-document storage folders, rolling over to a new shard at capacity.

    Layout: ``<storage_root>/<shard>/source/<document_id>/``. Shard names are
    zero-padded integers that only grow. One lock serializes every allocation
    and is never held across filesystem calls.
    """

    def __init__(
        self,
        storage_root: Path,
        max_per_dir: int,
        shard_name: str | None = None,
        folder_count: int = 0,
    ) -> None:
        if max_per_dir <= 0:
            raise ValueError("max_per_dir must be positive")
        self._storage_root = storage_root
        self._max_per_dir = max_per_dir
        self._shard_name = shard_name if shard_name is not None else format_shard_name(0)
        self._folder_count = folder_count
        self._lock = threading.Lock()

    @property
    def max_per_dir(self) -> int:
        return self._max_per_dir

    @classmethod
    def from_disk(cls, storage_root: Path, max_per_dir: int) -> "ShardAllocator":
        """Rebuild allocator state from the shard directories already on disk.

        Raises:
            StorageInitError: if the storage root cannot be listed.
        """
        try:
            entries = list(storage_root.iterdir())
        except OSError as exc:
            raise StorageInitError(f"Cannot read storage root {storage_root}: {exc}") from exc

        shards = {
            int(entry.name): entry.name
            for entry in entries
            if entry.is_dir() and entry.name.isascii() and entry.name.isdigit()
        }
        if not shards:
            Log.info(f"No shards under {storage_root}, starting at {format_shard_name(0)}")
            return cls(storage_root, max_per_dir)

        latest = max(shards)
        shard_name = shards[latest]
        folder_count = cls._count_folders(storage_root / shard_name / SOURCE_DIRNAME)

        if folder_count >= max_per_dir:
            next_name = format_shard_name(latest + 1)
            Log.info(
                f"Shard {shard_name} is full ({folder_count}/{max_per_dir}), "
                f"starting shard {next_name}"
            )
            return cls(storage_root, max_per_dir, next_name, 0)

        Log.info(f"Resuming shard {shard_name} with {folder_count}/{max_per_dir} folders")
        return cls(storage_root, max_per_dir, shard_name, folder_count)

    @staticmethod
    def _count_folders(source_dir: Path) -> int:
        try:
            return sum(1 for entry in source_dir.iterdir() if entry.is_dir())
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StorageInitError(f"Cannot read shard folder {source_dir}: {exc}") from exc

    def allocate(self, document_id: str) -> ShardAllocation:
        """Reserve a storage folder for a document. Does not touch the filesystem."""
        with self._lock:
            if self._folder_count >= self._max_per_dir:
                self._shard_name = format_shard_name(int(self._shard_name) + 1)
                self._folder_count = 0
            shard_name = self._shard_name
            self._folder_count += 1

        storage_path = self._storage_root / shard_name / SOURCE_DIRNAME / document_id
        return ShardAllocation(storage_path=storage_path, shard_name=shard_name)

    def occupancy(self) -> tuple[str, int]:
        """Snapshot of (current shard name, folders placed in it)."""
        with self._lock:
            return self._shard_name, self._folder_count
