import threading
from dataclasses import dataclass

from consolidator.logging.logger import Log
from consolidator.storage.shard_allocator import ShardAllocator


@dataclass(frozen=True)
class ProgressSnapshot:
    processed: int
    total: int

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.processed / self.total * 100


class ProgressTracker:
    """Thread-safe count of cases that reached a terminal state."""

    def __init__(self, total: int) -> None:
        self._total = total
        self._processed = 0
        self._lock = threading.Lock()

    def increment(self) -> None:
        with self._lock:
            self._processed += 1

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(processed=self._processed, total=self._total)


def format_progress(snapshot: ProgressSnapshot, allocator: ShardAllocator) -> str:
    shard_name, folder_count = allocator.occupancy()
    return (
        f"Progress: {snapshot.processed}/{snapshot.total} ({snapshot.percent:.1f}%) "
        f"shard {shard_name} ({folder_count}/{allocator.max_per_dir})"
    )


class ProgressMonitor:
    """Background thread that logs progress at a fixed interval."""

    def __init__(
        self,
        tracker: ProgressTracker,
        allocator: ShardAllocator,
        interval_seconds: float,
    ) -> None:
        self._tracker = tracker
        self._allocator = allocator
        self._interval_seconds = interval_seconds
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        """Starts the background reporting thread."""
        if self._thread is not None and self._thread.is_alive():
            Log.warning("Progress monitor is already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="progress", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stops the reporting thread and logs the final line."""
        if self._thread is not None:
            self._stop_event.set()
            self._thread.join()
            self._thread = None
        self.report()

    def report(self) -> None:
        Log.info(format_progress(self._tracker.snapshot(), self._allocator))

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            self.report()
