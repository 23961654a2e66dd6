import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from consolidator.config.settings import Settings
from consolidator.database.models import Case
from consolidator.database.repositories.case_repository import CaseRepository
from consolidator.logging.logger import Log
from consolidator.processor.models import CaseResult
from consolidator.storage.shard_allocator import ShardAllocator
from consolidator.worker.case_runner import CaseRunner
from consolidator.worker.progress import ProgressMonitor, ProgressTracker


@dataclass(frozen=True)
class RunSummary:
    total: int
    succeeded: int
    failed: int


class Worker:
    """One batch pass: fetch the work list once -> fan out to a bounded pool -> wait."""

    def __init__(
        self,
        case_repo: CaseRepository,
        case_runner: CaseRunner,
        allocator: ShardAllocator,
        settings: Settings,
    ) -> None:
        self._case_repo = case_repo
        self._case_runner = case_runner
        self._allocator = allocator
        self._settings = settings

    def run(self) -> RunSummary:
        """Process every pending case and return the totals.

        Dispatch blocks while all ``concurrency`` workers are busy. A failure
        fetching the work list propagates: nothing has been dispatched yet.
        """
        cases = self._case_repo.fetch_pending()
        Log.info(f"Found {len(cases)} pending cases")

        tracker = ProgressTracker(total=len(cases))
        monitor = ProgressMonitor(
            tracker, self._allocator, self._settings.progress_interval_seconds
        )
        width = self._settings.concurrency
        slots = threading.BoundedSemaphore(width)
        futures: list[Future[CaseResult]] = []

        monitor.start()
        try:
            with ThreadPoolExecutor(max_workers=width, thread_name_prefix="case") as executor:
                for case in cases:
                    slots.acquire()
                    future = executor.submit(self._run_case, case, tracker)
                    future.add_done_callback(lambda _f: slots.release())
                    futures.append(future)
            results = [future.result() for future in futures]
        finally:
            monitor.stop()

        summary = RunSummary(
            total=len(results),
            succeeded=sum(1 for result in results if result.succeeded),
            failed=sum(1 for result in results if not result.succeeded),
        )
        Log.info(
            f"All cases processed: {summary.succeeded} succeeded, "
            f"{summary.failed} failed of {summary.total}"
        )
        return summary

    def _run_case(self, case: Case, tracker: ProgressTracker) -> CaseResult:
        try:
            return self._case_runner.run(case)
        finally:
            tracker.increment()
