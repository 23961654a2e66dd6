from consolidator.database.models import Case
from consolidator.database.repositories.case_repository import CaseRepository
from consolidator.logging.logger import Log
from consolidator.processor.exceptions import OutcomeUpdateError
from consolidator.processor.models import CaseResult, CaseState
from consolidator.processor.pipeline import CaseContext
from consolidator.processor.processor import Processor


class CaseRunner:
    """Run one case, catch any exception, and record the failed outcome. Never retries."""

    def __init__(self, processor: Processor, case_repo: CaseRepository) -> None:
        self._processor = processor
        self._case_repo = case_repo

    def run(self, case: Case) -> CaseResult:
        """Execute a single case. Exceptions never escape to sibling cases."""
        context = CaseContext(case=case)
        try:
            context = self._processor.process(context)
        except Exception as exc:
            self._handle_failure(context, exc)
        return CaseResult(
            case_id=case.case_id,
            state=context.state,
            documents=len(context.documents),
            reason=context.error_message,
        )

    def _handle_failure(self, context: CaseContext, exc: Exception) -> None:
        """Log at the right level and store the failed outcome with a reason."""
        failed_in = context.state.value
        context.state = CaseState.FAILED
        context.error_message = f"{type(exc).__name__} while {failed_in}: {exc}"
        if isinstance(exc, OutcomeUpdateError) and exc.severe:
            Log.critical(
                f"Case {context.case.case_id}: source images were relocated but the "
                f"outcome was not stored: {exc}"
            )
        else:
            Log.error(f"Case {context.case.case_id} failed: {context.error_message}")
        try:
            self._case_repo.mark_failed(context.case.case_id, context.error_message)
        except Exception as mark_exc:
            Log.error(f"Cannot mark case {context.case.case_id} failed: {mark_exc}")
