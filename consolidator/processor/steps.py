from pathlib import Path

from consolidator.assembler.assembler import DocumentAssembler
from consolidator.assembler.exceptions import EmptyImageSetError
from consolidator.assembler.models import Zone
from consolidator.database.repositories.case_detail_repository import CaseDetailRepository
from consolidator.database.repositories.case_repository import CaseRepository
from consolidator.logging.logger import Log
from consolidator.processor.disposer import SourceDisposer
from consolidator.processor.exceptions import MissingImageSetError, OutcomeUpdateError
from consolidator.processor.models import (
    PROCESS_TYPE_KINDS,
    AssemblyKind,
    AssemblyPlan,
    CaseState,
)
from consolidator.processor.pipeline import CaseContext, PipelineStep
from consolidator.recorder.metadata_recorder import MetadataRecorder


def _require_image_dir(context: CaseContext) -> Path:
    if context.image_dir is None:
        raise MissingImageSetError(f"Case {context.case.case_id} has no image-set reference")
    return context.image_dir


class LoadDetailStep(PipelineStep):
    state = CaseState.PENDING

    def __init__(self, detail_repo: CaseDetailRepository, image_root: Path) -> None:
        self._detail_repo = detail_repo
        self._image_root = image_root

    def run(self, context: CaseContext) -> CaseContext:
        detail = self._detail_repo.find_by_id(context.case.case_id)
        context.detail = detail
        if detail.image_set:
            context.image_dir = self._image_root / detail.image_set / context.case.case_id
        return context


class CleanupStep(PipelineStep):
    state = CaseState.CLEANING

    def __init__(self, recorder: MetadataRecorder) -> None:
        self._recorder = recorder

    def run(self, context: CaseContext) -> CaseContext:
        context.cleaned_records = self._recorder.cleanup(context.case.case_id)
        return context


class AssembleStep(PipelineStep):
    """Assemble and record each zone the case's plan calls for.

    Every document is recorded before the next zone is assembled. An empty
    outer zone is tolerated only when an inner zone is present.
    """

    state = CaseState.ASSEMBLING

    def __init__(
        self,
        assembler: DocumentAssembler,
        recorder: MetadataRecorder,
        inner_zone_dirname: str,
    ) -> None:
        self._assembler = assembler
        self._recorder = recorder
        self._inner_zone_dirname = inner_zone_dirname

    def plan(self, context: CaseContext) -> AssemblyPlan:
        inner_present = False
        kind = PROCESS_TYPE_KINDS.get(context.case.process_type)
        if kind is AssemblyKind.DUAL_ZONE and context.image_dir is not None:
            inner_present = (context.image_dir / self._inner_zone_dirname).is_dir()
        return AssemblyPlan.for_process_type(context.case.process_type, inner_present)

    def run(self, context: CaseContext) -> CaseContext:
        plan = self.plan(context)
        context.plan = plan
        if plan.kind is AssemblyKind.NO_ASSEMBLY:
            Log.info(f"Case {context.case.case_id} needs no assembly")
            return context

        image_dir = _require_image_dir(context)
        if plan.inner_present:
            try:
                self._assemble_and_record(context, image_dir, Zone.OUTER)
            except EmptyImageSetError as exc:
                Log.warning(f"Outer zone skipped for case {context.case.case_id}: {exc}")
            self._assemble_and_record(context, image_dir / self._inner_zone_dirname, Zone.INNER)
        else:
            self._assemble_and_record(context, image_dir, Zone.OUTER)
        return context

    def _assemble_and_record(self, context: CaseContext, image_dir: Path, zone: Zone) -> None:
        context.state = CaseState.ASSEMBLING
        document = self._assembler.assemble(image_dir, context.case.case_id, zone)
        context.state = CaseState.RECORDING
        if context.detail is None:
            raise ValueError("CaseContext.detail must be set before recording")
        self._recorder.insert(document, context.detail)
        context.documents.append(document)


class DisposeStep(PipelineStep):
    state = CaseState.DISPOSING

    def __init__(self, disposer: SourceDisposer) -> None:
        self._disposer = disposer

    def run(self, context: CaseContext) -> CaseContext:
        if not context.case.relocate_images:
            return context
        image_dir = _require_image_dir(context)
        context.images_relocated = self._disposer.dispose(image_dir)
        return context


class MarkSucceededStep(PipelineStep):
    state = CaseState.COMPLETING

    def __init__(self, case_repo: CaseRepository) -> None:
        self._case_repo = case_repo

    def run(self, context: CaseContext) -> CaseContext:
        try:
            self._case_repo.mark_succeeded(
                context.case.case_id,
                clear_image_set=context.images_relocated,
            )
        except Exception as exc:
            raise OutcomeUpdateError(
                f"Cannot mark case {context.case.case_id} succeeded: {exc}",
                severe=context.images_relocated,
            ) from exc
        context.state = CaseState.SUCCEEDED
        Log.info(
            f"Case {context.case.case_id} succeeded with {len(context.documents)} documents"
        )
        return context
