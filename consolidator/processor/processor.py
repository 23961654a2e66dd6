from consolidator.assembler.assembler import DocumentAssembler
from consolidator.config.settings import Settings
from consolidator.database.repositories.archival_record_repository import (
    ArchivalRecordRepository,
)
from consolidator.database.repositories.case_detail_repository import CaseDetailRepository
from consolidator.database.repositories.case_repository import CaseRepository
from consolidator.logging.logger import Log
from consolidator.pdf.factory import PdfWriterFactory
from consolidator.processor.disposer import SourceDisposer
from consolidator.processor.pipeline import CaseContext, PipelineStep
from consolidator.processor.steps import (
    AssembleStep,
    CleanupStep,
    DisposeStep,
    LoadDetailStep,
    MarkSucceededStep,
)
from consolidator.recorder.metadata_recorder import MetadataRecorder
from consolidator.storage.shard_allocator import ShardAllocator


class Processor:
    """Orchestrates the full pipeline of one case.

    Pipeline: load detail -> cleanup -> assemble + record -> dispose -> mark succeeded.
    Any step may raise; the caller owns the failed outcome.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, context: CaseContext) -> CaseContext:
        """Run every step in order for the case held by context."""
        Log.info(f"Processing case {context.case.case_id}")
        for step in self._steps:
            context.state = step.state
            context = step.run(context)
        return context


def build_processor(
    settings: Settings,
    allocator: ShardAllocator,
    case_repo: CaseRepository | None = None,
    detail_repo: CaseDetailRepository | None = None,
    record_repo: ArchivalRecordRepository | None = None,
) -> Processor:
    """Build a Processor with all required repositories and adapters.

    Repositories not passed in are created against the connection pool.
    """
    case_repo = case_repo if case_repo is not None else CaseRepository(settings)
    detail_repo = detail_repo if detail_repo is not None else CaseDetailRepository(settings)
    record_repo = record_repo if record_repo is not None else ArchivalRecordRepository(settings)
    recorder = MetadataRecorder(record_repo)
    assembler = DocumentAssembler(
        allocator=allocator,
        writer_factory=PdfWriterFactory.resolve(settings),
    )
    disposer = SourceDisposer(
        image_root=settings.image_root,
        backup_root=settings.backup_root,
        action=settings.image_action,
    )
    return Processor(
        steps=[
            LoadDetailStep(detail_repo, settings.image_root),
            CleanupStep(recorder),
            AssembleStep(assembler, recorder, settings.inner_zone_dirname),
            DisposeStep(disposer),
            MarkSucceededStep(case_repo),
        ]
    )
