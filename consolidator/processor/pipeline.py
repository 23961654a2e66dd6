from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from consolidator.assembler.models import CompositeDocument
from consolidator.database.models import Case, CaseDetail
from consolidator.processor.models import AssemblyPlan, CaseState


@dataclass(slots=True)
class CaseContext:
    case: Case
    state: CaseState = CaseState.PENDING
    detail: CaseDetail | None = None
    image_dir: Path | None = None
    plan: AssemblyPlan | None = None
    documents: list[CompositeDocument] = field(default_factory=list)
    cleaned_records: int = 0
    images_relocated: bool = False
    error_message: str = ""


class PipelineStep(ABC):
    state: CaseState

    @abstractmethod
    def run(self, context: CaseContext) -> CaseContext:
        raise NotImplementedError
