from dataclasses import dataclass
from enum import Enum


class CaseState(str, Enum):
    """Lifecycle of one case within a run. SUCCEEDED and FAILED are terminal."""

    PENDING = "pending"
    CLEANING = "cleaning"
    ASSEMBLING = "assembling"
    RECORDING = "recording"
    DISPOSING = "disposing"
    COMPLETING = "completing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AssemblyKind(str, Enum):
    NO_ASSEMBLY = "no_assembly"
    SINGLE_ZONE = "single_zone"
    DUAL_ZONE = "dual_zone"


PROCESS_TYPE_KINDS = {
    0: AssemblyKind.NO_ASSEMBLY,
    1: AssemblyKind.SINGLE_ZONE,
    2: AssemblyKind.DUAL_ZONE,
}


@dataclass(frozen=True)
class AssemblyPlan:
    """Which zones of a case get assembled."""

    kind: AssemblyKind
    inner_present: bool = False

    @classmethod
    def for_process_type(cls, process_type: int, inner_present: bool) -> "AssemblyPlan":
        kind = PROCESS_TYPE_KINDS.get(process_type)
        if kind is None:
            raise ValueError(f"Unknown process type {process_type}")
        return cls(kind=kind, inner_present=inner_present and kind is AssemblyKind.DUAL_ZONE)


@dataclass(frozen=True)
class CaseResult:
    """Terminal outcome of one case, returned by the per-case runner."""

    case_id: str
    state: CaseState
    documents: int = 0
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.state is CaseState.SUCCEEDED
