"""Interface definitions for fetch orchestration."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Policy(Enum):
    """How the orchestrator waits on tasks and treats their failures."""
    FAIL_FAST = "fail_fast"                       # abort on first failure
    BEST_EFFORT_SILENT = "best_effort_silent"     # drop failures, counts only
    BEST_EFFORT_REPORTED = "best_effort_reported" # keep partial data, report failures


class TaskState(Enum):
    """Lifecycle of a single fetch task."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELLED)


@dataclass(frozen=True)
class TaskOutcome:
    """Terminal snapshot of a task, as returned by await_settled()."""
    source: str
    state: TaskState
    result: Optional[Tuple[str, ...]] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.COMPLETED


@dataclass(frozen=True)
class SourceFailure:
    """A source that did not complete, with the error it settled with."""
    source: str
    error: BaseException


@dataclass(frozen=True)
class AggregationResult:
    """Combined output of one aggregate() call."""
    policy: Policy
    titles: Tuple[str, ...] = ()
    succeeded_count: int = 0
    failed_count: int = 0
    aborted: bool = False
    error: Optional[BaseException] = None
    failures: Tuple[SourceFailure, ...] = ()

    @property
    def total(self) -> int:
        return self.succeeded_count + self.failed_count

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "policy": self.policy.value,
            "titles": list(self.titles),
            "succeeded_count": self.succeeded_count,
            "failed_count": self.failed_count,
            "aborted": self.aborted,
            "error": str(self.error) if self.error else None,
            "failures": [
                {"source": f.source, "error": str(f.error), "error_type": type(f.error).__name__}
                for f in self.failures
            ],
        }
