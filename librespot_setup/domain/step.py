"""
Step result domain objects for librespot-setup.

Provides the run state machine and standardized result types for the
steps of an installation run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class Step(Enum):
    """States of one installation run, in execution order."""
    PREFLIGHT = "preflight"
    CHECK_DEPS = "check_deps"
    ENSURE_TOOLCHAIN = "ensure_toolchain"
    ACQUIRE_SOURCE = "acquire_source"
    BUILD = "build"
    FETCH_ASSETS = "fetch_assets"
    STOP_SERVICE = "stop_service"
    INSTALL_FILES = "install_files"
    ENABLE_START_SERVICE = "enable_start_service"
    DONE = "done"
    ABORT = "abort"


class StepStatus(Enum):
    """Outcome of an individual step."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    """What happened during one step."""
    step: Step
    status: StepStatus
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, step: Step, message: Optional[str] = None, **metadata) -> 'StepResult':
        return cls(step, StepStatus.SUCCESS, message, metadata)

    @classmethod
    def skipped(cls, step: Step, message: Optional[str] = None, **metadata) -> 'StepResult':
        return cls(step, StepStatus.SKIPPED, message, metadata)

    @classmethod
    def failed(cls, step: Step, message: Optional[str] = None) -> 'StepResult':
        return cls(step, StepStatus.FAILED, message)


@dataclass
class RunSummary:
    """
    Summary of an installation run.

    Collects the result of each step in the order they ran. A run that
    aborted ends in Step.ABORT with the failed step's result last.
    """
    results: List[StepResult] = field(default_factory=list)
    state: Step = Step.PREFLIGHT

    @property
    def success(self) -> bool:
        """True if the run reached DONE."""
        return self.state == Step.DONE

    @property
    def steps(self) -> List[Step]:
        return [r.step for r in self.results]

    def add(self, result: StepResult) -> None:
        """Record a step result and advance the state."""
        self.results.append(result)
        self.state = Step.ABORT if result.status == StepStatus.FAILED else result.step

    def finish(self) -> None:
        if self.state != Step.ABORT:
            self.state = Step.DONE

    def get(self, step: Step) -> Optional[StepResult]:
        for result in self.results:
            if result.step == step:
                return result
        return None
