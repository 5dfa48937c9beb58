"""
Plan models — the execution contract.

A plan is an ordered list of steps. The plan builder creates it once;
afterwards only the execution engine touches it, and only through the
step transition methods below. Commands are ephemeral: synthesized per
step at execution time and never persisted.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from devsetup.core.errors import StepTransitionError
from devsetup.core.models.environment import Platform


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class HandlerCategory(str, Enum):
    """Which synthesizer is responsible for a step."""

    LANGUAGE = "language"
    PACKAGE_MANAGER = "package_manager"
    IDE_TOOL = "ide_tool"
    PROJECT = "project"
    VERIFICATION = "verification"


class InstallAction(str, Enum):
    DETECT = "detect"
    DOWNLOAD = "download"
    INSTALL = "install"
    CONFIGURE = "configure"
    VERIFY = "verify"


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"
    REQUIRES_APPROVAL = "requires_approval"


class Command(BaseModel):
    """One shell command synthesized for a step."""

    model_config = ConfigDict(frozen=True)

    command: str
    requires_admin: bool = False
    platform: Platform | None = None
    description: str = ""


class StepResult(BaseModel):
    """Outcome of a handler's post-command bookkeeping.

    Handlers must say explicitly whether the step succeeded.
    """

    success: bool
    output: str = ""
    error: str | None = None

    @classmethod
    def ok(cls, output: str = "") -> StepResult:
        return cls(success=True, output=output)

    @classmethod
    def failure(cls, error: str) -> StepResult:
        return cls(success=False, error=error)


class InstallationStep(BaseModel):
    """One detect/install/verify action for one tool.

    Status moves strictly pending → in_progress → completed|failed.
    ``skipped`` is only reachable before the step starts.
    ``tool_category`` is the handler that owns the tool itself; verify
    steps are routed to verification but keep it.
    """

    id: str
    category: HandlerCategory
    action: InstallAction
    tool: str
    version: str | None = None
    tool_category: HandlerCategory | None = None
    status: StepStatus = StepStatus.PENDING
    output: str = ""
    error: str | None = None

    def start(self) -> None:
        self._require(StepStatus.PENDING, "start")
        self.status = StepStatus.IN_PROGRESS

    def complete(self, output: str = "") -> None:
        self._require(StepStatus.IN_PROGRESS, "complete")
        self.status = StepStatus.COMPLETED
        self.output = output

    def fail(self, error: str, output: str = "") -> None:
        self._require(StepStatus.IN_PROGRESS, "fail")
        self.status = StepStatus.FAILED
        self.error = error
        self.output = output

    def skip(self, reason: str = "") -> None:
        if self.status not in (StepStatus.PENDING, StepStatus.REQUIRES_APPROVAL):
            raise StepTransitionError(
                f"Cannot skip step {self.id}: status is {self.status.value}"
            )
        self.status = StepStatus.SKIPPED
        self.output = reason

    def _require(self, expected: StepStatus, verb: str) -> None:
        if self.status != expected:
            raise StepTransitionError(
                f"Cannot {verb} step {self.id}: status is {self.status.value}, "
                f"expected {expected.value}"
            )

    @property
    def label(self) -> str:
        version = f" {self.version}" if self.version else ""
        return f"{self.action.value.upper()} {self.tool}{version}"


class InstallationPlan(BaseModel):
    """The ordered steps produced for one setup request."""

    id: str
    request_id: str
    project_path: str | None = None
    steps: list[InstallationStep] = Field(default_factory=list)
    estimated_time: str = ""
    requires_admin: bool = False
    platform: Platform
    created_at: str = Field(default_factory=_now_iso)

    def count(self, status: StepStatus) -> int:
        return sum(1 for s in self.steps if s.status == status)

    def install_steps(self) -> list[InstallationStep]:
        return [s for s in self.steps if s.action == InstallAction.INSTALL]

    def get_step(self, step_id: str) -> InstallationStep | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    @property
    def status(self) -> str:
        """Aggregate status: pending, ok, partial, failed."""
        completed = self.count(StepStatus.COMPLETED)
        failed = self.count(StepStatus.FAILED)
        if completed == 0 and failed == 0:
            return "pending"
        if failed == 0:
            return "ok"
        if completed > 0:
            return "partial"
        return "failed"
