"""
Execution engine — run a plan, step by step.

The engine is the only component with side effects on the host. It
walks the plan strictly in order, asks the owning synthesizer for
commands, runs them through the injected runner, and moves each step
through its status transitions. It never touches anything on the plan
except step status fields.

Flow per step:
    pending → in_progress → synthesize → run commands → handler.execute()
            → completed | failed  (→ operator: continue or stop)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from devsetup.adapters.base import CommandError, CommandRunner
from devsetup.adapters.prompts import CONTINUE, STOP, Progress, Prompter, PromptKind
from devsetup.core.errors import ElevationDeclined
from devsetup.core.models.environment import EnvironmentSnapshot, Platform
from devsetup.core.models.plan import (
    Command,
    HandlerCategory,
    InstallAction,
    InstallationPlan,
    InstallationStep,
    StepStatus,
)
from devsetup.core.services.classifier import family_of
from devsetup.core.services.synthesizers.base import is_present
from devsetup.core.services.synthesizers.registry import SynthesizerRegistry

logger = logging.getLogger(__name__)

TERMINAL_OUTPUT = "Command executed in terminal"


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    plan_id: str = ""
    steps: list[InstallationStep] = field(default_factory=list)
    stopped: bool = False

    def _count(self, status: StepStatus) -> int:
        return sum(1 for s in self.steps if s.status == status)

    @property
    def total(self) -> int:
        return len(self.steps)

    @property
    def completed(self) -> int:
        return self._count(StepStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(StepStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(StepStatus.SKIPPED)

    @property
    def pending(self) -> int:
        return self._count(StepStatus.PENDING)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.completed > 0:
            return "partial"
        return "failed"

    @property
    def errors(self) -> list[str]:
        return [f"{s.id}: {s.error}" for s in self.steps if s.status == StepStatus.FAILED]

    def to_dict(self) -> dict:
        return {
            "plan_id": self.plan_id,
            "status": self.status,
            "total": self.total,
            "completed": self.completed,
            "failed": self.failed,
            "skipped": self.skipped,
            "pending": self.pending,
            "stopped": self.stopped,
            "errors": self.errors,
        }


def powershell_elevate(command: str) -> list[str]:
    """Wrap a command so Windows runs it in an elevated PowerShell."""
    quoted = command.replace("'", "''")
    return [
        "powershell",
        "-NoProfile",
        "-Command",
        "Start-Process powershell -Verb RunAs -Wait "
        f"-ArgumentList '-NoProfile','-Command','{quoted}'",
    ]


class ExecutionEngine:
    """Sequential plan executor with operator-mediated elevation."""

    def __init__(
        self,
        registry: SynthesizerRegistry,
        runner: CommandRunner,
        prompter: Prompter,
        skip_installed: bool = False,
    ):
        self._registry = registry
        self._runner = runner
        self._prompter = prompter
        self._skip_installed = skip_installed

    def execute(self, plan: InstallationPlan, environment: EnvironmentSnapshot) -> ExecutionReport:
        """Run every pending step of ``plan`` in list order.

        Steps already past ``pending`` are left alone, so a stopped
        plan can be run again to pick up where it left off.
        """
        report = ExecutionReport(plan_id=plan.id, steps=plan.steps)
        total = len(plan.steps)
        logger.info("Executing plan %s (%d steps)", plan.id, total)

        for index, step in enumerate(plan.steps, start=1):
            if step.status != StepStatus.PENDING:
                logger.debug("Step %s already %s; not re-run", step.id, step.status.value)
                continue

            self._prompter.report(Progress(index, total, f"{step.action.value} {step.tool}"))

            if self._should_skip(step, environment):
                step.skip(f"{step.tool} is already installed")
                logger.info("⊘ [%d/%d] %s skipped (already installed)", index, total, step.label)
                continue

            self.run_step(step, environment)

            if step.status == StepStatus.COMPLETED:
                logger.info("✓ [%d/%d] %s", index, total, step.label)
                continue

            logger.warning("✗ [%d/%d] %s failed: %s", index, total, step.label, step.error)
            choice = self._prompter.choose(
                f"Failed to {step.action.value} {step.tool}. Continue with remaining steps?",
                [CONTINUE, STOP],
                PromptKind.CONTINUE,
            )
            if choice != CONTINUE:
                report.stopped = True
                logger.info("Plan %s stopped by operator after %s", plan.id, step.id)
                break

        logger.info(
            "Plan %s finished: %s (completed=%d failed=%d skipped=%d pending=%d)",
            plan.id, report.status, report.completed, report.failed,
            report.skipped, report.pending,
        )
        return report

    def run_step(self, step: InstallationStep, environment: EnvironmentSnapshot) -> None:
        """Drive one step from pending to a terminal status."""
        step.start()

        synthesizer = self._registry.for_step(step)
        if synthesizer is None:
            step.fail(f"No synthesizer registered for category: {step.category.value}")
            return

        commands = synthesizer.plan(step, environment)
        if not commands:
            step.complete()
            return

        outputs: list[str] = []
        for command in commands:
            try:
                outputs.append(self.run_command(command, environment))
            except ElevationDeclined as e:
                step.fail(str(e), output=_join(outputs))
                return
            except CommandError as e:
                step.fail(str(e), output=_join(outputs + [e.output]))
                return

        result = synthesizer.execute(step, environment)
        if not result.success:
            step.fail(result.error or "Unknown error", output=_join(outputs))
            return

        step.complete(_join(outputs + [result.output]))

    def run_command(self, command: Command, environment: EnvironmentSnapshot) -> str:
        """Run one command, elevating through the operator when required.

        A failing command whose text mentions ``version`` is a probe for
        a missing tool, not an error: its output is returned as-is.
        """
        if command.requires_admin:
            return self._run_elevated(command, environment)

        try:
            return self._runner.run(command.command)
        except CommandError as e:
            if "version" in command.command:
                logger.debug("Version probe exited non-zero, kept as output: %s", command.command)
                return e.output or str(e)
            raise

    # ── Internals ───────────────────────────────────────────────

    def _should_skip(self, step: InstallationStep, environment: EnvironmentSnapshot) -> bool:
        if not self._skip_installed or step.action != InstallAction.INSTALL:
            return False
        if step.category in (HandlerCategory.PROJECT, HandlerCategory.VERIFICATION):
            return False
        return is_present(family_of(step.tool), environment)

    def _run_elevated(self, command: Command, environment: EnvironmentSnapshot) -> str:
        if environment.platform == Platform.WINDOWS:
            question = f"This command requires administrator privileges:\n{command.command}"
        else:
            question = f"This command requires sudo privileges:\n{command.command}"

        if not self._prompter.confirm(question, PromptKind.ELEVATE):
            logger.info("Elevation declined: %s", command.command)
            raise ElevationDeclined()

        if environment.platform == Platform.WINDOWS:
            return self._runner.run(powershell_elevate(command.command))

        # The terminal owns the command from here; its exit code is advisory.
        code = self._runner.run_interactive(command.command)
        if code != 0:
            logger.warning("Terminal command exited %d: %s", code, command.command)
        self._prompter.confirm(
            "Command sent to terminal. Confirm when it has finished.",
            PromptKind.ACKNOWLEDGE,
        )
        return TERMINAL_OUTPUT


def _join(parts: list[str]) -> str:
    return "\n".join(p for p in parts if p)
