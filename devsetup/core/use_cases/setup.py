"""
Setup use case — from a developer's request to an audited execution.

This is the top-level orchestrator: it parses the request, builds the
plan, asks the operator for approval, executes the plan and persists
the outcome. The full vertical slice from user intent to audit entry.

Flow:
    request → parse → build plan → approval gate → execute → summary → persist
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.prompts import CANCEL, EXECUTE, SHOW_PLAN, Prompter, PromptKind
from devsetup.core.config.loader import Settings
from devsetup.core.context import SessionContext
from devsetup.core.engine.executor import ExecutionEngine, ExecutionReport
from devsetup.core.engine.planner import PlanBuilder
from devsetup.core.errors import PlanNotFoundError
from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import InstallationPlan
from devsetup.core.models.request import ParsedRequest, SetupRequest
from devsetup.core.persistence.audit import AuditEntry, AuditWriter
from devsetup.core.persistence.plan_store import PlanStore
from devsetup.core.services.parser import ParseError, RequestParser
from devsetup.core.services.probe import EnvironmentProber
from devsetup.core.services.synthesizers.registry import SynthesizerRegistry, default_registry

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of handling one setup request."""

    request: SetupRequest | None = None
    parsed: ParsedRequest | None = None
    plan: InstallationPlan | None = None
    report: ExecutionReport | None = None
    approved: bool = False
    error: str | None = None

    @property
    def executed(self) -> bool:
        return self.report is not None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["approved"] = self.approved
        if self.request:
            result["request_id"] = self.request.id
        if self.plan:
            result["plan"] = self.plan.model_dump(mode="json")
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def plan_details(plan: InstallationPlan) -> str:
    """Human-readable list of what a plan will install."""
    lines = ["=== Installation Plan Details ==="]
    for i, step in enumerate(plan.install_steps(), start=1):
        version = f" ({step.version})" if step.version else ""
        lines.append(f"{i}. Install {step.tool}{version}")
    lines.append(f"Steps: {len(plan.steps)}  Estimated time: {plan.estimated_time}")
    lines.append(f"Requires admin: {'Yes' if plan.requires_admin else 'No'}")
    return "\n".join(lines)


def summary_text(report: ExecutionReport) -> str:
    lines = [
        "=== Installation Summary ===",
        f"✓ Completed: {report.completed}",
        f"✗ Failed: {report.failed}",
        f"⊘ Skipped: {report.skipped}",
        f"… Pending: {report.pending}",
    ]
    if report.failed == 0:
        lines.append("✓ Development environment setup complete!")
    else:
        lines.append(f"Setup completed with {report.failed} failures. Check output for details.")
    return "\n".join(lines)


class SetupOrchestrator:
    """Coordinates parser, plan builder, operator and engine for a session."""

    def __init__(
        self,
        context: SessionContext,
        parser: RequestParser,
        prompter: Prompter,
        runner: CommandRunner,
        settings: Settings | None = None,
        prober: EnvironmentProber | None = None,
    ):
        self.context = context
        self.parser = parser
        self.prompter = prompter
        self.runner = runner
        self.settings = settings or Settings()
        self._prober = prober or EnvironmentProber(runner)

        state_dir = Path(self.settings.state_dir)
        if not state_dir.is_absolute():
            state_dir = context.project_root / state_dir
        self.store = PlanStore(state_dir)
        self.audit = AuditWriter(state_dir=state_dir)

    # ── Environment ─────────────────────────────────────────────

    def environment(self) -> EnvironmentSnapshot:
        """The session snapshot, probing the host on first use."""
        if self.context.environment is None:
            self.context.environment = self._prober.probe()
        return self.context.environment

    def registry_for(
        self, request: SetupRequest | None, plan: InstallationPlan | None = None,
    ) -> SynthesizerRegistry:
        """Synthesizers rooted at the request's project, else the plan's."""
        project_root = request.project_path if request else None
        if project_root is None and plan is not None:
            project_root = plan.project_path
        return default_registry(
            skip_installed=self.settings.skip_installed,
            project_root=project_root,
        )

    # ── Use cases ───────────────────────────────────────────────

    def plan_request(self, request: SetupRequest, save: bool = True) -> SetupResult:
        """Parse and plan, without asking or executing anything.

        The plan is stored for a later ``execute_plan`` unless ``save``
        is False; the approval flow stores it only once it runs.
        """
        result = SetupResult(request=request)
        env = self.environment()

        try:
            parsed = self.parser.parse(request, env)
        except ParseError as e:
            logger.error("Could not parse request %s: %s", request.id, e)
            result.error = str(e)
            return result
        result.parsed = parsed

        plan = PlanBuilder(self.registry_for(request)).build(request, parsed.tools, env)
        result.plan = plan
        self.context.remember(request, plan)
        if save:
            self.store.save_plan(plan)
        return result

    def handle_request(self, request: SetupRequest) -> SetupResult:
        """Parse, plan, get approval, execute and persist one request."""
        self.prompter.notify(f'Processing request: "{request.description}"')

        result = self.plan_request(request, save=False)
        if result.error or result.plan is None:
            return result
        plan = result.plan

        self.prompter.notify(
            f"Installation plan: {len(plan.steps)} steps, "
            f"estimated time {plan.estimated_time}, "
            f"requires admin: {'Yes' if plan.requires_admin else 'No'}"
        )

        result.approved = self.request_approval(plan)
        if not result.approved:
            self.prompter.notify("Installation cancelled by user")
            logger.info("Plan %s cancelled at approval", plan.id)
            return result

        result.report = self._run(plan, request)
        return result

    def execute_plan(self, plan_id: str) -> SetupResult:
        """Execute a stored plan by id, without an approval prompt.

        Raises:
            PlanNotFoundError: Unknown plan id.
            PlanBusyError: The plan is already being executed.
        """
        plan = self.context.plans.get(plan_id) or self.store.load_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan not found: {plan_id}")
        self.context.plans.setdefault(plan.id, plan)

        request = self.context.request_for(plan)
        result = SetupResult(request=request, plan=plan, approved=True)
        result.report = self._run(plan, request)
        return result

    def request_approval(self, plan: InstallationPlan) -> bool:
        """Operator gate: Show Plan / Execute / Cancel. Dismissal cancels."""
        if self.settings.auto_execute:
            logger.info("Auto-execute enabled; approval skipped for %s", plan.id)
            return True

        count = len(plan.install_steps())
        admin = " Admin privileges may be required." if plan.requires_admin else ""
        message = f"Ready to install {count} tools.{admin} Continue?"

        while True:
            choice = self.prompter.choose(message, [SHOW_PLAN, EXECUTE, CANCEL], PromptKind.APPROVE_PLAN)
            if choice != SHOW_PLAN:
                return choice == EXECUTE
            self.prompter.notify(plan_details(plan))

    # ── Internals ───────────────────────────────────────────────

    def _run(self, plan: InstallationPlan, request: SetupRequest | None) -> ExecutionReport:
        env = self.environment()
        engine = ExecutionEngine(
            self.registry_for(request, plan),
            self.runner,
            self.prompter,
            skip_installed=self.settings.skip_installed,
        )

        with self.context.running(plan.id):
            self.prompter.notify("Starting installation...")
            start = time.monotonic()
            report = engine.execute(plan, env)
            duration_ms = int((time.monotonic() - start) * 1000)

        self.prompter.notify(summary_text(report))
        self.store.save_plan(plan)
        self.audit.write(AuditEntry(
            plan_id=plan.id,
            request_id=plan.request_id,
            description=request.description if request else "",
            platform=plan.platform.value,
            tools=list(dict.fromkeys(s.tool for s in plan.steps)),
            status=report.status,
            steps_total=report.total,
            steps_completed=report.completed,
            steps_failed=report.failed,
            steps_skipped=report.skipped,
            steps_pending=report.pending,
            stopped=report.stopped,
            duration_ms=duration_ms,
            errors=report.errors,
        ))
        return report
