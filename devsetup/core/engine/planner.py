"""
Plan builder — expand a parsed request into an ordered installation plan.

Flow:
    tools → sort by priority → classify → detect/install/verify triad
          → preview commands (requires_admin) → estimate → plan

Building cannot fail: unroutable tools still get their triad and
simply synthesize no commands.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import (
    HandlerCategory,
    InstallAction,
    InstallationPlan,
    InstallationStep,
)
from devsetup.core.models.request import SetupRequest, ToolRequest
from devsetup.core.services.classifier import classify_request
from devsetup.core.services.synthesizers.registry import SynthesizerRegistry

logger = logging.getLogger(__name__)

# (exclusive upper bound on step count, label)
ESTIMATE_BUCKETS: tuple[tuple[int, str], ...] = (
    (5, "<5 minutes"),
    (8, "5-15 minutes"),
    (15, "15-30 minutes"),
)
ESTIMATE_MAX = "30+ minutes"


def estimate_time(step_count: int) -> str:
    """Rough wall-clock bucket for a plan of ``step_count`` steps."""
    for bound, label in ESTIMATE_BUCKETS:
        if step_count < bound:
            return label
    return ESTIMATE_MAX


def generate_plan_id() -> str:
    """Generate a unique plan ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"plan-{now}-{short}"


class PlanBuilder:
    """Turn tool requests into an ``InstallationPlan``."""

    def __init__(self, registry: SynthesizerRegistry):
        self._registry = registry

    def build(
        self,
        request: SetupRequest,
        tools: list[ToolRequest],
        environment: EnvironmentSnapshot,
    ) -> InstallationPlan:
        # sorted() is stable: equal priorities keep request order.
        ordered = sorted(tools, key=lambda t: t.priority)

        steps: list[InstallationStep] = []
        for tool in ordered:
            category = classify_request(tool)
            logger.debug("Classified %r → %s", tool.name, category.value)
            for action, step_category in (
                (InstallAction.DETECT, category),
                (InstallAction.INSTALL, category),
                (InstallAction.VERIFY, HandlerCategory.VERIFICATION),
            ):
                steps.append(InstallationStep(
                    id=f"step-{len(steps) + 1}",
                    category=step_category,
                    action=action,
                    tool=tool.name,
                    version=tool.version,
                    tool_category=category,
                ))

        plan = InstallationPlan(
            id=generate_plan_id(),
            request_id=request.id,
            project_path=request.project_path,
            steps=steps,
            estimated_time=estimate_time(len(steps)),
            requires_admin=self._requires_admin(steps, environment),
            platform=environment.platform,
        )
        logger.info(
            "Built plan %s: %d tools, %d steps, admin=%s, estimate=%s",
            plan.id, len(ordered), len(steps), plan.requires_admin, plan.estimated_time,
        )
        return plan

    def _requires_admin(self, steps: list[InstallationStep], env: EnvironmentSnapshot) -> bool:
        """Preview every step's commands; any elevated one elevates the plan."""
        for step in steps:
            synthesizer = self._registry.for_step(step)
            if synthesizer is None:
                continue
            if any(c.requires_admin for c in synthesizer.plan(step, env)):
                return True
        return False
