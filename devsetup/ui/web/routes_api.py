"""
API routes — REST endpoints for planning and execution.

All endpoints return JSON. Grouped under /api/ prefix. Execution is
headless: prompts are answered by a ``PolicyPrompter`` built from the
app settings.
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from devsetup.adapters.prompts import PolicyPrompter
from devsetup.core.errors import PlanBusyError, PlanNotFoundError
from devsetup.core.models.plan import InstallationPlan
from devsetup.core.models.request import ParsedRequest, SetupRequest
from devsetup.core.services.parser import (
    Completion,
    ParseError,
    RequestParser,
    ResponseParser,
    StaticParser,
    parse_response_text,
    parse_tool_specs,
)
from devsetup.core.use_cases.setup import SetupOrchestrator

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _state() -> dict:
    return current_app.extensions["devsetup"]


def _policy_prompter() -> PolicyPrompter:
    settings = _state()["settings"]
    return PolicyPrompter(
        approve_plan=True,
        approve_elevation=settings.approve_elevation,
        continue_on_failure=settings.continue_on_failure,
    )


def _orchestrator(
    parser: RequestParser | None = None,
    prompter: PolicyPrompter | None = None,
) -> SetupOrchestrator:
    state = _state()
    return SetupOrchestrator(
        context=state["context"],
        parser=parser or StaticParser(ParsedRequest()),
        prompter=prompter or _policy_prompter(),
        runner=state["runner"],
        settings=state["settings"],
        prober=state["prober"],
    )


def _plan_summary(plan: InstallationPlan) -> dict:
    return {
        "id": plan.id,
        "request_id": plan.request_id,
        "created_at": plan.created_at,
        "platform": plan.platform.value,
        "steps": len(plan.steps),
        "requires_admin": plan.requires_admin,
        "estimated_time": plan.estimated_time,
        "status": plan.status,
    }


def _completion() -> Completion:
    """The app's model backend, built from settings on first use."""
    state = _state()
    if state["completion"] is None:
        from devsetup.adapters.llm.claude import ClaudeCompletion

        state["completion"] = ClaudeCompletion.from_settings(state["settings"].agent)
    return state["completion"]


def _parser_for(data: dict) -> RequestParser:
    """A parser reply, tools as ``name@version`` strings or objects,
    or else a free-text ``description`` for the model.
    """
    if "response" in data:
        return StaticParser(parse_response_text(str(data["response"])))

    tools = data.get("tools")
    if tools is None and str(data.get("description", "")).strip():
        return ResponseParser(_completion())
    if not isinstance(tools, list) or not tools:
        raise ParseError("Provide a 'description', a non-empty 'tools' list or a 'response' text")
    if all(isinstance(t, str) for t in tools):
        return StaticParser(ParsedRequest(tools=parse_tool_specs(tools)))
    try:
        parsed = ParsedRequest.model_validate({"intent": data.get("intent", "tool_install"), "tools": tools})
    except ValidationError as e:
        raise ParseError(f"Invalid tools: {e}") from e
    return StaticParser(parsed)


# ── System ───────────────────────────────────────────────────────────


@api_bp.route("/system")
def api_system():  # type: ignore[no-untyped-def]
    """Environment snapshot (probed once per app)."""
    env = _orchestrator().environment()
    return jsonify(env.model_dump(mode="json"))


# ── Plans ────────────────────────────────────────────────────────────


@api_bp.route("/plans")
def api_plans():  # type: ignore[no-untyped-def]
    """List stored plans, oldest first."""
    plans = _orchestrator().store.list_plans()
    return jsonify({"plans": [_plan_summary(p) for p in plans]})


@api_bp.route("/plans", methods=["POST"])
def api_create_plan():  # type: ignore[no-untyped-def]
    """Build (but don't execute) a plan."""
    data = request.get_json(silent=True) or {}
    try:
        parser = _parser_for(data)
    except ParseError as e:
        return jsonify({"error": str(e)}), 400

    setup_request = SetupRequest(
        description=str(data.get("description", "")),
        project_path=data.get("project_path"),
    )
    result = _orchestrator(parser).plan_request(setup_request)
    if result.error:
        return jsonify({"error": result.error}), 400
    return jsonify(result.to_dict()), 201


@api_bp.route("/plans/<plan_id>")
def api_plan(plan_id: str):  # type: ignore[no-untyped-def]
    """One plan, with every step."""
    orchestrator = _orchestrator()
    plan = orchestrator.context.plans.get(plan_id) or orchestrator.store.load_plan(plan_id)
    if plan is None:
        return jsonify({"error": f"Plan not found: {plan_id}"}), 404
    return jsonify(plan.model_dump(mode="json"))


@api_bp.route("/plans/<plan_id>/execute", methods=["POST"])
def api_execute_plan(plan_id: str):  # type: ignore[no-untyped-def]
    """Execute a plan headlessly."""
    prompter = _policy_prompter()
    orchestrator = _orchestrator(prompter=prompter)
    try:
        result = orchestrator.execute_plan(plan_id)
    except PlanNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PlanBusyError as e:
        return jsonify({"error": str(e)}), 409

    body = result.to_dict()
    body["messages"] = prompter.messages
    return jsonify(body)


# ── Health ───────────────────────────────────────────────────────────


@api_bp.route("/health")
def api_health():  # type: ignore[no-untyped-def]
    return jsonify({"status": "ok"})
