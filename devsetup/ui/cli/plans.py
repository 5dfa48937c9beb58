"""
CLI commands for stored plans.

Thin wrappers over ``devsetup.core.persistence.plan_store`` and
``SetupOrchestrator.execute_plan``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


def _state_dir(ctx: click.Context) -> Path:
    """Resolve the state directory from config or CWD."""
    from devsetup.main import _load

    settings, root = _load(ctx)
    state_dir = Path(settings.state_dir)
    if state_dir.is_absolute():
        return state_dir
    return root / state_dir


@click.group()
def plans() -> None:
    """Plans — list, show and run stored plans."""


@plans.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List stored plans, oldest first."""
    from devsetup.core.persistence.plan_store import PlanStore

    stored = PlanStore(_state_dir(ctx)).list_plans()

    if as_json:
        click.echo(json.dumps([p.model_dump(mode="json") for p in stored], indent=2))
        return

    if not stored:
        click.secho("No plans stored yet.", fg="yellow")
        return

    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}
    for p in stored:
        tools = ", ".join(dict.fromkeys(s.tool for s in p.steps)) or "-"
        click.echo(f"   {p.id}  ", nl=False)
        click.secho(f"{p.status:<8}", fg=status_color.get(p.status, "white"), nl=False)
        click.echo(f" {p.platform.value:<7} {tools}")


@plans.command("show")
@click.argument("plan_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show_cmd(ctx: click.Context, plan_id: str, as_json: bool) -> None:
    """Show one stored plan with its step statuses."""
    from devsetup.core.persistence.plan_store import PlanStore
    from devsetup.main import echo_plan

    stored = PlanStore(_state_dir(ctx)).load_plan(plan_id)
    if stored is None:
        click.secho(f"❌ Plan not found: {plan_id}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(stored.model_dump(mode="json"), indent=2))
        return

    echo_plan(stored)
    for step in stored.steps:
        if step.output:
            click.secho(f"   {step.id}:", fg="white", bold=True)
            for line in step.output.splitlines():
                click.echo(f"      {line}")


@plans.command("run")
@click.argument("plan_id")
@click.option("--mock", is_flag=True, help="Use the fake runner (no real commands).")
@click.pass_context
def run_cmd(ctx: click.Context, plan_id: str, mock: bool) -> None:
    """Run the pending steps of a stored plan."""
    from devsetup.adapters.prompts import ConsolePrompter
    from devsetup.core.context import SessionContext
    from devsetup.core.errors import DevSetupError
    from devsetup.core.models.request import ParsedRequest
    from devsetup.core.services.parser import StaticParser
    from devsetup.core.use_cases.setup import SetupOrchestrator
    from devsetup.main import _load, _runner, echo_plan

    settings, root = _load(ctx)
    orchestrator = SetupOrchestrator(
        context=SessionContext(project_root=root),
        parser=StaticParser(ParsedRequest()),
        prompter=ConsolePrompter(continue_on_failure=settings.continue_on_failure),
        runner=_runner(mock),
        settings=settings,
    )
    try:
        result = orchestrator.execute_plan(plan_id)
    except DevSetupError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    assert result.plan is not None and result.report is not None
    echo_plan(result.plan)
    if not result.report.all_ok:
        sys.exit(1)
