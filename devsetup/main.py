"""
devsetup — CLI entrypoint.

Usage:
    devsetup --help
    devsetup system
    devsetup plan git python@3.12
    devsetup install node docker --yes
    devsetup install --describe "I need Node, Python 3.11, and Docker"
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import resolve_level, setup_logging

_STATUS_ICON = {
    "completed": "✓",
    "failed": "✗",
    "skipped": "⊘",
    "pending": "·",
    "in_progress": "…",
    "requires_approval": "?",
}
_STATUS_COLOR = {"completed": "green", "failed": "red", "skipped": "yellow"}


@click.group()
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to devsetup.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devsetup — plan and run developer environment setup."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


# ── Shared helpers ──────────────────────────────────────────────


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


def _load(ctx: click.Context):  # type: ignore[no-untyped-def]
    """Settings plus the directory state is kept under."""
    from devsetup.core.config.loader import ConfigError, config_root, find_config_file, load_settings

    config_path: Path | None = ctx.obj.get("config_path")
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        _fail(str(e))
    root = config_root(config_path or find_config_file())
    return settings, root


def _runner(mock: bool):  # type: ignore[no-untyped-def]
    if mock:
        from devsetup.adapters.mock import FakeRunner

        return FakeRunner()
    from devsetup.adapters.shell.command import ShellRunner

    return ShellRunner()


def _parser(specs, response_file, description, settings):  # type: ignore[no-untyped-def]
    """Parser for the CLI: a saved parser reply, free text for Claude, or tool specs."""
    from devsetup.core.services.parser import ParseError, ResponseParser, StaticParser, parse_response_text

    try:
        if response_file:
            text = Path(response_file).read_text(encoding="utf-8")
            return StaticParser(parse_response_text(text))
        if description:
            from devsetup.adapters.llm.claude import ClaudeCompletion

            return ResponseParser(ClaudeCompletion.from_settings(settings.agent))
        if not specs:
            _fail("Name at least one tool (e.g. git python@3.12), or pass --describe or --response-file.")
        return StaticParser.from_specs(specs)
    except (ParseError, OSError) as e:
        _fail(str(e))


def echo_plan(plan) -> None:  # type: ignore[no-untyped-def]
    """Print a plan's steps with their status."""
    click.secho(f"\n📝 Plan {plan.id}", fg="cyan", bold=True)
    click.echo(f"   Platform: {plan.platform.value}")
    click.echo(f"   Steps: {len(plan.steps)}   Estimated time: {plan.estimated_time}")
    click.echo(f"   Requires admin: {'Yes' if plan.requires_admin else 'No'}")
    click.echo()
    for step in plan.steps:
        status = step.status.value
        icon = _STATUS_ICON.get(status, " ")
        click.secho(f"   {icon} ", fg=_STATUS_COLOR.get(status, "white"), nl=False)
        click.echo(f"{step.id:<8} {step.label:<40} [{step.category.value}]")
        if step.error:
            click.secho(f"        {step.error}", fg="red")
    click.echo()


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use the fake runner (no real commands).")
def system(as_json: bool, mock: bool) -> None:
    """Probe the host and show platform, package managers and tools."""
    from devsetup.core.services.probe import EnvironmentProber

    env = EnvironmentProber(_runner(mock)).probe()

    if as_json:
        click.echo(json.dumps(env.model_dump(mode="json"), indent=2))
        return

    click.secho(f"\n🖥  {env.platform.value} ({env.architecture or 'unknown arch'})", fg="cyan", bold=True)
    click.echo(f"   Shell: {env.shell}")
    click.echo(f"   Home:  {env.home_dir}")

    click.echo()
    click.secho("   Package managers:", fg="white", bold=True)
    for pm in env.package_managers:
        icon = "✅" if pm.installed else "❌"
        version = f" {pm.version}" if pm.version else ""
        click.echo(f"     {icon} {pm.name}{version}")

    click.echo()
    click.secho("   Tools:", fg="white", bold=True)
    for tool in env.tools:
        icon = "✅" if tool.installed else "❌"
        version = f" {tool.version}" if tool.version else ""
        path = f"  → {tool.path}" if tool.path else ""
        click.echo(f"     {icon} {tool.tool}{version}{path}")
    click.echo()


@cli.command()
@click.argument("specs", nargs=-1)
@click.option("--describe", "-d", "description", default=None,
              help='Describe what you need, e.g. "Node 20 and Docker"; parsed by Claude.')
@click.option("--response-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Read a saved parser reply (JSON) instead of tool specs.")
@click.option("--project", "project_path", type=click.Path(file_okay=False), default=None,
              help="Project directory for project tasks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use the fake runner (no real commands).")
@click.pass_context
def plan(
    ctx: click.Context,
    specs: tuple[str, ...],
    description: str | None,
    response_file: str | None,
    project_path: str | None,
    as_json: bool,
    mock: bool,
) -> None:
    """Build and show a plan for SPECS ([category:]name[@version]) without running it."""
    from devsetup.adapters.prompts import ConsolePrompter
    from devsetup.core.context import SessionContext
    from devsetup.core.models.request import SetupRequest
    from devsetup.core.use_cases.setup import SetupOrchestrator

    settings, root = _load(ctx)
    parser = _parser(specs, response_file, description, settings)
    orchestrator = SetupOrchestrator(
        context=SessionContext(project_root=root),
        parser=parser,
        prompter=ConsolePrompter(continue_on_failure=settings.continue_on_failure),
        runner=_runner(mock),
        settings=settings,
    )
    result = orchestrator.plan_request(
        SetupRequest(description=description or " ".join(specs), project_path=project_path)
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error or result.plan is None:
        _fail(result.error or "No plan was built")
    echo_plan(result.plan)


@cli.command()
@click.argument("specs", nargs=-1)
@click.option("--describe", "-d", "description", default=None,
              help='Describe what you need, e.g. "Node 20 and Docker"; parsed by Claude.')
@click.option("--response-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Read a saved parser reply (JSON) instead of tool specs.")
@click.option("--project", "project_path", type=click.Path(file_okay=False), default=None,
              help="Project directory for project tasks.")
@click.option("--yes", "-y", "auto_execute", is_flag=True, help="Skip the approval prompt.")
@click.option("--skip-installed", is_flag=True, help="Don't reinstall tools that are already present.")
@click.option("--mock", is_flag=True, help="Use the fake runner (no real commands).")
@click.pass_context
def install(
    ctx: click.Context,
    specs: tuple[str, ...],
    description: str | None,
    response_file: str | None,
    project_path: str | None,
    auto_execute: bool,
    skip_installed: bool,
    mock: bool,
) -> None:
    """Plan, approve and run setup for SPECS ([category:]name[@version])."""
    from devsetup.adapters.prompts import ConsolePrompter
    from devsetup.core.context import SessionContext
    from devsetup.core.models.request import SetupRequest
    from devsetup.core.use_cases.setup import SetupOrchestrator

    settings, root = _load(ctx)
    overrides = {}
    if auto_execute:
        overrides["auto_execute"] = True
    if skip_installed:
        overrides["skip_installed"] = True
    settings = settings.model_copy(update=overrides)

    parser = _parser(specs, response_file, description, settings)
    orchestrator = SetupOrchestrator(
        context=SessionContext(project_root=root),
        parser=parser,
        prompter=ConsolePrompter(continue_on_failure=settings.continue_on_failure),
        runner=_runner(mock),
        settings=settings,
    )
    result = orchestrator.handle_request(
        SetupRequest(
            description=description or " ".join(specs) or "setup from parser reply",
            project_path=project_path,
        )
    )

    if result.error:
        _fail(result.error)
    if not result.approved or result.report is None:
        return

    assert result.plan is not None  # guaranteed once executed
    if not ctx.obj.get("quiet"):
        echo_plan(result.plan)
    if not result.report.all_ok:
        sys.exit(1)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", "-p", default=8000, type=int, help="Port number.")
@click.option("--mock", is_flag=True, help="Use the fake runner (no real commands).")
@click.pass_context
def web(ctx: click.Context, host: str, port: int, mock: bool) -> None:
    """Start the JSON web API."""
    from devsetup.ui.web.server import create_app, run_server

    settings, root = _load(ctx)
    app = create_app(project_root=root, settings=settings, runner=_runner(mock))
    debug = ctx.obj.get("debug", False)

    click.echo()
    click.secho("⚡ devsetup — Web API", bold=True)
    click.echo(f"   API:     http://{host}:{port}/api")
    click.echo(f"   Project: {root}")
    if mock:
        click.secho("   Mode: mock (no real execution)", fg="yellow")
    if debug:
        click.secho("   Logging: DEBUG (all output)", fg="yellow")
    click.echo()

    run_server(app, host=host, port=port, debug=debug)


# ── Register sub-command groups from devsetup/ui/cli/ ─────────────

from devsetup.ui.cli.plans import plans  # noqa: E402

cli.add_command(plans)


if __name__ == "__main__":
    cli()
