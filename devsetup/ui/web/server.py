"""
Web API server — Flask app factory.

Creates and configures the Flask application that exposes planning
and execution over JSON. One ``SessionContext`` is shared by all
requests of an app; the orchestrator guards plans in flight.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask

from devsetup.adapters.base import CommandRunner
from devsetup.core.config.loader import Settings
from devsetup.core.context import SessionContext
from devsetup.core.services.parser import Completion
from devsetup.core.services.probe import EnvironmentProber

logger = logging.getLogger(__name__)

EXTENSION_KEY = "devsetup"


def create_app(
    project_root: Path | None = None,
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
    prober: EnvironmentProber | None = None,
    completion: Completion | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        project_root: Directory the state dir is resolved against.
        settings: Run settings (defaults when None).
        runner: Command runner; the real shell when None.
        prober: Environment prober; probes through ``runner`` when None.
        completion: Model behind free-text requests; Claude, built from
            the ``agent`` settings on first use, when None.

    Returns:
        Configured Flask application.
    """
    if runner is None:
        from devsetup.adapters.shell.command import ShellRunner

        runner = ShellRunner()

    app = Flask(__name__)
    app.config["PROJECT_ROOT"] = str(project_root or Path.cwd())
    app.config["MAX_CONTENT_LENGTH"] = 1024 * 1024  # 1 MB request limit

    app.extensions[EXTENSION_KEY] = {
        "context": SessionContext(project_root=Path(app.config["PROJECT_ROOT"])),
        "settings": settings or Settings(),
        "runner": runner,
        "prober": prober or EnvironmentProber(runner),
        "completion": completion,
    }

    from devsetup.ui.web.routes_api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    logger.info("Web API app created (root=%s)", app.config["PROJECT_ROOT"])
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 8000,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Starting web API on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)
