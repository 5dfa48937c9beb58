"""
Project setup — clone a repository, install its dependencies, seed its env file.

Project tasks are recognized by keyword in the tool name (clone,
dependencies, env, setup). Dependency commands are derived from the
manifests present in the project root; without a root there is
nothing to derive, so the lists are empty.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.core.models.environment import EnvironmentSnapshot, Platform
from devsetup.core.models.plan import (
    Command,
    HandlerCategory,
    InstallAction,
    InstallationStep,
    StepResult,
)
from devsetup.core.services.synthesizers.base import Synthesizer

logger = logging.getLogger(__name__)

PROJECT_TASKS = ("clone", "dependencies", "env", "setup")

# manifest → dependency install command, in execution order
MANIFEST_COMMANDS: tuple[tuple[str, str], ...] = (
    ("package.json", "npm install"),
    ("requirements.txt", "pip install -r requirements.txt"),
    ("pyproject.toml", "pip install -e ."),
    ("Gemfile", "bundle install"),
    ("go.mod", "go mod download"),
    ("Cargo.toml", "cargo fetch"),
)


def project_task(tool: str) -> str | None:
    """The project task a tool name refers to, if any."""
    lower = tool.lower()
    for task in PROJECT_TASKS:
        if task in lower:
            return task
    return None


def _is_repo_url(value: str | None) -> bool:
    return bool(value) and ("://" in value or value.startswith("git@"))


class ProjectSynthesizer(Synthesizer):
    """Handler for project-level tasks, rooted at ``project_root``."""

    def __init__(self, project_root: str | Path | None = None, skip_installed: bool = False):
        super().__init__(skip_installed=skip_installed)
        self.project_root = Path(project_root) if project_root else None

    @property
    def category(self) -> HandlerCategory:
        return HandlerCategory.PROJECT

    def manifests(self) -> list[str]:
        if self.project_root is None:
            return []
        return [name for name, _ in MANIFEST_COMMANDS if (self.project_root / name).is_file()]

    def detection_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        if project_task(step.tool) == "clone":
            return [Command(command="git --version", platform=env.platform, description="Check Git is available")]
        return []

    def install_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        task = project_task(step.tool)
        if task == "clone":
            return self._clone(step, env)
        if task in ("dependencies", "setup"):
            return self._dependencies(env)
        if task == "env":
            return self._env_file(env)
        return []

    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        if step.action == InstallAction.DETECT and project_task(step.tool) != "clone":
            found = self.manifests()
            if found:
                return StepResult.ok(f"Found project manifests: {', '.join(found)}")
            return StepResult.ok("No project manifests found")
        return StepResult.ok(f"Project {step.action.value} completed")

    # ── Internals ───────────────────────────────────────────────

    def _in_root(self, command: str, env: EnvironmentSnapshot) -> str:
        if self.project_root is None:
            return command
        cd = "cd /d" if env.platform == Platform.WINDOWS else "cd"
        return f'{cd} "{self.project_root}" && {command}'

    def _clone(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        if not _is_repo_url(step.version):
            logger.debug("Clone task %r carries no repository URL", step.tool)
            return []
        return [
            Command(
                command=self._in_root(f"git clone {step.version}", env),
                platform=env.platform,
                description=f"Clone {step.version}",
            ),
        ]

    def _dependencies(self, env: EnvironmentSnapshot) -> list[Command]:
        found = set(self.manifests())
        return [
            Command(
                command=self._in_root(command, env),
                platform=env.platform,
                description=f"Install dependencies from {manifest}",
            )
            for manifest, command in MANIFEST_COMMANDS
            if manifest in found
        ]

    def _env_file(self, env: EnvironmentSnapshot) -> list[Command]:
        if self.project_root is None:
            return []
        example = self.project_root / ".env.example"
        if not example.is_file() or (self.project_root / ".env").exists():
            return []
        copy = "copy" if env.platform == Platform.WINDOWS else "cp"
        return [
            Command(
                command=self._in_root(f"{copy} .env.example .env", env),
                platform=env.platform,
                description="Create .env from .env.example",
            ),
        ]
