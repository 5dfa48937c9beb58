"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from devsetup.adapters.mock import FakeRunner
from devsetup.adapters.prompts import ScriptedPrompter
from devsetup.core.models.environment import (
    EnvironmentSnapshot,
    PackageManagerDetection,
    Platform,
    ToolDetection,
)


def make_snapshot(
    platform: Platform,
    managers: tuple[str, ...] = (),
    installed: dict[str, str] | None = None,
    architecture: str = "x86_64",
) -> EnvironmentSnapshot:
    """Build a snapshot directly, without probing anything."""
    installed = installed or {}
    return EnvironmentSnapshot(
        platform=platform,
        architecture=architecture,
        shell="powershell" if platform == Platform.WINDOWS else "bash",
        home_dir="/home/dev",
        tools=tuple(
            ToolDetection(tool=name, installed=True, version=version, path=f"/usr/bin/{name}")
            for name, version in installed.items()
        ),
        package_managers=tuple(
            PackageManagerDetection(name=name, installed=True, version="1.0") for name in managers
        ),
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """Prompter with no queued answers: every prompt is dismissed."""
    return ScriptedPrompter()


@pytest.fixture
def mac_env() -> EnvironmentSnapshot:
    """macOS with Homebrew and nothing else."""
    return make_snapshot(Platform.MACOS, managers=("homebrew",), architecture="arm64")


@pytest.fixture
def windows_env() -> EnvironmentSnapshot:
    """Windows with Chocolatey and nothing else."""
    return make_snapshot(Platform.WINDOWS, managers=("chocolatey",), architecture="AMD64")


@pytest.fixture
def linux_env() -> EnvironmentSnapshot:
    """Debian-like Linux with apt and nothing else."""
    return make_snapshot(Platform.LINUX, managers=("apt",))


@pytest.fixture
def tmp_state_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for state files."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def make_env():
    """Factory for snapshots with chosen managers and installed tools."""
    return make_snapshot
