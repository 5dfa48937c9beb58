"""
Environment prober — build the host snapshot.

Read-only probes: runs version commands through the injected runner
and parses the output. Never raises: a probe that fails for any reason
records the tool as not installed.
"""

from __future__ import annotations

import logging
import os
import platform as _platform
import re
from pathlib import Path

from devsetup.adapters.base import CommandError, CommandRunner
from devsetup.core.models.environment import (
    EnvironmentSnapshot,
    PackageManagerDetection,
    Platform,
    ToolDetection,
)

logger = logging.getLogger(__name__)

# First ``major.minor[.patch]`` token, optional leading "v".
_VERSION_RE = re.compile(r"v?(\d+\.\d+(?:\.\d+)?)")

# tool → (probe command, binary). ``{py}`` / ``{pip}`` are resolved per
# platform because Windows installs python without the "3" suffix.
PROBE_COMMANDS: dict[str, tuple[str, str]] = {
    "node":      ("node --version",           "node"),
    "npm":       ("npm --version",            "npm"),
    "python":    ("{py} --version",           "{py}"),
    "pip":       ("{pip} --version",          "{pip}"),
    "java":      ("java --version",           "java"),
    "git":       ("git --version",            "git"),
    "docker":    ("docker --version",         "docker"),
    "kubectl":   ("kubectl version --client", "kubectl"),
    "ruby":      ("ruby --version",           "ruby"),
    "go":        ("go version",               "go"),
    "rust":      ("rustc --version",          "rustc"),
    "php":       ("php --version",            "php"),
    "terraform": ("terraform version",        "terraform"),
    "vscode":    ("code --version",           "code"),
}

# Package managers, gated by platform.
MANAGER_COMMANDS: dict[str, tuple[str, tuple[Platform, ...]]] = {
    "homebrew":   ("brew --version",   (Platform.MACOS, Platform.LINUX)),
    "chocolatey": ("choco --version",  (Platform.WINDOWS,)),
    "winget":     ("winget --version", (Platform.WINDOWS,)),
    "apt":        ("apt --version",    (Platform.LINUX,)),
    "yum":        ("yum --version",    (Platform.LINUX,)),
}


def detect_platform(system: str | None = None) -> Platform:
    """Map the OS report (``platform.system()``) to a Platform."""
    system = system if system is not None else _platform.system()
    if system == "Darwin":
        return Platform.MACOS
    if system == "Windows":
        return Platform.WINDOWS
    return Platform.LINUX


def detect_shell(plat: Platform) -> str:
    shell = os.environ.get("SHELL", "")
    if shell:
        return Path(shell).name
    return "powershell" if plat == Platform.WINDOWS else "bash"


def parse_version(output: str) -> str | None:
    """Extract a version from probe output.

    The first ``major.minor[.patch]`` token wins; otherwise the first
    non-empty output line is returned verbatim.
    """
    match = _VERSION_RE.search(output)
    if match:
        return match.group(1)
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return None


class EnvironmentProber:
    """Probe the host once and return an immutable snapshot."""

    def __init__(self, runner: CommandRunner, system: str | None = None):
        self._runner = runner
        self._system = system

    def probe(self) -> EnvironmentSnapshot:
        plat = detect_platform(self._system)
        logger.info("Probing environment (platform=%s)", plat.value)

        managers = tuple(
            self._probe_manager(name, command)
            for name, (command, platforms) in MANAGER_COMMANDS.items()
            if plat in platforms
        )
        tools = tuple(
            self._probe_tool(name, command, binary, plat)
            for name, (command, binary) in PROBE_COMMANDS.items()
        )

        snapshot = EnvironmentSnapshot(
            platform=plat,
            architecture=_platform.machine(),
            shell=detect_shell(plat),
            home_dir=str(Path.home()),
            tools=tools,
            package_managers=managers,
        )
        logger.info(
            "Probe done: %d/%d tools, managers=%s",
            len(snapshot.installed_tools()),
            len(tools),
            [pm.name for pm in snapshot.installed_managers()] or "none",
        )
        return snapshot

    # ── Internals ───────────────────────────────────────────────

    def _probe_tool(self, name: str, command: str, binary: str, plat: Platform) -> ToolDetection:
        py, pip = ("python", "pip") if plat == Platform.WINDOWS else ("python3", "pip3")
        command = command.format(py=py, pip=pip)
        binary = binary.format(py=py, pip=pip)

        try:
            output = self._runner.run(command)
        except CommandError as e:
            logger.debug("Probe %s: not installed (%s)", name, e)
            return ToolDetection(tool=name, installed=False)

        return ToolDetection(
            tool=name,
            installed=True,
            version=parse_version(output),
            path=self._runner.which(binary),
        )

    def _probe_manager(self, name: str, command: str) -> PackageManagerDetection:
        try:
            output = self._runner.run(command)
        except CommandError as e:
            logger.debug("Probe %s: not installed (%s)", name, e)
            return PackageManagerDetection(name=name, installed=False)  # type: ignore[arg-type]
        return PackageManagerDetection(
            name=name,  # type: ignore[arg-type]
            installed=True,
            version=parse_version(output),
        )
