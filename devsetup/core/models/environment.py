"""
Environment snapshot — what the host looks like.

Built once per session by the prober and read-only afterwards.
Synthesizers consult it to pick an install strategy; the language
handler consults it to report whether a tool is already present.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Host operating system, keyed by the OS report value."""

    MACOS = "darwin"
    WINDOWS = "win32"
    LINUX = "linux"


PackageManagerName = Literal["homebrew", "chocolatey", "apt", "yum", "winget"]


class ToolDetection(BaseModel):
    """Result of probing one tool on the host."""

    model_config = ConfigDict(frozen=True)

    tool: str
    installed: bool = False
    version: str | None = None
    path: str | None = None


class PackageManagerDetection(BaseModel):
    """Result of probing one package manager on the host."""

    model_config = ConfigDict(frozen=True)

    name: PackageManagerName
    installed: bool = False
    version: str | None = None


class EnvironmentSnapshot(BaseModel):
    """Immutable view of the host, produced by a single probe.

    Rebuilding requires a fresh probe; nothing mutates a snapshot.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform
    architecture: str = ""
    shell: str = "bash"
    home_dir: str = ""
    tools: tuple[ToolDetection, ...] = Field(default_factory=tuple)
    package_managers: tuple[PackageManagerDetection, ...] = Field(default_factory=tuple)

    def has_manager(self, name: str) -> bool:
        """Whether the named package manager was detected as installed."""
        return any(pm.name == name and pm.installed for pm in self.package_managers)

    def detection(self, tool: str) -> ToolDetection | None:
        """Look up a tool detection by name (case-insensitive)."""
        wanted = tool.lower()
        for detection in self.tools:
            if detection.tool.lower() == wanted:
                return detection
        return None

    def is_installed(self, tool: str) -> bool:
        detection = self.detection(tool)
        return detection is not None and detection.installed

    def installed_tools(self) -> list[ToolDetection]:
        return [t for t in self.tools if t.installed]

    def installed_managers(self) -> list[PackageManagerDetection]:
        return [pm for pm in self.package_managers if pm.installed]
