"""
Synthesizer base — turn a step plus the host snapshot into commands.

Synthesizers are pure with respect to the host: they read the
snapshot and the recipe table and return ``Command`` lists. Nothing
here runs anything. The engine runs the commands, then calls
``execute()`` for the handler's own bookkeeping.

To create a new synthesizer:
    1. Subclass Synthesizer
    2. Implement category, detection_commands, install_commands, execute
    3. Register it in the SynthesizerRegistry
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from devsetup.core.data import ARCH_MAP, MANUAL, RECIPES, SCRIPT
from devsetup.core.models.environment import EnvironmentSnapshot, Platform
from devsetup.core.models.plan import (
    Command,
    HandlerCategory,
    InstallAction,
    InstallationStep,
    StepResult,
)
from devsetup.core.services.classifier import PACKAGE_MANAGER_RULES, ToolFamily, family_of

logger = logging.getLogger(__name__)

MANAGER_FAMILIES = frozenset(family for _, family in PACKAGE_MANAGER_RULES)


# ── Recipe helpers ──────────────────────────────────────────────


def recipe_for(tool: str) -> dict | None:
    """The recipe for a tool name, or None for unknown tools."""
    return RECIPES.get(family_of(tool))


def for_platform(mapping: dict, platform: Platform):  # type: ignore[no-untyped-def]
    """Pick a per-platform value, falling back to ``_default``."""
    if platform in mapping:
        return mapping[platform]
    return mapping.get("_default")


def normalize_arch(architecture: str) -> str:
    if not architecture:
        return "amd64"
    return ARCH_MAP.get(architecture, architecture.lower())


def render(template: str, version: str | None, architecture: str) -> str:
    """Fill a command template. ``version`` is injected verbatim."""
    return template.format(version=version or "", arch=normalize_arch(architecture))


def is_present(family: ToolFamily, env: EnvironmentSnapshot) -> bool:
    """Whether the snapshot saw this family installed."""
    if family in MANAGER_FAMILIES:
        return env.has_manager(family.value)
    return env.is_installed(family.value)


def select_method(recipe: dict, env: EnvironmentSnapshot) -> tuple[str, list[dict]] | None:
    """Walk the platform's fallback chain and take the first usable method.

    Package manager methods are usable only when the snapshot reports
    the manager installed. ``_script`` and ``_manual`` always are.
    """
    chain = recipe.get("install", {}).get(env.platform, [])
    for method, steps in chain:
        if method in (SCRIPT, MANUAL) or env.has_manager(method):
            return method, steps
    return None


# ── Base class ──────────────────────────────────────────────────


class Synthesizer(ABC):
    """Abstract base class for command synthesizers."""

    def __init__(self, skip_installed: bool = False):
        self.skip_installed = skip_installed

    @property
    @abstractmethod
    def category(self) -> HandlerCategory:
        """The handler category this synthesizer owns."""

    def can_handle(self, step: InstallationStep) -> bool:
        return step.category == self.category

    @abstractmethod
    def detection_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        """Read-only probes for the step's tool. Never elevated."""

    @abstractmethod
    def install_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        """Commands that install the step's tool on this host."""

    def verification_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        return []

    def plan(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        """Commands for the step, dispatched on its action."""
        if step.action == InstallAction.DETECT:
            return self.detection_commands(step, env)
        if step.action == InstallAction.INSTALL:
            return self.install_commands(step, env)
        if step.action == InstallAction.VERIFY:
            return self.verification_commands(step, env)
        return []

    @abstractmethod
    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        """Post-command bookkeeping. Must report success explicitly."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} category={self.category.value!r}>"


class RecipeSynthesizer(Synthesizer):
    """Shared recipe-table behaviour for tool-installing handlers."""

    def detection_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        recipe = recipe_for(step.tool)
        if recipe is None:
            return []
        return [
            Command(
                command=for_platform(recipe["detect"], env.platform),
                requires_admin=False,
                platform=env.platform,
                description=f"Check {recipe['label']} installation",
            ),
        ]

    def install_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        family = family_of(step.tool)
        recipe = RECIPES.get(family)
        if recipe is None:
            logger.debug("No recipe for %r; nothing to install", step.tool)
            return []

        if self.skip_installed and is_present(family, env):
            logger.info("%s already installed; skipping install commands", recipe["label"])
            return []

        picked = select_method(recipe, env)
        if picked is None:
            logger.warning("No install method for %s on %s", recipe["label"], env.platform.value)
            return []
        method, steps = picked
        version = step.version or recipe.get("default_version")
        logger.debug("Install %s via %s (version=%s)", recipe["label"], method, version)

        return [
            Command(
                command=render(s["command"], version, env.architecture),
                requires_admin=s["sudo"],
                platform=env.platform,
                description=s["label"],
            )
            for s in steps
        ]

    def label(self, step: InstallationStep) -> str:
        recipe = recipe_for(step.tool)
        return recipe["label"] if recipe else step.tool
