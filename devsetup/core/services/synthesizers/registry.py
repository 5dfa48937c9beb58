"""
Synthesizer registry — map a handler category to its synthesizer.

The plan builder and the execution engine never pick a synthesizer
themselves; they ask the registry for the one owning a step.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.core.models.plan import HandlerCategory, InstallationStep
from devsetup.core.services.synthesizers.base import Synthesizer
from devsetup.core.services.synthesizers.ide_tool import IDEToolSynthesizer
from devsetup.core.services.synthesizers.language import LanguageSynthesizer
from devsetup.core.services.synthesizers.package_manager import PackageManagerSynthesizer
from devsetup.core.services.synthesizers.project import ProjectSynthesizer
from devsetup.core.services.synthesizers.verification import VerificationSynthesizer

logger = logging.getLogger(__name__)


class SynthesizerRegistry:
    """Central lookup for synthesizers, one per handler category."""

    def __init__(self) -> None:
        self._synthesizers: dict[HandlerCategory, Synthesizer] = {}

    def register(self, synthesizer: Synthesizer) -> None:
        category = synthesizer.category
        if category in self._synthesizers:
            logger.warning("Overwriting existing synthesizer: %s", category.value)
        self._synthesizers[category] = synthesizer
        logger.debug("Registered synthesizer: %s", category.value)

    def get(self, category: HandlerCategory) -> Synthesizer | None:
        return self._synthesizers.get(category)

    def for_step(self, step: InstallationStep) -> Synthesizer | None:
        """The synthesizer that owns ``step``, or None if nothing does."""
        synthesizer = self._synthesizers.get(step.category)
        if synthesizer is not None and synthesizer.can_handle(step):
            return synthesizer
        return None

    def list_categories(self) -> list[str]:
        return [c.value for c in self._synthesizers]


def default_registry(
    skip_installed: bool = False,
    project_root: str | Path | None = None,
) -> SynthesizerRegistry:
    """A registry with the five built-in synthesizers."""
    registry = SynthesizerRegistry()
    registry.register(LanguageSynthesizer(skip_installed=skip_installed))
    registry.register(PackageManagerSynthesizer(skip_installed=skip_installed))
    registry.register(IDEToolSynthesizer(skip_installed=skip_installed))
    registry.register(ProjectSynthesizer(project_root=project_root))
    registry.register(VerificationSynthesizer())
    return registry
