"""Package managers: homebrew, chocolatey, winget, apt, yum."""

from __future__ import annotations

from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import HandlerCategory, InstallAction, InstallationStep, StepResult
from devsetup.core.services.classifier import family_of
from devsetup.core.services.synthesizers.base import RecipeSynthesizer


class PackageManagerSynthesizer(RecipeSynthesizer):

    @property
    def category(self) -> HandlerCategory:
        return HandlerCategory.PACKAGE_MANAGER

    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        label = self.label(step)
        if step.action == InstallAction.DETECT:
            present = env.has_manager(family_of(step.tool).value)
            return StepResult.ok(f"{label} is {'available' if present else 'not available'}")
        return StepResult.ok(f"{label} setup completed")
