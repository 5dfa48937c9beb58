"""Language runtimes: node, python, java, ruby, go, rust, php."""

from __future__ import annotations

from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import HandlerCategory, InstallAction, InstallationStep, StepResult
from devsetup.core.services.classifier import family_of
from devsetup.core.services.synthesizers.base import RecipeSynthesizer


class LanguageSynthesizer(RecipeSynthesizer):

    @property
    def category(self) -> HandlerCategory:
        return HandlerCategory.LANGUAGE

    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        label = self.label(step)
        if step.action == InstallAction.DETECT:
            detection = env.detection(family_of(step.tool).value)
            if detection is not None and detection.installed:
                version = detection.version or "unknown version"
                return StepResult.ok(f"{label} is already installed ({version})")
            return StepResult.ok(f"{label} is not installed")
        if step.action == InstallAction.INSTALL:
            return StepResult.ok(f"{label} installation initiated")
        return StepResult.ok(f"{label} {step.action.value} completed")
