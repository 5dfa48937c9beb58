"""Verification — one compound post-install check per tool."""

from __future__ import annotations

from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import Command, HandlerCategory, InstallationStep, StepResult
from devsetup.core.services.synthesizers.base import Synthesizer, for_platform, recipe_for


class VerificationSynthesizer(Synthesizer):
    """Owns every verify step, whatever handler installed the tool."""

    @property
    def category(self) -> HandlerCategory:
        return HandlerCategory.VERIFICATION

    def detection_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        return []

    def install_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        return []

    def verification_commands(self, step: InstallationStep, env: EnvironmentSnapshot) -> list[Command]:
        if step.tool_category == HandlerCategory.PROJECT:
            return []
        recipe = recipe_for(step.tool)
        if recipe is None:
            return []
        return [
            Command(
                command=for_platform(recipe["verify"], env.platform),
                requires_admin=False,
                platform=env.platform,
                description=f"Verify {recipe['label']} installation",
            ),
        ]

    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        recipe = recipe_for(step.tool)
        label = recipe["label"] if recipe else step.tool
        return StepResult.ok(f"{label} verification completed")
