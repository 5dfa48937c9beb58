"""Dev tools: docker, git, vscode, kubectl, terraform and anything unrecognized.

Unknown tools land here too. They have no recipe, so every command
list is empty and the steps complete as no-ops.
"""

from __future__ import annotations

from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import HandlerCategory, InstallAction, InstallationStep, StepResult
from devsetup.core.services.synthesizers.base import RecipeSynthesizer, recipe_for


class IDEToolSynthesizer(RecipeSynthesizer):

    @property
    def category(self) -> HandlerCategory:
        return HandlerCategory.IDE_TOOL

    def execute(self, step: InstallationStep, env: EnvironmentSnapshot) -> StepResult:
        if recipe_for(step.tool) is None:
            return StepResult.ok(f"No known setup for {step.tool}; nothing to do")
        label = self.label(step)
        if step.action == InstallAction.INSTALL:
            return StepResult.ok(f"{label} setup initiated")
        return StepResult.ok(f"{label} {step.action.value} completed")
