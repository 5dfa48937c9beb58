"""
Domain models — Pydantic types for devsetup.

All models are re-exported here for convenient access:

    from devsetup.core.models import EnvironmentSnapshot, InstallationPlan, ToolRequest
"""

from devsetup.core.models.environment import (
    EnvironmentSnapshot,
    PackageManagerDetection,
    Platform,
    ToolDetection,
)
from devsetup.core.models.plan import (
    Command,
    HandlerCategory,
    InstallAction,
    InstallationPlan,
    InstallationStep,
    StepResult,
    StepStatus,
)
from devsetup.core.models.request import (
    ParsedRequest,
    ProjectContext,
    SetupIntent,
    SetupRequest,
    ToolRequest,
)

__all__ = [
    # plan.py
    "Command",
    # environment.py
    "EnvironmentSnapshot",
    "HandlerCategory",
    "InstallAction",
    "InstallationPlan",
    "InstallationStep",
    "PackageManagerDetection",
    # request.py
    "ParsedRequest",
    "Platform",
    "ProjectContext",
    "SetupIntent",
    "SetupRequest",
    "StepResult",
    "StepStatus",
    "ToolDetection",
    "ToolRequest",
]
