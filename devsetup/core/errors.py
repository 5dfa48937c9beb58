"""
Error taxonomy — every failure the core can raise.

Components raise the narrowest subclass; entry points (CLI, web API)
catch ``DevSetupError`` and render it. Unroutable tools are NOT errors
and never appear here: they degrade to empty command lists.
"""

from __future__ import annotations


class DevSetupError(Exception):
    """Base class for all devsetup errors."""


class StepTransitionError(DevSetupError):
    """Raised when a step is moved through an illegal status change."""


class PlanNotFoundError(DevSetupError):
    """Raised when a plan id is unknown to the session or the store."""


class PlanBusyError(DevSetupError):
    """Raised when a plan is already being executed."""


class ElevationDeclined(DevSetupError):
    """Raised when the operator refuses an elevated command."""

    def __init__(self, message: str = "User cancelled elevated command"):
        super().__init__(message)
