"""Adapters — bindings to the host shell and the operator.

Public re-exports for convenient access.
"""

from devsetup.adapters.base import CommandError, CommandRunner
from devsetup.adapters.mock import FakeRunner
from devsetup.adapters.prompts import (
    ConsolePrompter,
    PolicyPrompter,
    Progress,
    Prompter,
    PromptKind,
    ScriptedPrompter,
)

__all__ = [
    "CommandError",
    "CommandRunner",
    "ConsolePrompter",
    "FakeRunner",
    "PolicyPrompter",
    "Progress",
    "PromptKind",
    "Prompter",
    "ScriptedPrompter",
]
