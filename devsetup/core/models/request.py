"""
Setup request models — what the developer asked for.

``SetupRequest`` is the raw free-text request. ``ParsedRequest`` is the
structured form returned by the language parser: an intent plus a
prioritized tool list. Priorities are integers, lower installs first.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from devsetup.core.models.plan import HandlerCategory


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class SetupIntent(str, Enum):
    FRESH_SETUP = "fresh_setup"
    PROJECT_SETUP = "project_setup"
    TOOL_INSTALL = "tool_install"
    ENVIRONMENT_SETUP = "environment_setup"


class ToolRequest(BaseModel):
    """One requested tool.

    ``category`` is an optional routing hint from the parser. When set
    it overrides keyword classification; it is the only way a request
    reaches the project handler.
    """

    name: str = Field(min_length=1)
    version: str | None = None
    priority: int = 1
    category: HandlerCategory | None = None


class ProjectContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_type: str | None = Field(default=None, alias="projectType")
    framework: str | None = None


class ParsedRequest(BaseModel):
    """Structured request as produced by the language parser."""

    intent: SetupIntent = SetupIntent.TOOL_INSTALL
    tools: list[ToolRequest] = Field(default_factory=list)
    context: ProjectContext | None = None


class SetupRequest(BaseModel):
    """A developer's setup request, as typed."""

    id: str = Field(default_factory=lambda: f"req-{uuid.uuid4().hex[:12]}")
    description: str = ""
    project_path: str | None = None
    timestamp: str = Field(default_factory=_now_iso)
