"""
Request parsing — free text or tool specs into a ParsedRequest.

The natural-language parser itself is an external collaborator: a
completion callable that takes a system prompt and a user prompt and
returns the model's text. This module builds the prompts, pulls the
JSON object out of the reply and validates it. Nothing here talks to
a network.

Parsers:
    - ResponseParser: prompt → injected completion callable → JSON
    - StaticParser:   pre-built ParsedRequest (CLI tool specs, tests)
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Callable

from pydantic import ValidationError

from devsetup.core.errors import DevSetupError
from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import HandlerCategory
from devsetup.core.models.request import ParsedRequest, SetupRequest, ToolRequest

logger = logging.getLogger(__name__)

# Outermost {...} span, across lines.
_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)

# (system prompt, user prompt) → reply text
Completion = Callable[[str, str], str]

# Category prefixes a tool spec may carry.
_ROUTABLE = {c.value for c in HandlerCategory if c != HandlerCategory.VERIFICATION}

SYSTEM_PROMPT = """\
You are an expert system administrator and developer environment specialist.
Your job is to parse natural language requests from developers about setting up their development environment.

Extract:
1. The intent (fresh setup, project setup, tool install, environment setup)
2. List of tools/software to install with versions if specified
3. Priority order (what needs to be installed first)
4. Any context about the project type or framework

Respond in JSON format."""

_RESPONSE_SHAPE = """\
{
  "intent": "fresh_setup" | "project_setup" | "tool_install" | "environment_setup",
  "tools": [
    { "name": "tool name", "version": "optional version", "priority": 1 }
  ],
  "context": {
    "projectType": "optional",
    "framework": "optional"
  }
}"""


class ParseError(DevSetupError):
    """Raised when a request cannot be turned into a ParsedRequest."""


def parse_response_text(text: str) -> ParsedRequest:
    """Extract and validate the JSON object in a parser reply.

    Raises:
        ParseError: No JSON object, malformed JSON, or wrong shape.
    """
    match = _JSON_BLOCK_RE.search(text or "")
    if not match:
        raise ParseError("Failed to parse request - no JSON found in response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse request - invalid JSON: {e}") from e
    try:
        return ParsedRequest.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Failed to parse request - unexpected shape: {e}") from e


def build_user_prompt(request: SetupRequest, environment: EnvironmentSnapshot | None) -> str:
    lines = [f'Parse this setup request: "{request.description}"', ""]
    if request.project_path:
        lines += [f"Project path: {request.project_path}", ""]
    if environment is not None:
        installed = ", ".join(t.tool for t in environment.installed_tools()) or "none"
        lines += [
            "Current system:",
            f"- Platform: {environment.platform.value}",
            f"- Installed tools: {installed}",
            "",
        ]
    lines += ["Provide a JSON response with:", _RESPONSE_SHAPE]
    return "\n".join(lines)


def parse_tool_specs(specs: list[str] | tuple[str, ...]) -> list[ToolRequest]:
    """Turn ``[category:]name[@version]`` specs into tool requests.

    Priority follows list position. An optional category prefix routes
    the tool explicitly, e.g. ``project:clone@https://host/repo.git``.

    Raises:
        ParseError: On an empty tool name.
    """
    tools: list[ToolRequest] = []
    for position, spec in enumerate(specs, start=1):
        name, _, version = spec.strip().partition("@")
        category = None
        prefix, sep, rest = name.partition(":")
        if sep and prefix.lower() in _ROUTABLE:
            category = HandlerCategory(prefix.lower())
            name = rest
        name = name.strip()
        if not name:
            raise ParseError(f"Invalid tool spec {spec!r}: missing tool name")
        tools.append(ToolRequest(
            name=name,
            version=version.strip() or None,
            priority=position,
            category=category,
        ))
    return tools


class RequestParser(ABC):
    """Turns a setup request into a structured ParsedRequest."""

    @abstractmethod
    def parse(self, request: SetupRequest, environment: EnvironmentSnapshot | None = None) -> ParsedRequest:
        """Parse a request.

        Raises:
            ParseError: If the request cannot be parsed.
        """


class ResponseParser(RequestParser):
    """Delegates to a completion callable and parses its reply."""

    def __init__(self, complete: Completion, system_prompt: str = SYSTEM_PROMPT):
        self._complete = complete
        self._system_prompt = system_prompt

    def parse(self, request: SetupRequest, environment: EnvironmentSnapshot | None = None) -> ParsedRequest:
        prompt = build_user_prompt(request, environment)
        logger.debug("Parsing request %s (%d chars)", request.id, len(request.description))
        try:
            reply = self._complete(self._system_prompt, prompt)
        except DevSetupError:
            raise
        except Exception as e:
            raise ParseError(f"Parser error: {e}") from e
        parsed = parse_response_text(reply)
        logger.info("Parsed %d tools (intent=%s)", len(parsed.tools), parsed.intent.value)
        return parsed


class StaticParser(RequestParser):
    """Returns the same pre-built request every time."""

    def __init__(self, parsed: ParsedRequest):
        self._parsed = parsed

    @classmethod
    def from_specs(cls, specs: list[str] | tuple[str, ...]) -> StaticParser:
        return cls(ParsedRequest(tools=parse_tool_specs(specs)))

    def parse(self, request: SetupRequest, environment: EnvironmentSnapshot | None = None) -> ParsedRequest:
        return self._parsed
