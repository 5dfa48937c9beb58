"""
Tests for request parsing — parser replies, tool specs, prompt building.
"""

from __future__ import annotations

import pytest

from devsetup.core.errors import DevSetupError
from devsetup.core.models.environment import Platform
from devsetup.core.models.plan import HandlerCategory
from devsetup.core.models.request import SetupIntent, SetupRequest
from devsetup.core.services.parser import (
    SYSTEM_PROMPT,
    ParseError,
    ResponseParser,
    StaticParser,
    build_user_prompt,
    parse_response_text,
    parse_tool_specs,
)


class TestParseResponseText:
    """JSON extraction from a parser reply."""

    def test_plain_json(self):
        parsed = parse_response_text(
            '{"intent": "fresh_setup", "tools": [{"name": "node", "version": "20", "priority": 1}]}'
        )
        assert parsed.intent == SetupIntent.FRESH_SETUP
        assert parsed.tools[0].name == "node"
        assert parsed.tools[0].version == "20"

    def test_json_wrapped_in_prose(self):
        text = (
            "Sure! Here is the plan:\n"
            '{"intent": "project_setup",\n "tools": [{"name": "python", "priority": 1}],\n'
            ' "context": {"projectType": "web", "framework": "flask"}}\n'
            "Let me know if you need anything else."
        )
        parsed = parse_response_text(text)
        assert parsed.intent == SetupIntent.PROJECT_SETUP
        assert parsed.context is not None
        assert parsed.context.project_type == "web"
        assert parsed.context.framework == "flask"

    def test_no_json(self):
        with pytest.raises(ParseError, match="no JSON found"):
            parse_response_text("no braces here")

    def test_invalid_json(self):
        with pytest.raises(ParseError, match="invalid JSON"):
            parse_response_text("{intent: fresh_setup}")

    def test_wrong_shape(self):
        with pytest.raises(ParseError, match="unexpected shape"):
            parse_response_text('{"intent": "make_coffee", "tools": []}')

    def test_parse_error_is_devsetup_error(self):
        assert issubclass(ParseError, DevSetupError)


class TestParseToolSpecs:
    """``[category:]name[@version]`` specs from the command line."""

    def test_names_and_versions(self):
        tools = parse_tool_specs(["git", "python@3.12", "node@20"])
        assert [(t.name, t.version, t.priority) for t in tools] == [
            ("git", None, 1),
            ("python", "3.12", 2),
            ("node", "20", 3),
        ]

    def test_category_prefix(self):
        tools = parse_tool_specs(["project:clone@https://github.com/acme/app.git"])
        assert tools[0].name == "clone"
        assert tools[0].category == HandlerCategory.PROJECT
        assert tools[0].version == "https://github.com/acme/app.git"

    def test_ssh_url_keeps_colon(self):
        tools = parse_tool_specs(["project:clone@git@github.com:acme/app.git"])
        assert tools[0].version == "git@github.com:acme/app.git"

    def test_unknown_prefix_is_part_of_name(self):
        tools = parse_tool_specs(["weird:thing"])
        assert tools[0].name == "weird:thing"
        assert tools[0].category is None

    def test_verification_prefix_not_routable(self):
        tools = parse_tool_specs(["verification:node"])
        assert tools[0].name == "verification:node"
        assert tools[0].category is None

    def test_missing_name(self):
        with pytest.raises(ParseError, match="missing tool name"):
            parse_tool_specs(["@3.12"])


class TestResponseParser:
    """Parser backed by an injected completion callable."""

    def test_prompts_passed_to_completion(self, linux_env):
        seen: dict = {}

        def complete(system: str, user: str) -> str:
            seen["system"] = system
            seen["user"] = user
            return '{"intent": "tool_install", "tools": [{"name": "git", "priority": 1}]}'

        parsed = ResponseParser(complete).parse(SetupRequest(description="get me git"), linux_env)

        assert parsed.tools[0].name == "git"
        assert seen["system"] == SYSTEM_PROMPT
        assert 'Parse this setup request: "get me git"' in seen["user"]
        assert "- Platform: linux" in seen["user"]

    def test_completion_errors_wrapped(self):
        def complete(system: str, user: str) -> str:
            raise ConnectionError("network down")

        with pytest.raises(ParseError, match="Parser error: network down"):
            ResponseParser(complete).parse(SetupRequest(description="x"))


class TestBuildUserPrompt:
    def test_installed_tools_listed(self, make_env):
        env = make_env(Platform.MACOS, installed={"git": "2.43.0", "node": "20.1.0"})
        prompt = build_user_prompt(SetupRequest(description="python please"), env)
        assert "- Installed tools: git, node" in prompt

    def test_without_environment(self):
        prompt = build_user_prompt(SetupRequest(description="x", project_path="/src/app"), None)
        assert "Project path: /src/app" in prompt
        assert "Current system" not in prompt


class TestStaticParser:
    def test_from_specs(self):
        parsed = StaticParser.from_specs(["git", "docker"]).parse(SetupRequest())
        assert [t.name for t in parsed.tools] == ["git", "docker"]
