"""
Tests for CLI commands — system, plan, install, plans, global options.

Every command runs with ``--mock`` and a macOS host, so the fake runner
reports Homebrew present and no step needs elevation.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from devsetup.main import cli


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each command from a clean directory on a pretend macOS host."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("platform.system", lambda: "Darwin")
    monkeypatch.delenv("DEVSETUP_AUTO_EXECUTE", raising=False)
    monkeypatch.delenv("DEVSETUP_SKIP_INSTALLED", raising=False)
    return tmp_path


def _invoke(*args: str, input: str | None = None):  # type: ignore[no-untyped-def]
    return CliRunner().invoke(cli, list(args), input=input)


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "plan and run developer environment setup" in result.output

    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, workspace: Path):
        (workspace / "devsetup.yml").write_text("nonsense_key: 1\n")
        result = _invoke("plan", "git", "--mock")
        assert result.exit_code == 1
        assert "Invalid devsetup configuration" in result.output


class TestSystemCommand:
    def test_json(self, workspace: Path):
        result = _invoke("system", "--json", "--mock")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["platform"] == "darwin"
        assert {pm["name"] for pm in data["package_managers"]} == {"homebrew"}

    def test_text(self, workspace: Path):
        result = _invoke("system", "--mock")
        assert result.exit_code == 0
        assert "darwin" in result.output
        assert "homebrew" in result.output


class TestPlanCommand:
    def test_plan_json(self, workspace: Path):
        result = _invoke("plan", "git", "python@3.12", "--json", "--mock")
        assert result.exit_code == 0
        data = json.loads(result.output)
        steps = data["plan"]["steps"]
        assert len(steps) == 6
        assert [s["action"] for s in steps[:3]] == ["detect", "install", "verify"]
        assert steps[3]["version"] == "3.12"
        assert (workspace / ".state" / "plans" / f"{data['plan']['id']}.json").is_file()

    def test_plan_text(self, workspace: Path):
        result = _invoke("plan", "git", "--mock")
        assert result.exit_code == 0
        assert "INSTALL git" in result.output
        assert "Requires admin: No" in result.output

    def test_no_specs(self, workspace: Path):
        result = _invoke("plan", "--mock")
        assert result.exit_code == 1
        assert "Name at least one tool" in result.output

    def test_response_file(self, workspace: Path):
        reply = workspace / "reply.json"
        reply.write_text(json.dumps({
            "intent": "fresh_setup",
            "tools": [{"name": "node", "version": "20", "priority": 1}],
        }))
        result = _invoke("plan", "--response-file", str(reply), "--json", "--mock")
        assert result.exit_code == 0
        assert json.loads(result.output)["plan"]["steps"][0]["tool"] == "node"

    def test_bad_response_file(self, workspace: Path):
        reply = workspace / "reply.txt"
        reply.write_text("no json here")
        result = _invoke("plan", "--response-file", str(reply), "--mock")
        assert result.exit_code == 1
        assert "no JSON found" in result.output


class TestInstallCommand:
    def test_yes_runs_without_prompt(self, workspace: Path):
        result = _invoke("install", "git", "--yes", "--mock")
        assert result.exit_code == 0
        assert "Installation Summary" in result.output
        assert "✓ Completed: 3" in result.output

        audit = (workspace / ".state" / "audit.ndjson").read_text().strip().splitlines()
        assert json.loads(audit[0])["status"] == "ok"

    def test_approve_interactively(self, workspace: Path):
        # Options: 1. Show Plan  2. Execute  3. Cancel
        result = _invoke("install", "git", "--mock", input="1\n2\n")
        assert result.exit_code == 0
        assert "=== Installation Plan Details ===" in result.output
        assert "Installation Summary" in result.output

    def test_cancel(self, workspace: Path):
        result = _invoke("install", "git", "--mock", input="3\n")
        assert result.exit_code == 0
        assert "Installation cancelled by user" in result.output
        assert not (workspace / ".state" / "audit.ndjson").exists()
        assert not (workspace / ".state" / "plans").exists()

    def test_auto_execute_from_config(self, workspace: Path):
        (workspace / "devsetup.yml").write_text("auto_execute: true\n")
        result = _invoke("install", "git", "--mock")
        assert result.exit_code == 0
        assert "Installation Summary" in result.output


class TestPlansCommands:
    def _planned_id(self) -> str:
        result = _invoke("plan", "git", "--json", "--mock")
        return json.loads(result.output)["plan"]["id"]

    def test_list(self, workspace: Path):
        plan_id = self._planned_id()
        result = _invoke("plans", "list")
        assert result.exit_code == 0
        assert plan_id in result.output
        assert "pending" in result.output

    def test_list_empty(self, workspace: Path):
        result = _invoke("plans", "list")
        assert result.exit_code == 0
        assert "No plans stored yet." in result.output

    def test_show_json(self, workspace: Path):
        plan_id = self._planned_id()
        result = _invoke("plans", "show", plan_id, "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["id"] == plan_id

    def test_show_missing(self, workspace: Path):
        result = _invoke("plans", "show", "plan-nope")
        assert result.exit_code == 1
        assert "Plan not found" in result.output

    def test_run(self, workspace: Path):
        plan_id = self._planned_id()
        result = _invoke("plans", "run", plan_id, "--mock")
        assert result.exit_code == 0

        shown = json.loads(_invoke("plans", "show", plan_id, "--json").output)
        assert {s["status"] for s in shown["steps"]} == {"completed"}

    def test_run_missing(self, workspace: Path):
        result = _invoke("plans", "run", "plan-nope", "--mock")
        assert result.exit_code == 1
        assert "Plan not found" in result.output
