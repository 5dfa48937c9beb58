"""
Tests for configuration loading — devsetup.yml and environment overrides.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from devsetup.core.config.loader import (
    ConfigError,
    Settings,
    config_root,
    find_config_file,
    load_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("DEVSETUP_AUTO_EXECUTE", raising=False)
    monkeypatch.delenv("DEVSETUP_SKIP_INSTALLED", raising=False)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings == Settings()
        assert settings.auto_execute is False
        assert settings.skip_installed is False
        assert settings.state_dir == ".state"

    def test_flat_file(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text(textwrap.dedent("""\
            auto_execute: true
            state_dir: .devsetup
            continue_on_failure: true
        """))
        settings = load_settings(path)
        assert settings.auto_execute is True
        assert settings.state_dir == ".devsetup"
        assert settings.continue_on_failure is True

    def test_wrapped_file(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("devsetup:\n  skip_installed: true\n")
        assert load_settings(path).skip_installed is True

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("auto_execute: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("auto_exec: true\n")
        with pytest.raises(ConfigError, match="Invalid devsetup configuration"):
            load_settings(path)

    def test_agent_block(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text(textwrap.dedent("""\
            agent:
              api_key: sk-test
              model: claude-other
              max_tokens: 1024
        """))
        agent = load_settings(path).agent
        assert agent.api_key.get_secret_value() == "sk-test"
        assert agent.model == "claude-other"
        assert agent.max_tokens == 1024
        assert "sk-test" not in repr(agent)

    def test_agent_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        agent = load_settings().agent
        assert agent.api_key is None
        assert agent.model == "claude-3-5-sonnet-20241022"
        assert agent.max_tokens == 4096

    def test_agent_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "devsetup.yml"
        path.write_text("agent:\n  temperature: 0.2\n")
        with pytest.raises(ConfigError, match="Invalid devsetup configuration"):
            load_settings(path)


class TestEnvOverrides:
    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "devsetup.yml"
        path.write_text("auto_execute: false\n")
        monkeypatch.setenv("DEVSETUP_AUTO_EXECUTE", "yes")
        assert load_settings(path).auto_execute is True

    def test_env_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DEVSETUP_SKIP_INSTALLED", "1")
        assert load_settings().skip_installed is True

    def test_bad_env_value(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DEVSETUP_AUTO_EXECUTE", "maybe")
        with pytest.raises(ConfigError, match="DEVSETUP_AUTO_EXECUTE must be a boolean"):
            load_settings()


class TestFindConfigFile:
    def test_walks_up(self, tmp_path: Path):
        (tmp_path / "devsetup.yml").write_text("auto_execute: true\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "devsetup.yml").resolve()

    def test_config_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert config_root(None) == Path.cwd()
        assert config_root(tmp_path / "devsetup.yml") == tmp_path.resolve()
