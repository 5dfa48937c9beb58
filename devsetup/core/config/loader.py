"""
Configuration loader — reads devsetup.yml into a Settings model.

The file is optional: without one every setting takes its default.
It is looked up from the working directory upward, so commands run
from a subdirectory still find it. Two environment variables override
the file for one-off runs:

    DEVSETUP_AUTO_EXECUTE    skip the approval gate
    DEVSETUP_SKIP_INSTALLED  don't reinstall tools the probe found

The ``agent`` block configures the model that parses free-text requests.
Its API key is best left out of the file; ANTHROPIC_API_KEY is read when
it is unset.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from devsetup.core.errors import DevSetupError

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "devsetup.yml"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

ENV_OVERRIDES = {
    "DEVSETUP_AUTO_EXECUTE": "auto_execute",
    "DEVSETUP_SKIP_INSTALLED": "skip_installed",
}


class ConfigError(DevSetupError):
    """Raised when the configuration file is invalid."""


class AgentSettings(BaseModel):
    """Model backend for the natural-language request parser."""

    model_config = ConfigDict(extra="forbid")

    api_key: SecretStr | None = None
    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = Field(default=4096, gt=0)


class Settings(BaseModel):
    """Run settings for the orchestrator and entry points."""

    model_config = ConfigDict(extra="forbid")

    auto_execute: bool = False
    skip_installed: bool = False
    state_dir: str = ".state"
    # Prompt answers. continue_on_failure None asks on the console and
    # stops headless runs; approve_elevation applies to headless runs only.
    continue_on_failure: bool | None = None
    approve_elevation: bool = False
    agent: AgentSettings = Field(default_factory=AgentSettings)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for devsetup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to devsetup.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _env_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {raw!r}")


def load_settings(path: Path | None = None, search: bool = True) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    Args:
        path: Explicit path to devsetup.yml. If None and ``search`` is
            set, searches upward from the cwd.
        search: Whether to look for a config file when no path is given.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    data: dict = {}

    if path is None and search:
        path = find_config_file()

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        logger.debug("Loading settings from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(loaded).__name__}")

        # The YAML may wrap everything under a "devsetup" key or be flat
        data = dict(loaded.get("devsetup", loaded))

    for env_name, field_name in ENV_OVERRIDES.items():
        raw_env = os.environ.get(env_name)
        if raw_env is not None:
            data[field_name] = _env_bool(env_name, raw_env)

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid devsetup configuration: {e}") from e

    logger.debug("Settings: %s", settings.model_dump())
    return settings


def config_root(config_path: Path | None) -> Path:
    """Directory the state dir is resolved against."""
    if config_path is None:
        return Path.cwd()
    return config_path.parent.resolve()
