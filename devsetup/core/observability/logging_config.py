"""
Logging for devsetup runs.

The console shows warnings only unless ``-v``/``--debug`` (or
DEVSETUP_LOG_LEVEL) asks for more; installer chatter stays out of the
way of the plan and summary output. DEVSETUP_LOG_FILE adds a file log,
at DEBUG unless told otherwise, so every command the executor ran can
be read back after a failed setup.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "DEVSETUP_LOG_LEVEL"
ENV_FILE = "DEVSETUP_LOG_FILE"

_CONSOLE_FMT = "%(message)s"
_CONSOLE_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FILE_FMT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

# Web server request lines and Claude HTTP traffic
_CHATTY_LOGGERS = ("werkzeug", "httpx", "anthropic")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level from the global CLI flags, then DEVSETUP_LOG_LEVEL."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(level: str = "WARNING", log_file: str | None = None, log_file_level: str = "DEBUG") -> None:
    """Install the stderr handler, plus a file handler when a log file is set.

    Unknown level names fall back to WARNING. Below DEBUG the chatty
    third-party loggers are held at WARNING.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    fmt = _CONSOLE_FMT_VERBOSE if console_level <= logging.INFO else _CONSOLE_FMT
    console.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if console_level > logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _parse_level(level: str | None) -> int:
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
