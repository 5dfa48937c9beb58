"""
Runner base — the protocol contract between the core and the host shell.

The execution engine and the prober never call ``subprocess`` directly.
They go through a ``CommandRunner``, which makes the host's
command-execution primitive an injectable collaborator: the real
``ShellRunner`` in production, ``FakeRunner`` in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devsetup.core.errors import DevSetupError


class CommandError(DevSetupError):
    """A command exited non-zero or could not be started.

    Carries the captured output so callers can attach it to a step.
    """

    def __init__(self, command: str, output: str = "", returncode: int | None = None):
        self.command = command
        self.output = output
        self.returncode = returncode
        detail = output or f"Command exited with code {returncode}"
        super().__init__(detail)


class CommandRunner(ABC):
    """Abstract base class for command runners.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement run, run_interactive, which
    """

    @abstractmethod
    def run(self, command: str | list[str]) -> str:
        """Run a command to completion and return its combined output.

        A string runs through the shell; a list runs as an argv.

        Raises:
            CommandError: On non-zero exit, with stderr/stdout captured.
        """

    @abstractmethod
    def run_interactive(self, command: str) -> int:
        """Run a command attached to the operator's terminal.

        Used for privileged commands on Unix-like hosts, where a
        background process cannot reliably prompt for a password.
        Returns the exit code; callers treat it as advisory.
        """

    @abstractmethod
    def which(self, binary: str) -> str | None:
        """Resolve a binary on PATH, or None if absent."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
