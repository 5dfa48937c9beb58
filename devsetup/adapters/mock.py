"""
Fake runner — universal test double for the host shell.

Used in mock mode and in tests to simulate command execution without
touching the operating system. Responses are matched by substring
pattern against the command text; the first registered match wins.
"""

from __future__ import annotations

from devsetup.adapters.base import CommandError, CommandRunner


class FakeRunner(CommandRunner):
    """Universal fake runner for testing.

    By default, every command succeeds with ``default_output``. Can be
    configured with canned output or failures per command pattern.
    """

    def __init__(
        self,
        default_output: str = "[mock] executed",
        binaries: dict[str, str] | None = None,
    ):
        self._default_output = default_output
        self._rules: list[tuple[str, str, int | None]] = []
        self._binaries = dict(binaries or {})
        self._call_log: list[str] = []
        self._interactive_log: list[str] = []

    @property
    def call_log(self) -> list[str]:
        """Every command text passed to ``run``, in order."""
        return self._call_log

    @property
    def interactive_log(self) -> list[str]:
        """Every command handed off to the terminal, in order."""
        return self._interactive_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_output(self, pattern: str, output: str) -> None:
        """Commands containing ``pattern`` succeed with ``output``."""
        self._rules.append((pattern, output, None))

    def set_failure(self, pattern: str, output: str = "Mock failure", returncode: int = 1) -> None:
        """Commands containing ``pattern`` fail with ``output``."""
        self._rules.append((pattern, output, returncode))

    def set_binary(self, binary: str, path: str) -> None:
        self._binaries[binary] = path

    def run(self, command: str | list[str]) -> str:
        text = command if isinstance(command, str) else " ".join(command)
        self._call_log.append(text)

        for pattern, output, returncode in self._rules:
            if pattern in text:
                if returncode is not None:
                    raise CommandError(text, output=output, returncode=returncode)
                return output

        return self._default_output

    def run_interactive(self, command: str) -> int:
        self._interactive_log.append(command)
        return 0

    def which(self, binary: str) -> str | None:
        return self._binaries.get(binary)

    def reset(self) -> None:
        """Clear call logs and configured responses."""
        self._rules.clear()
        self._call_log.clear()
        self._interactive_log.clear()
