"""
Shell command runner — execute commands on the host.

This is the SINGLE PLACE where ``subprocess`` is called for setup
operations. Output is collected in full before returning; no timeout
is enforced here, so a hung command blocks the plan.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from devsetup.adapters.base import CommandError, CommandRunner

logger = logging.getLogger(__name__)

# Cap captured output so a chatty installer can't balloon plan state.
MAX_OUTPUT_CHARS = 10 * 1024 * 1024


class ShellRunner(CommandRunner):
    """Run commands through the system shell and capture output."""

    def run(self, command: str | list[str]) -> str:
        use_shell = isinstance(command, str)
        display = command if use_shell else " ".join(command)

        logger.debug("Executing: %s", display)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                shell=use_shell,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CommandError(display, output=f"Command execution error: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode != 0:
            logger.debug("Command failed (exit %d, %dms): %s", result.returncode, elapsed_ms, display)
            raise CommandError(
                display,
                output=(stderr or stdout)[-MAX_OUTPUT_CHARS:],
                returncode=result.returncode,
            )

        logger.debug("Command ok (%dms): %s", elapsed_ms, display)
        combined = "\n".join(part for part in (stdout, stderr) if part)
        return combined[-MAX_OUTPUT_CHARS:]

    def run_interactive(self, command: str) -> int:
        # Inherit stdin/stdout/stderr so sudo can prompt on the terminal.
        logger.debug("Handing off to terminal: %s", command)
        try:
            result = subprocess.run(command, shell=True)
        except OSError as e:
            logger.warning("Terminal hand-off failed: %s", e)
            return -1
        return result.returncode

    def which(self, binary: str) -> str | None:
        return shutil.which(binary)
