"""
Operator prompts — the human boundary.

The orchestrator and engine never talk to a terminal or a dialog
directly. They ask a ``Prompter``: approve the plan, confirm an
elevated command, continue after a failure. Every prompt is a blocking
decision; dismissing it counts as "cancel".

Implementations:
    - ConsolePrompter:  interactive terminal (click)
    - PolicyPrompter:   headless, fixed answers (web API, CI)
    - ScriptedPrompter: queued answers for tests
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

import click

logger = logging.getLogger(__name__)


class PromptKind(str, Enum):
    APPROVE_PLAN = "approve_plan"
    ELEVATE = "elevate"
    CONTINUE = "continue"
    ACKNOWLEDGE = "acknowledge"


# Option labels shared by the orchestrator and engine.
SHOW_PLAN = "Show Plan"
EXECUTE = "Execute"
CANCEL = "Cancel"
CONTINUE = "Continue"
STOP = "Stop"


@dataclass
class Progress:
    """One progress tick: step ``index`` of ``total`` has started."""

    index: int
    total: int
    message: str

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 100
        return int(self.index * 100 / self.total)


class Prompter(ABC):
    """Abstract base class for operator interaction."""

    @abstractmethod
    def confirm(self, message: str, kind: PromptKind) -> bool:
        """Ask a yes/no question. Dismissal returns False."""

    @abstractmethod
    def choose(self, message: str, options: list[str], kind: PromptKind) -> str | None:
        """Ask the operator to pick one option. Dismissal returns None."""

    def report(self, progress: Progress) -> None:
        """Progress hook; silent by default."""

    def notify(self, message: str) -> None:
        """Informational message; logged by default."""
        logger.info(message)


class ConsolePrompter(Prompter):
    """Interactive prompts on the controlling terminal.

    ``continue_on_failure`` answers the continue-or-stop question without
    asking when set; None asks.
    """

    def __init__(self, continue_on_failure: bool | None = None):
        self.continue_on_failure = continue_on_failure

    def confirm(self, message: str, kind: PromptKind) -> bool:
        try:
            return click.confirm(message, default=False)
        except click.Abort:
            return False

    def choose(self, message: str, options: list[str], kind: PromptKind) -> str | None:
        if kind == PromptKind.CONTINUE and self.continue_on_failure is not None:
            answer = CONTINUE if self.continue_on_failure else STOP
            click.echo(f"{message} {answer} (continue_on_failure)")
            return answer
        click.echo(message)
        for i, option in enumerate(options, start=1):
            click.echo(f"   {i}. {option}")
        try:
            picked = click.prompt(
                "Choice",
                type=click.IntRange(1, len(options)),
                default=len(options),
            )
        except click.Abort:
            return None
        return options[picked - 1]

    def report(self, progress: Progress) -> None:
        click.secho(f"[{progress.index}/{progress.total}] ", fg="cyan", nl=False)
        click.echo(progress.message)

    def notify(self, message: str) -> None:
        click.echo(message)


class PolicyPrompter(Prompter):
    """Headless prompter that answers from a fixed policy.

    Defaults are the safe choice: elevated commands are declined and
    a failure stops the plan. A ``continue_on_failure`` of None stops too,
    since there is nobody to ask.
    """

    def __init__(
        self,
        approve_plan: bool = True,
        approve_elevation: bool = False,
        continue_on_failure: bool | None = False,
    ):
        self.approve_plan = approve_plan
        self.approve_elevation = approve_elevation
        self.continue_on_failure = bool(continue_on_failure)
        self.messages: list[str] = []

    def confirm(self, message: str, kind: PromptKind) -> bool:
        self.messages.append(message)
        if kind == PromptKind.ELEVATE:
            return self.approve_elevation
        if kind == PromptKind.CONTINUE:
            return self.continue_on_failure
        if kind == PromptKind.APPROVE_PLAN:
            return self.approve_plan
        return True

    def choose(self, message: str, options: list[str], kind: PromptKind) -> str | None:
        self.messages.append(message)
        if kind == PromptKind.APPROVE_PLAN:
            return EXECUTE if self.approve_plan else CANCEL
        if kind == PromptKind.CONTINUE:
            return CONTINUE if self.continue_on_failure else STOP
        return None

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)


@dataclass
class ScriptedPrompter(Prompter):
    """Test double: answers are popped from per-kind queues.

    An empty queue behaves like a dismissed prompt.
    """

    answers: dict[PromptKind, deque] = field(default_factory=dict)
    asked: list[tuple[PromptKind, str]] = field(default_factory=list)
    progress: list[Progress] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    def queue(self, kind: PromptKind, *answers: bool | str | None) -> ScriptedPrompter:
        self.answers.setdefault(kind, deque()).extend(answers)
        return self

    def _next(self, kind: PromptKind):  # type: ignore[no-untyped-def]
        pending = self.answers.get(kind)
        if not pending:
            return None
        return pending.popleft()

    def confirm(self, message: str, kind: PromptKind) -> bool:
        self.asked.append((kind, message))
        return bool(self._next(kind))

    def choose(self, message: str, options: list[str], kind: PromptKind) -> str | None:
        self.asked.append((kind, message))
        answer = self._next(kind)
        return answer if answer in options else None

    def report(self, progress: Progress) -> None:
        self.progress.append(progress)

    def notify(self, message: str) -> None:
        self.notices.append(message)
