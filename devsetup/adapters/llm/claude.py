"""
Claude completion — the model behind free-text setup requests.

Implements the ``Completion`` callable that ``ResponseParser`` takes:
(system prompt, user prompt) → reply text, over the Anthropic Messages
API. This is the only place the parser reaches the network; the JSON
extraction and validation stay in ``core.services.parser``.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import anthropic

from devsetup.core.config.loader import AgentSettings
from devsetup.core.services.parser import ParseError

logger = logging.getLogger(__name__)

API_KEY_ENV = "ANTHROPIC_API_KEY"


class CompletionError(ParseError):
    """Raised when the model can't be reached or isn't configured."""


def resolve_api_key(settings: AgentSettings) -> str | None:
    """The configured key, else ``ANTHROPIC_API_KEY``."""
    if settings.api_key is not None:
        return settings.api_key.get_secret_value() or None
    return os.environ.get(API_KEY_ENV) or None


class ClaudeCompletion:
    """Send one system + user prompt pair to Claude and return its text."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20241022",
        max_tokens: int = 4096,
        client: Any = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or anthropic.Anthropic(api_key=api_key)

    @classmethod
    def from_settings(cls, settings: AgentSettings, client: Any = None) -> ClaudeCompletion:
        """Build from the ``agent`` settings block.

        Raises:
            CompletionError: No API key is configured and no client given.
        """
        api_key = resolve_api_key(settings)
        if api_key is None and client is None:
            raise CompletionError(
                f"No API key for the request parser: set {API_KEY_ENV} "
                "or agent.api_key in devsetup.yml"
            )
        return cls(api_key, model=settings.model, max_tokens=settings.max_tokens, client=client)

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        logger.debug("Asking %s (max_tokens=%d)", self.model, self.max_tokens)
        start = time.monotonic()
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            raise CompletionError(f"Claude API error: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        for block in response.content:
            if getattr(block, "type", None) == "text":
                logger.debug("Reply from %s (%dms, %d chars)", self.model, elapsed_ms, len(block.text))
                return block.text

        logger.warning("Reply from %s carried no text block", self.model)
        return ""
