"""Base model provider.

Every provider answers the same question: given one prompt, return the
model's text. ``generate`` is the single public entry point; subclasses
implement ``_call_api`` only:

    generate() → _call_api()   ← only this differs per provider

There is no retry here. A failed call ends the review cycle and the
analysis engine substitutes the fallback record.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

_MAX_TOKENS = 4096


class BaseProvider(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS
    TEMPERATURE: float = 0.2

    def generate(self, prompt: str) -> str:
        """Make exactly one model call and return its text. Raises on failure."""
        logger.debug("%s: sending prompt (%d chars) to %s", self.__class__.__name__, len(prompt), self.MODEL)
        text = self._call_api(prompt)
        return text or ""

    @abstractmethod
    def _call_api(self, prompt: str) -> str:
        """Make a single API call and return the raw text response."""


def get_provider(config: dict) -> BaseProvider:
    # Imported here so a deployment only needs the SDK of the provider it uses.
    model = config["model"]
    if model == "anthropic":
        from prscribe_core.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=config["anthropic_api_key"], model=config.get("model_name"))
    if model == "openai":
        from prscribe_core.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=config["openai_api_key"], model=config.get("model_name"))
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'anthropic' or 'openai'.")
