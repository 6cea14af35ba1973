"""Ollama Provider module.

This module belongs to `liminal.llm.providers` in the liminal codebase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from liminal.llm.ollama import OllamaClient, OllamaError
from liminal.llm.provider import LLMProvider, LLMProviderError, Message
from liminal.llm.settings import LLMSettings


@dataclass(frozen=True)
class OllamaProvider(LLMProvider):
    client: OllamaClient

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "OllamaProvider":
        return cls(client=OllamaClient(base_url=settings.base_url, model=settings.model, timeout_s=settings.timeout_s))

    def is_running(self) -> bool:
        return self.client.is_running()

    def complete(self, messages: Sequence[Message], temperature: float = 0.7) -> str:
        try:
            return self.client.chat(messages, temperature=temperature)
        except OllamaError as exc:
            raise LLMProviderError(str(exc)) from exc
