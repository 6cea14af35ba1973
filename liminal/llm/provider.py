"""Provider module.

This module belongs to `liminal.llm` in the liminal codebase.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

Message = dict[str, str]


class LLMProviderError(RuntimeError):
    pass


class ProviderConfigError(LLMProviderError):
    """Provider cannot be built from the current settings."""


def system_message(content: str) -> Message:
    return {"role": "system", "content": content}


def user_message(content: str) -> Message:
    return {"role": "user", "content": content}


def assistant_message(content: str) -> Message:
    return {"role": "assistant", "content": content}


class LLMProvider(ABC):
    @abstractmethod
    def is_running(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def complete(self, messages: Sequence[Message], temperature: float = 0.7) -> str:
        raise NotImplementedError

    def chat(self, *, system: str, user: str, temperature: float = 0.7) -> str:
        return self.complete([system_message(system), user_message(user)], temperature=temperature)
