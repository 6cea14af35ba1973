"""Init module.

This module belongs to `liminal.llm` in the liminal codebase.
"""

from liminal.llm.factory import get_default_provider
from liminal.llm.provider import (
    LLMProvider,
    LLMProviderError,
    Message,
    ProviderConfigError,
    assistant_message,
    system_message,
    user_message,
)
from liminal.llm.settings import LLMSettings, get_llm_settings

__all__ = [
    "LLMProvider",
    "LLMProviderError",
    "LLMSettings",
    "Message",
    "ProviderConfigError",
    "assistant_message",
    "get_default_provider",
    "get_llm_settings",
    "system_message",
    "user_message",
]
