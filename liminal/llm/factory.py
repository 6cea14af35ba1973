"""Provider factory."""

from __future__ import annotations

from liminal.config import AppConfig
from liminal.llm.provider import LLMProvider, ProviderConfigError
from liminal.llm.providers import OllamaProvider, OpenAICompatibleProvider
from liminal.llm.settings import get_llm_settings


def get_default_provider(config: AppConfig | None = None) -> LLMProvider:
    settings = get_llm_settings(config)
    if settings.provider in {"openai", "remote"}:
        return OpenAICompatibleProvider.from_settings(settings)
    if settings.provider == "ollama":
        return OllamaProvider.from_settings(settings)
    raise ProviderConfigError(f"unsupported llm provider: {settings.provider}")
