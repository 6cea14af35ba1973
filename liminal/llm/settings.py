"""Settings module.

This module belongs to `liminal.llm` in the liminal codebase.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from liminal.config import AppConfig, ConfigStore

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OLLAMA_HOST = "http://127.0.0.1:11434"
DEFAULT_OLLAMA_MODEL = "qwen2.5:7b"


@dataclass(frozen=True)
class LLMSettings:
    provider: str
    base_url: str
    api_key: str
    model: str
    timeout_s: float


def _env(name: str) -> str:
    return str(os.environ.get(name, "") or "").strip()


def get_llm_settings(config: AppConfig | None = None) -> LLMSettings:
    """Resolve model settings; environment variables win over config.json."""
    cfg = config if config is not None else ConfigStore().load()
    provider = (_env("LIMINAL_LLM_PROVIDER") or "openai").lower()
    # generations can run for minutes
    timeout_s = float(_env("LIMINAL_LLM_TIMEOUT_S") or "300")

    if provider == "ollama":
        return LLMSettings(
            provider=provider,
            base_url=(_env("OLLAMA_HOST") or cfg.base_url or DEFAULT_OLLAMA_HOST).rstrip("/"),
            api_key="",
            model=_env("OLLAMA_MODEL") or cfg.model or DEFAULT_OLLAMA_MODEL,
            timeout_s=timeout_s,
        )
    return LLMSettings(
        provider=provider,
        base_url=(_env("LIMINAL_OPENAI_BASE_URL") or cfg.base_url or DEFAULT_OPENAI_BASE_URL).rstrip("/"),
        api_key=_env("LIMINAL_OPENAI_API_KEY") or (cfg.api_key or ""),
        model=_env("LIMINAL_OPENAI_MODEL") or cfg.model or DEFAULT_OPENAI_MODEL,
        timeout_s=timeout_s,
    )
