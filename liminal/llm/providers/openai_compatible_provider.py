"""OpenAI-compatible chat completions provider.

Works against any server exposing `POST {base_url}/chat/completions` with
bearer-token auth (OpenAI, LM Studio, vLLM, llama.cpp server, ...).
"""

from __future__ import annotations

from typing import Any, Sequence

import requests

from liminal.llm.provider import LLMProvider, LLMProviderError, Message, ProviderConfigError
from liminal.llm.settings import LLMSettings

NO_RESPONSE = "No response from LLM"


def _first_choice_content(body: Any) -> str:
    if not isinstance(body, dict):
        return ""
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    return str(message.get("content") or "")


class OpenAICompatibleProvider(LLMProvider):
    def __init__(self, *, base_url: str, api_key: str, model: str, timeout_s: float = 300.0) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.api_key = str(api_key)
        self.model = str(model)
        self.timeout_s = float(timeout_s)

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "OpenAICompatibleProvider":
        if not settings.api_key:
            raise ProviderConfigError("API key not configured. Please set your API key in settings.")
        return cls(
            base_url=settings.base_url,
            api_key=settings.api_key,
            model=settings.model,
            timeout_s=settings.timeout_s,
        )

    @property
    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def is_running(self) -> bool:
        if not (self.base_url and self.api_key):
            return False
        try:
            probe = requests.get(f"{self.base_url}/models", headers=self.auth_headers, timeout=self.timeout_s)
        except requests.RequestException:
            return False
        return probe.status_code < 500

    def complete(self, messages: Sequence[Message], temperature: float = 0.7) -> str:
        body = {
            "model": self.model,
            "messages": [{"role": str(m["role"]), "content": str(m.get("content") or "")} for m in messages],
            "temperature": float(temperature),
            "stream": False,
        }
        try:
            resp = requests.post(
                f"{self.base_url}/chat/completions",
                headers=self.auth_headers,
                json=body,
                timeout=self.timeout_s,
            )
            resp.raise_for_status()
            content = _first_choice_content(resp.json())
        except (requests.RequestException, ValueError) as exc:
            raise LLMProviderError(f"chat completion request failed: {exc}") from exc
        if not content:
            raise LLMProviderError(NO_RESPONSE)
        return content
