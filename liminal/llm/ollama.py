"""Minimal client for a local Ollama server (`/api/tags`, `/api/chat`)."""

from __future__ import annotations

import json
import os
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Sequence

_MODEL_LOADING = "loading model"


class OllamaError(RuntimeError):
    pass


def _env_int(*names: str) -> int | None:
    for name in names:
        raw = os.environ.get(name, "").strip()
        if raw.lstrip("-").isdigit():
            return int(raw)
    return None


def chat_options(temperature: float) -> dict[str, Any]:
    """Sampling options for `/api/chat`; token and context limits come from the environment."""
    opts: dict[str, Any] = {"temperature": temperature}
    num_predict = _env_int("LIMINAL_MAX_TOKENS", "OLLAMA_NUM_PREDICT")
    if num_predict is not None:
        opts["num_predict"] = num_predict
    num_ctx = _env_int("OLLAMA_NUM_CTX")
    if num_ctx is not None:
        opts["num_ctx"] = num_ctx
    return opts


@dataclass(frozen=True)
class OllamaClient:
    base_url: str
    model: str
    timeout_s: float = 60.0

    def is_running(self) -> bool:
        try:
            self._request_json("GET", "/api/tags")
        except OllamaError:
            return False
        return True

    def chat(self, messages: Sequence[dict[str, str]], temperature: float = 0.7) -> str:
        payload = {
            "model": self.model,
            "stream": False,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "options": chat_options(temperature),
        }
        data = self._post_with_load_retry("/api/chat", payload)
        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or "content" not in message:
            raise OllamaError("Ollama response is missing message.content")
        return str(message.get("content") or "")

    def _post_with_load_retry(self, path: str, payload: dict[str, Any]) -> Any:
        # a cold model answers with "loading model" until it is resident
        retries = _env_int("LIMINAL_OLLAMA_RETRIES")
        retries = 2 if retries is None else max(0, retries)
        backoff_s = float(os.environ.get("LIMINAL_OLLAMA_RETRY_BACKOFF_S", "1.5"))
        attempt = 0
        while True:
            try:
                return self._request_json("POST", path, payload)
            except OllamaError as exc:
                if attempt >= retries or _MODEL_LOADING not in str(exc).lower():
                    raise
                attempt += 1
                time.sleep(backoff_s * attempt)

    def _request_json(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        body = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(
            url=f"{self.base_url}{path}",
            data=body,
            headers={"Content-Type": "application/json"},
            method=method,
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise OllamaError(f"Ollama HTTP error {exc.code}: {detail or exc.reason}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise OllamaError(f"Cannot reach Ollama at {self.base_url}: {exc}") from exc
        if not raw:
            return {}
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise OllamaError(f"Ollama returned invalid JSON: {raw[:500]}") from exc
