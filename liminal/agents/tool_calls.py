"""Tool Calls module.

Extracts exactly one tool invocation from free-form model output.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, StrictStr, ValidationError, field_validator

_TAGGED_RE = re.compile(r"<tool_call>\s*(\{[\s\S]*?\})\s*</tool_call>")
_BARE_OBJECT_RE = re.compile(r'\{[^{}]*"tool"[^{}]*\}')
_FENCED_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")


class ToolCallParseError(ValueError):
    pass


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def arg_str(self, key: str, default: str = "") -> str:
        value = self.arguments.get(key)
        return value if isinstance(value, str) else default


class _ToolCallPayload(BaseModel):
    tool: StrictStr
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def _null_arguments(cls, value: Any) -> Any:
        return {} if value is None else value


def parse_tool_json(raw: str) -> ToolCall:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ToolCallParseError(f"Failed to parse tool JSON: {exc} - Input: {raw}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("tool"), str):
        raise ToolCallParseError("Missing 'tool' field")
    try:
        payload = _ToolCallPayload.model_validate(data)
    except ValidationError as exc:
        raise ToolCallParseError(f"Invalid tool call: {exc.errors()[0].get('msg', exc)}") from exc
    return ToolCall(name=payload.tool, arguments=payload.arguments)


def parse_tool_call(text: str) -> ToolCall:
    """Return the first tool call found in `text`.

    Recognized forms, in order: a `<tool_call>` tagged object, the first flat
    object containing a `"tool"` key, a JSON object inside a fenced block. The
    first form that matches decides; its JSON is not retried with later forms.
    """
    tagged = _TAGGED_RE.search(text)
    if tagged:
        return parse_tool_json(tagged.group(1))
    bare = _BARE_OBJECT_RE.search(text)
    if bare:
        return parse_tool_json(bare.group(0))
    fenced = _FENCED_RE.search(text)
    if fenced:
        return parse_tool_json(fenced.group(1))
    raise ToolCallParseError(f"No valid tool call found in response: {text[:200]}")
