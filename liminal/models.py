"""Models module.

This module belongs to `liminal` in the liminal codebase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    raw = str(value or "").strip()
    if not raw:
        return utc_now()
    # files written by older builds use a trailing Z
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


@dataclass
class ProjectMeta:
    id: str
    title: str
    description: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    page_order: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "pageOrder": list(self.page_order),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ProjectMeta":
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            created_at=_ts(raw.get("createdAt")),
            updated_at=_ts(raw.get("updatedAt")),
            page_order=[str(p) for p in raw.get("pageOrder") or []],
        )


@dataclass(frozen=True)
class ProjectListItem:
    id: str
    title: str
    description: str
    page_count: int
    updated_at: datetime

    @classmethod
    def from_meta(cls, meta: ProjectMeta) -> "ProjectListItem":
        return cls(
            id=meta.id,
            title=meta.title,
            description=meta.description,
            page_count=len(meta.page_order),
            updated_at=meta.updated_at,
        )


@dataclass(frozen=True)
class Page:
    name: str
    title: str


@dataclass
class PageInfo:
    """A page the agent knows about during one loop run."""

    filename: str
    title: str


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp.isoformat()}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ChatMessage":
        return cls(
            role=str(raw.get("role") or "user"),
            content=str(raw.get("content") or ""),
            timestamp=_ts(raw.get("timestamp")),
        )


@dataclass
class ChatSession:
    id: str
    project_id: str
    title: str
    messages: list[ChatMessage] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ChatSession":
        return cls(
            id=str(raw["id"]),
            project_id=str(raw.get("projectId") or ""),
            title=str(raw.get("title") or ""),
            messages=[ChatMessage.from_dict(m) for m in raw.get("messages") or [] if isinstance(m, dict)],
            created_at=_ts(raw.get("createdAt")),
            updated_at=_ts(raw.get("updatedAt")),
        )


@dataclass(frozen=True)
class ChatSessionListItem:
    id: str
    title: str
    message_count: int
    updated_at: datetime

    @classmethod
    def from_session(cls, session: ChatSession) -> "ChatSessionListItem":
        return cls(
            id=session.id,
            title=session.title,
            message_count=len(session.messages),
            updated_at=session.updated_at,
        )


@dataclass(frozen=True)
class SelectionRange:
    selected_text: str
    start_line: int = 0
    end_line: int = 0


@dataclass(frozen=True)
class ExpansionResult:
    expansion_id: str
    updated_markdown: str
    inserted_content: str
    insertion_line: int
    updated_lines: list[int] = field(default_factory=list)
