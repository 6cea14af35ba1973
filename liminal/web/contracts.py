"""Contracts module.

This module belongs to `liminal.web` in the liminal codebase.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from liminal.models import (
    ChatSession,
    ChatSessionListItem,
    ExpansionResult,
    ProjectListItem,
    ProjectMeta,
    SelectionRange,
)


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNPROCESSABLE = "UNPROCESSABLE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(BaseModel):
    ok: int = 0
    code: ErrorCode
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class OkResponse(BaseModel):
    ok: int = 1


# config


class ConfigView(BaseModel):
    ok: int = 1
    has_api_key: bool
    base_url: str | None = None
    model: str | None = None
    theme: str = ""


class ConfigUpdateRequest(BaseModel):
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    theme: str | None = None


# projects


class ProjectView(BaseModel):
    ok: int = 1
    id: str
    title: str
    description: str = ""
    created_at: datetime
    updated_at: datetime
    page_order: list[str] = Field(default_factory=list)

    @classmethod
    def from_meta(cls, meta: ProjectMeta) -> "ProjectView":
        return cls(
            id=meta.id,
            title=meta.title,
            description=meta.description,
            created_at=meta.created_at,
            updated_at=meta.updated_at,
            page_order=list(meta.page_order),
        )


class ProjectSummary(BaseModel):
    id: str
    title: str
    description: str = ""
    page_count: int = 0
    updated_at: datetime

    @classmethod
    def from_item(cls, item: ProjectListItem) -> "ProjectSummary":
        return cls(
            id=item.id,
            title=item.title,
            description=item.description,
            page_count=item.page_count,
            updated_at=item.updated_at,
        )


class ProjectListResponse(BaseModel):
    ok: int = 1
    items: list[ProjectSummary] = Field(default_factory=list)


class ProjectCreateRequest(BaseModel):
    title: str
    description: str = ""


class ProjectImportRequest(BaseModel):
    folder_path: str
    title: str
    description: str = ""


class PageContent(BaseModel):
    ok: int = 1
    project_id: str
    page_name: str
    content: str


class PageSaveRequest(BaseModel):
    content: str


class PageCreateRequest(BaseModel):
    title: str
    content: str | None = None


class PageView(BaseModel):
    ok: int = 1
    name: str
    title: str


class PageOrderRequest(BaseModel):
    order: list[str]


# ai


class GenerateRequest(BaseModel):
    topic: str
    depth: str = "intermediate"


class SelectionPayload(BaseModel):
    selected_text: str
    start_line: int = 0
    end_line: int = 0

    def to_range(self) -> SelectionRange:
        return SelectionRange(selected_text=self.selected_text, start_line=self.start_line, end_line=self.end_line)


class ExpandRequest(BaseModel):
    selection: SelectionPayload
    question: str


class ExpansionView(BaseModel):
    ok: int = 1
    expansion_id: str
    updated_markdown: str
    inserted_content: str
    insertion_line: int
    updated_lines: list[int] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ExpansionResult) -> "ExpansionView":
        return cls(
            expansion_id=result.expansion_id,
            updated_markdown=result.updated_markdown,
            inserted_content=result.inserted_content,
            insertion_line=result.insertion_line,
            updated_lines=list(result.updated_lines),
        )


class AnswerRequest(BaseModel):
    selection: SelectionPayload
    question: str


class AnswerResponse(BaseModel):
    ok: int = 1
    answer: str


# chat


class ChatMessageView(BaseModel):
    role: str
    content: str
    timestamp: datetime


class ChatSessionView(BaseModel):
    ok: int = 1
    id: str
    project_id: str
    title: str
    messages: list[ChatMessageView] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: ChatSession) -> "ChatSessionView":
        return cls(
            id=session.id,
            project_id=session.project_id,
            title=session.title,
            messages=[ChatMessageView(role=m.role, content=m.content, timestamp=m.timestamp) for m in session.messages],
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class ChatSessionSummary(BaseModel):
    id: str
    title: str
    message_count: int = 0
    updated_at: datetime

    @classmethod
    def from_item(cls, item: ChatSessionListItem) -> "ChatSessionSummary":
        return cls(id=item.id, title=item.title, message_count=item.message_count, updated_at=item.updated_at)


class ChatSessionListResponse(BaseModel):
    ok: int = 1
    items: list[ChatSessionSummary] = Field(default_factory=list)


class ChatSendRequest(BaseModel):
    message: str


class ChatAgentResponse(BaseModel):
    ok: int = 1
    response: str
    tool_used: str | None = None
    pages_changed: bool = False
