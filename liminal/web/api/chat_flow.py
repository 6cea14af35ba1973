"""Chat Flow module.

This module belongs to `liminal.web.api` in the liminal codebase.
"""

from __future__ import annotations

from fastapi import APIRouter

from liminal.agents import LoggingStatusSink, run_editing_agent
from liminal.web import runtime
from liminal.web.contracts import (
    ChatAgentResponse,
    ChatSendRequest,
    ChatSessionListResponse,
    ChatSessionSummary,
    ChatSessionView,
    OkResponse,
)

router = APIRouter()


@router.get("/api/projects/{project_id}/chats")
def list_sessions(project_id: str) -> ChatSessionListResponse:
    runtime.project_store().load_project(project_id)
    items = runtime.chat_store().list_sessions(project_id)
    return ChatSessionListResponse(items=[ChatSessionSummary.from_item(item) for item in items])


@router.post("/api/projects/{project_id}/chats")
def create_session(project_id: str) -> ChatSessionView:
    runtime.project_store().load_project(project_id)
    return ChatSessionView.from_session(runtime.chat_store().create_session(project_id))


@router.get("/api/projects/{project_id}/chats/{session_id}")
def get_session(project_id: str, session_id: str) -> ChatSessionView:
    return ChatSessionView.from_session(runtime.chat_store().load_session(project_id, session_id))


@router.delete("/api/projects/{project_id}/chats/{session_id}")
def delete_session(project_id: str, session_id: str) -> OkResponse:
    runtime.chat_store().delete_session(project_id, session_id)
    return OkResponse()


@router.post("/api/projects/{project_id}/chats/{session_id}/messages")
def send_message(project_id: str, session_id: str, payload: ChatSendRequest) -> ChatAgentResponse:
    result = run_editing_agent(
        project_id,
        session_id,
        payload.message,
        provider=runtime.llm_provider(),
        store=runtime.project_store(),
        chats=runtime.chat_store(),
        status_sink=LoggingStatusSink("editing"),
    )
    return ChatAgentResponse(response=result.response, tool_used=result.tool_used, pages_changed=result.pages_changed)
