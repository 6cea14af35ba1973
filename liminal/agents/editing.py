"""Editing module.

This module belongs to `liminal.agents` in the liminal codebase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from liminal.agents.loop import AgentLoop, ParseFailurePolicy, StatusSink
from liminal.agents.prompts import EDITING_AGENT_SYSTEM_PROMPT, SUMMARY_REQUEST
from liminal.agents.tool_calls import ToolCallParseError, parse_tool_call
from liminal.agents.tools import EDITING_PROFILE, EditingState, ToolExecutor, ToolName
from liminal.llm.provider import LLMProvider, LLMProviderError, Message, assistant_message, system_message, user_message
from liminal.models import ChatMessage, PageInfo
from liminal.storage import ChatStore, ProjectStore, add_message

logger = logging.getLogger(__name__)

EDITING_MAX_ITERATIONS = 10
EDITING_HISTORY_LIMIT = 20
AGENT_TEMPERATURE = 0.7
DEFAULT_ACKNOWLEDGEMENT = "I've made the requested changes to your learning material."


@dataclass(frozen=True)
class ChatAgentResult:
    response: str
    tool_used: str | None
    pages_changed: bool


def history_messages(history: list[ChatMessage], limit: int = EDITING_HISTORY_LIMIT) -> list[Message]:
    out: list[Message] = []
    for msg in history[-limit:]:
        if msg.role == "user":
            out.append(user_message(msg.content))
        else:
            out.append(assistant_message(msg.content))
    return out


def _summarize(provider: LLMProvider, messages: list[Message]) -> str:
    messages.append(user_message(SUMMARY_REQUEST))
    try:
        reply = provider.complete(list(messages), temperature=AGENT_TEMPERATURE)
    except LLMProviderError:
        logger.warning("summary request failed; using default acknowledgement", exc_info=True)
        return DEFAULT_ACKNOWLEDGEMENT
    try:
        call = parse_tool_call(reply)
    except ToolCallParseError:
        return DEFAULT_ACKNOWLEDGEMENT
    message = call.arg_str("message") if call.name == ToolName.RESPOND.value else ""
    return message or DEFAULT_ACKNOWLEDGEMENT


def run_editing_agent(
    project_id: str,
    session_id: str,
    message: str,
    *,
    provider: LLMProvider,
    store: ProjectStore,
    chats: ChatStore,
    status_sink: StatusSink | None = None,
    max_iterations: int = EDITING_MAX_ITERATIONS,
) -> ChatAgentResult:
    session = chats.load_session(project_id, session_id)
    project = store.load_project(project_id)
    add_message(session, "user", message)

    state = EditingState(
        project_id=project_id,
        pages=[PageInfo(filename=f, title=f) for f in project.page_order],
        max_iterations=max_iterations,
    )
    messages = [system_message(EDITING_AGENT_SYSTEM_PROMPT), *history_messages(session.messages)]

    loop = AgentLoop(
        provider,
        ToolExecutor(store, EDITING_PROFILE),
        policy=ParseFailurePolicy.ANSWER,
        status_sink=status_sink,
        temperature=AGENT_TEMPERATURE,
        start_message="thinking",
        completion_message="complete",
    )
    outcome = loop.run(messages, state)

    response = state.response_to_user if state.response_to_user is not None else outcome.answer
    if not response:
        response = _summarize(provider, messages)

    add_message(session, "assistant", response)
    chats.save_session(session)
    return ChatAgentResult(response=response, tool_used=outcome.tool_used, pages_changed=outcome.pages_changed)
