from __future__ import annotations

import json
from pathlib import Path

import pytest

from liminal.agents.loop import (
    AgentLoop,
    ParseFailurePolicy,
    QueueStatusSink,
    StatusEvent,
    extract_status,
    tool_status_label,
    truncate_text,
)
from liminal.agents.tool_calls import ToolCall
from liminal.agents.tools import EDITING_PROFILE, GENERATION_PROFILE, EditingState, GenerationState, ToolExecutor
from liminal.llm.provider import LLMProvider, LLMProviderError
from liminal.storage import ProjectStore


class _ScriptedProvider(LLMProvider):
    def __init__(self, replies: list[str], repeat_last: bool = False) -> None:
        self.replies = list(replies)
        self.repeat_last = repeat_last
        self.calls: list[list[dict[str, str]]] = []

    def is_running(self) -> bool:
        return True

    def complete(self, messages, temperature: float = 0.7) -> str:
        self.calls.append(list(messages))
        if self.repeat_last and len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


class _FailingProvider(LLMProvider):
    def is_running(self) -> bool:
        return False

    def complete(self, messages, temperature: float = 0.7) -> str:
        raise LLMProviderError("connection refused")


class _BrokenSink:
    def emit(self, event: StatusEvent) -> None:
        raise RuntimeError("observer went away")


def _drain(sink: QueueStatusSink) -> list[StatusEvent]:
    out: list[StatusEvent] = []
    while not sink.events.empty():
        out.append(sink.events.get_nowait())
    return out


def _tool(name: str, **arguments: str) -> str:
    return f"<tool_call>{json.dumps({'tool': name, 'arguments': arguments})}</tool_call>"


def _generation(tmp_path: Path, max_iterations: int = 30) -> tuple[ToolExecutor, GenerationState, ProjectStore]:
    store = ProjectStore(tmp_path)
    meta = store.create_project("Generating...")
    return ToolExecutor(store, GENERATION_PROFILE), GenerationState(project_id=meta.id, max_iterations=max_iterations), store


def test_generation_runs_until_finish(tmp_path: Path) -> None:
    executor, state, store = _generation(tmp_path)
    provider = _ScriptedProvider(
        [
            "<thinking>Name the book first.</thinking>\n" + _tool("set_book_info", title="Cells", description="Basics"),
            _tool("create_file", title="Intro", content="# Intro\n"),
            _tool("finish", summary="One page"),
        ]
    )
    sink = QueueStatusSink()
    loop = AgentLoop(provider, executor, status_sink=sink, start_message="Go", completion_message="Done")

    outcome = loop.run([{"role": "system", "content": "sys"}, {"role": "user", "content": "topic"}], state)

    assert state.is_finished
    assert outcome.iterations == 3
    assert outcome.pages_changed
    assert outcome.tool_used == "finish"
    assert store.load_project(state.project_id).title == "Cells"
    events = _drain(sink)
    assert events[0] == StatusEvent("start", "Go", 0)
    assert events[-1] == StatusEvent("complete", "Done", 3)
    assert StatusEvent("thinking", "Name the book first.", 1) in events
    assert StatusEvent("tool", "Creating: Intro", 2, "create_file") in events
    # every tool result is fed back as a user turn
    assert outcome.messages[-1]["content"].startswith("Tool 'finish' executed successfully:")


def test_unparseable_replies_retry_until_cap(tmp_path: Path) -> None:
    executor, state, _ = _generation(tmp_path, max_iterations=5)
    provider = _ScriptedProvider(["I am still thinking about it."], repeat_last=True)
    sink = QueueStatusSink()

    outcome = AgentLoop(provider, executor, status_sink=sink).run([], state)

    assert len(provider.calls) == 5
    assert outcome.parse_failures == 5
    corrective = [m for m in outcome.messages if m["content"].startswith("Error parsing your response:")]
    assert len(corrective) == 5
    assert all(m["role"] == "user" for m in corrective)
    assert _drain(sink)[-1] == StatusEvent("complete", "Wrapping up...", 5)


def test_answer_policy_returns_plain_reply(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    pid = store.create_project("Book").id
    executor = ToolExecutor(store, EDITING_PROFILE)
    provider = _ScriptedProvider(["Photosynthesis turns light into sugar."])

    outcome = AgentLoop(provider, executor, policy=ParseFailurePolicy.ANSWER).run([], EditingState(project_id=pid))

    assert outcome.answer == "Photosynthesis turns light into sugar."
    assert outcome.tool_used is None
    assert outcome.iterations == 1


def test_failed_mutation_does_not_mark_pages_changed(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    pid = store.create_project("Book").id
    executor = ToolExecutor(store, EDITING_PROFILE)
    provider = _ScriptedProvider(
        [
            _tool("edit_file", filename="01-missing.md", old_content="a", new_content="b"),
            _tool("respond", message="That page does not exist."),
        ]
    )
    state = EditingState(project_id=pid)

    outcome = AgentLoop(provider, executor, policy=ParseFailurePolicy.ANSWER).run([], state)

    assert not outcome.pages_changed
    assert outcome.tool_used == "respond"
    assert state.response_to_user == "That page does not exist."


def test_sink_errors_do_not_stop_the_loop(tmp_path: Path) -> None:
    executor, state, _ = _generation(tmp_path)
    provider = _ScriptedProvider([_tool("finish")])

    outcome = AgentLoop(provider, executor, status_sink=_BrokenSink()).run([], state)

    assert state.is_finished
    assert outcome.iterations == 1


def test_provider_errors_emit_error_event_and_propagate(tmp_path: Path) -> None:
    executor, state, _ = _generation(tmp_path)
    sink = QueueStatusSink()

    with pytest.raises(LLMProviderError):
        AgentLoop(_FailingProvider(), executor, status_sink=sink).run([], state)

    assert _drain(sink)[-1] == StatusEvent("error", "connection refused", 1)


def test_extract_status_sources() -> None:
    assert extract_status("<thinking>\nPlan the outline\nthen write</thinking>") == "Plan the outline"
    assert extract_status('{"tool": "x"}\n```json\n<tool_call>\nWriting the intro now') == "Writing the intro now"
    assert extract_status('"tool": "x"\n}') is None


def test_truncate_prefers_word_boundary() -> None:
    text = "word " * 30
    short = truncate_text(text, 20)
    assert short == "word word word word..."
    assert truncate_text("x" * 30, 10) == "x" * 10 + "..."
    assert truncate_text("  short  ") == "short"


def test_tool_status_labels() -> None:
    assert tool_status_label(ToolCall("set_book_info", {"title": "Cells"})) == "Naming: Cells"
    assert tool_status_label(ToolCall("create_file")) == "Creating: chapter"
    assert tool_status_label(ToolCall("edit_file", {"filename": "01-a.md"})) == "Editing: 01-a.md"
    assert tool_status_label(ToolCall("read_file")) == "Reading: file"
    assert tool_status_label(ToolCall("list_files")) == "Reviewing structure..."
    assert tool_status_label(ToolCall("finish")) == "Finalizing content..."
    assert tool_status_label(ToolCall("respond")) == "Executing: respond"
