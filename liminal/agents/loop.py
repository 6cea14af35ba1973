"""Loop module.

One agent loop drives both content generation and conversational editing.
Each iteration sends the transcript to the model, reports a short status line,
extracts a single tool call, executes it and feeds the result back as a user
turn until the state reports itself terminal or the iteration cap is reached.
"""

from __future__ import annotations

import logging
import queue
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from liminal.agents.tool_calls import ToolCall, ToolCallParseError, parse_tool_call
from liminal.agents.tools import PAGE_MUTATING_TOOLS, AgentState, ToolExecutor, ToolName
from liminal.llm.provider import LLMProvider, Message, assistant_message, user_message

logger = logging.getLogger(__name__)

STATUS_MAX_CHARS = 80

_THINKING_RE = re.compile(r"<thinking>\s*([\s\S]*?)\s*</thinking>")


class ParseFailurePolicy(str, Enum):
    RETRY = "retry"
    ANSWER = "answer"


@dataclass(frozen=True)
class StatusEvent:
    kind: str  # start | iteration | thinking | tool | complete | error
    message: str
    iteration: int = 0
    tool_name: str | None = None


class StatusSink(Protocol):
    def emit(self, event: StatusEvent) -> None: ...


class NullStatusSink:
    def emit(self, event: StatusEvent) -> None:
        return None


class LoggingStatusSink:
    def __init__(self, name: str = "agent") -> None:
        self._log = logging.getLogger(f"{__name__}.{name}")

    def emit(self, event: StatusEvent) -> None:
        self._log.info("[%s #%d] %s", event.kind, event.iteration, event.message)


class QueueStatusSink:
    def __init__(self, events: "queue.Queue[StatusEvent] | None" = None) -> None:
        self.events: queue.Queue[StatusEvent] = events if events is not None else queue.Queue()

    def emit(self, event: StatusEvent) -> None:
        self.events.put(event)


def truncate_text(text: str, max_len: int = STATUS_MAX_CHARS) -> str:
    trimmed = text.strip()
    if len(trimmed) <= max_len:
        return trimmed
    head = trimmed[:max_len]
    last_space = head.rfind(" ")
    if last_space > max_len // 2:
        return trimmed[:last_space] + "..."
    return head + "..."


def _is_noise_line(line: str) -> bool:
    if line.startswith(("{", "}", "```")):
        return True
    if line.startswith("<") and (line.endswith(">") or "</" in line):
        return True
    return line.startswith('"') and ":" in line


def extract_status(response: str) -> str | None:
    """Short status line for observers, or None when nothing readable is present."""
    match = _THINKING_RE.search(response)
    if match:
        text = match.group(1).strip()
        first_line = text.splitlines()[0] if text else ""
        status = truncate_text(first_line)
        if status:
            return status
    for raw in response.splitlines():
        line = raw.strip()
        if not line or _is_noise_line(line):
            continue
        status = truncate_text(line)
        if status:
            return status
    return None


def tool_status_label(call: ToolCall) -> str:
    tool = ToolName.lookup(call.name)
    if tool is ToolName.SET_BOOK_INFO:
        return f"Naming: {call.arg_str('title', 'book')}"
    if tool is ToolName.CREATE_FILE:
        return f"Creating: {call.arg_str('title', 'chapter')}"
    if tool is ToolName.EDIT_FILE:
        return f"Editing: {call.arg_str('filename', 'file')}"
    if tool is ToolName.READ_FILE:
        return f"Reading: {call.arg_str('filename', 'file')}"
    if tool is ToolName.LIST_FILES:
        return "Reviewing structure..."
    if tool is ToolName.FINISH:
        return "Finalizing content..."
    return f"Executing: {call.name}"


def parse_error_message(exc: Exception) -> str:
    return f"Error parsing your response: {exc}. Please respond with a valid tool call."


@dataclass
class LoopOutcome:
    answer: str | None = None
    tool_used: str | None = None
    pages_changed: bool = False
    iterations: int = 0
    parse_failures: int = 0
    messages: list[Message] = field(default_factory=list)


class AgentLoop:
    def __init__(
        self,
        provider: LLMProvider,
        executor: ToolExecutor,
        *,
        policy: ParseFailurePolicy = ParseFailurePolicy.RETRY,
        status_sink: StatusSink | None = None,
        temperature: float = 0.7,
        start_message: str = "Starting...",
        completion_message: str = "Complete",
    ) -> None:
        self.provider = provider
        self.executor = executor
        self.policy = policy
        self.sink: StatusSink = status_sink if status_sink is not None else NullStatusSink()
        self.temperature = temperature
        self.start_message = start_message
        self.completion_message = completion_message

    def _emit(self, kind: str, message: str, iteration: int, tool_name: str | None = None) -> None:
        try:
            self.sink.emit(StatusEvent(kind=kind, message=message, iteration=iteration, tool_name=tool_name))
        except Exception:
            logger.warning("status sink failed for %s event", kind, exc_info=True)

    def run(self, messages: list[Message], state: AgentState) -> LoopOutcome:
        """Run until the state is terminal, the cap is hit or (ANSWER policy) a reply has no tool call.

        `messages` is extended in place and also returned on the outcome.
        """
        outcome = LoopOutcome(messages=messages)
        self._emit("start", self.start_message, state.iteration)
        try:
            self._iterate(messages, state, outcome)
        except Exception as exc:
            logger.error("agent loop failed at iteration %d", state.iteration, exc_info=True)
            self._emit("error", str(exc), state.iteration)
            raise
        outcome.iterations = state.iteration
        if state.exhausted and not state.is_terminal() and outcome.answer is None:
            logger.warning("agent reached max iterations (%d) without finishing", state.max_iterations)
            self._emit("complete", "Wrapping up...", state.iteration)
        else:
            self._emit("complete", self.completion_message, state.iteration)
        return outcome

    def _iterate(self, messages: list[Message], state: AgentState, outcome: LoopOutcome) -> None:
        while not state.is_terminal() and not state.exhausted:
            state.iteration += 1
            logger.debug("agent iteration %d/%d", state.iteration, state.max_iterations)
            self._emit("iteration", f"Step {state.iteration}", state.iteration)

            response = self.provider.complete(list(messages), temperature=self.temperature)

            status = extract_status(response)
            if status:
                self._emit("thinking", status, state.iteration)
            messages.append(assistant_message(response))

            try:
                call = parse_tool_call(response)
            except ToolCallParseError as exc:
                outcome.parse_failures += 1
                if self.policy is ParseFailurePolicy.ANSWER:
                    outcome.answer = response
                    return
                logger.debug("unparseable agent response: %s", exc)
                messages.append(user_message(parse_error_message(exc)))
                continue

            self._emit("tool", tool_status_label(call), state.iteration, call.name)
            outcome.tool_used = call.name
            result = self.executor.execute(call, state)
            if result.success and ToolName.lookup(call.name) in PAGE_MUTATING_TOOLS:
                outcome.pages_changed = True
            messages.append(user_message(result.report()))
