"""Tools module.

Executes one validated tool call against the project store and records its
effect on the per-run agent state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from liminal.agents.tool_calls import ToolCall
from liminal.models import PageInfo
from liminal.storage import ProjectStore, StoreError

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    CREATE_FILE = "create_file"
    EDIT_FILE = "edit_file"
    READ_FILE = "read_file"
    LIST_FILES = "list_files"
    SET_BOOK_INFO = "set_book_info"
    DELETE_FILE = "delete_file"
    RESPOND = "respond"
    FINISH = "finish"

    @classmethod
    def lookup(cls, name: str) -> "ToolName | None":
        try:
            return cls(name)
        except ValueError:
            return None


# Tools whose success changes page files or page order.
PAGE_MUTATING_TOOLS = frozenset({ToolName.CREATE_FILE, ToolName.EDIT_FILE, ToolName.DELETE_FILE})


@dataclass(frozen=True)
class ToolProfile:
    name: str
    enabled: frozenset[ToolName]
    empty_listing: str
    list_titles: bool = True
    refresh_empty_listing: bool = False


GENERATION_PROFILE = ToolProfile(
    name="generation",
    enabled=frozenset(
        {
            ToolName.CREATE_FILE,
            ToolName.EDIT_FILE,
            ToolName.READ_FILE,
            ToolName.LIST_FILES,
            ToolName.SET_BOOK_INFO,
            ToolName.FINISH,
        }
    ),
    empty_listing="No pages created yet.",
)

EDITING_PROFILE = ToolProfile(
    name="editing",
    enabled=frozenset(
        {
            ToolName.CREATE_FILE,
            ToolName.EDIT_FILE,
            ToolName.READ_FILE,
            ToolName.LIST_FILES,
            ToolName.SET_BOOK_INFO,
            ToolName.DELETE_FILE,
            ToolName.RESPOND,
        }
    ),
    empty_listing="No pages in this project yet.",
    list_titles=False,
    refresh_empty_listing=True,
)


@dataclass(frozen=True)
class ToolResult:
    tool_name: str
    success: bool
    output: str

    def report(self) -> str:
        if self.success:
            return f"Tool '{self.tool_name}' executed successfully:\n{self.output}"
        return f"Tool '{self.tool_name}' failed:\n{self.output}"


@dataclass
class AgentState:
    project_id: str
    pages: list[PageInfo] = field(default_factory=list)
    iteration: int = 0
    max_iterations: int = 30

    def is_terminal(self) -> bool:
        return False

    @property
    def exhausted(self) -> bool:
        return self.iteration >= self.max_iterations


@dataclass
class GenerationState(AgentState):
    is_finished: bool = False
    book_title: str | None = None

    def is_terminal(self) -> bool:
        return self.is_finished


@dataclass
class EditingState(AgentState):
    response_to_user: str | None = None

    def is_terminal(self) -> bool:
        return self.response_to_user is not None


def _ok(tool: ToolName, output: str) -> ToolResult:
    return ToolResult(tool_name=tool.value, success=True, output=output)


def _fail(tool: ToolName, output: str) -> ToolResult:
    return ToolResult(tool_name=tool.value, success=False, output=output)


class ToolExecutor:
    def __init__(self, store: ProjectStore, profile: ToolProfile) -> None:
        self.store = store
        self.profile = profile
        self._handlers: dict[ToolName, Callable[[ToolCall, AgentState], ToolResult]] = {
            ToolName.CREATE_FILE: self._create_file,
            ToolName.EDIT_FILE: self._edit_file,
            ToolName.READ_FILE: self._read_file,
            ToolName.LIST_FILES: self._list_files,
            ToolName.SET_BOOK_INFO: self._set_book_info,
            ToolName.DELETE_FILE: self._delete_file,
            ToolName.RESPOND: self._respond,
            ToolName.FINISH: self._finish,
        }

    def execute(self, call: ToolCall, state: AgentState) -> ToolResult:
        tool = ToolName.lookup(call.name)
        if tool is None or tool not in self.profile.enabled:
            return ToolResult(tool_name=call.name, success=False, output=f"Unknown tool: {call.name}")
        result = self._handlers[tool](call, state)
        if not result.success:
            logger.info("tool %s failed: %s", call.name, result.output)
        return result

    def _create_file(self, call: ToolCall, state: AgentState) -> ToolResult:
        title = call.arg_str("title", "Untitled")
        content = call.arg_str("content")
        try:
            filename = self.store.create_page(state.project_id, title, content)
        except StoreError as exc:
            return _fail(ToolName.CREATE_FILE, f"Failed to create page: {exc}")
        state.pages.append(PageInfo(filename=filename, title=title))
        return _ok(ToolName.CREATE_FILE, f"Created page '{title}' as {filename}")

    def _edit_file(self, call: ToolCall, state: AgentState) -> ToolResult:
        filename = call.arg_str("filename")
        old_content = call.arg_str("old_content")
        new_content = call.arg_str("new_content")
        if not old_content:
            return _fail(ToolName.EDIT_FILE, f"old_content is required to edit '{filename}'.")
        try:
            current = self.store.load_page(state.project_id, filename)
        except StoreError as exc:
            return _fail(ToolName.EDIT_FILE, f"Failed to read file '{filename}': {exc}")
        if old_content not in current:
            return _fail(
                ToolName.EDIT_FILE,
                f"Could not find the specified text in '{filename}'. Make sure old_content matches exactly.",
            )
        try:
            self.store.save_page(state.project_id, filename, current.replace(old_content, new_content, 1))
        except StoreError as exc:
            return _fail(ToolName.EDIT_FILE, f"Failed to save edits to '{filename}': {exc}")
        return _ok(ToolName.EDIT_FILE, f"Successfully edited '{filename}'")

    def _read_file(self, call: ToolCall, state: AgentState) -> ToolResult:
        filename = call.arg_str("filename")
        try:
            content = self.store.load_page(state.project_id, filename)
        except StoreError as exc:
            return _fail(ToolName.READ_FILE, f"Failed to read '{filename}': {exc}")
        return _ok(ToolName.READ_FILE, f"Content of '{filename}':\n\n{content}")

    def _list_files(self, call: ToolCall, state: AgentState) -> ToolResult:
        if not state.pages and self.profile.refresh_empty_listing:
            try:
                meta = self.store.load_project(state.project_id)
            except StoreError:
                logger.debug("could not refresh page list for %s", state.project_id)
            else:
                state.pages = [PageInfo(filename=f, title=f) for f in meta.page_order]
        if not state.pages:
            return _ok(ToolName.LIST_FILES, self.profile.empty_listing)
        if self.profile.list_titles:
            lines = [f"- {p.filename} ({p.title})" for p in state.pages]
        else:
            lines = [f"- {p.filename}" for p in state.pages]
        return _ok(ToolName.LIST_FILES, "Pages in project:\n" + "\n".join(lines))

    def _set_book_info(self, call: ToolCall, state: AgentState) -> ToolResult:
        title = call.arg_str("title", "Untitled")
        description = call.arg_str("description")
        if isinstance(state, GenerationState):
            state.book_title = title
        try:
            meta = self.store.load_project(state.project_id)
        except StoreError as exc:
            return _fail(ToolName.SET_BOOK_INFO, f"Failed to load project: {exc}")
        meta.title = title
        meta.description = description
        try:
            self.store.save_project(meta)
        except StoreError as exc:
            return _fail(ToolName.SET_BOOK_INFO, f"Failed to save book info: {exc}")
        if isinstance(state, GenerationState):
            return _ok(ToolName.SET_BOOK_INFO, f"Book info set - Title: '{title}', Description: '{description}'")
        return _ok(ToolName.SET_BOOK_INFO, f"Updated book - Title: '{title}', Description: '{description}'")

    def _delete_file(self, call: ToolCall, state: AgentState) -> ToolResult:
        filename = call.arg_str("filename")
        try:
            self.store.delete_page(state.project_id, filename)
        except StoreError as exc:
            return _fail(ToolName.DELETE_FILE, str(exc))
        state.pages = [p for p in state.pages if p.filename != filename]
        return _ok(ToolName.DELETE_FILE, f"Deleted '{filename}'")

    def _respond(self, call: ToolCall, state: AgentState) -> ToolResult:
        message = call.arg_str("message", "I'm here to help with your learning material.")
        if isinstance(state, EditingState):
            state.response_to_user = message
        return _ok(ToolName.RESPOND, message)

    def _finish(self, call: ToolCall, state: AgentState) -> ToolResult:
        if isinstance(state, GenerationState):
            state.is_finished = True
        summary = call.arg_str("summary", "Content generation complete.")
        return _ok(ToolName.FINISH, f"Finished: {summary}")
