from liminal.agents.editing import ChatAgentResult, run_editing_agent
from liminal.agents.expansion import answer_question, expand_selection, remove_expansion
from liminal.agents.generation import generate_learning_material
from liminal.agents.loop import (
    AgentLoop,
    LoggingStatusSink,
    LoopOutcome,
    NullStatusSink,
    ParseFailurePolicy,
    QueueStatusSink,
    StatusEvent,
    StatusSink,
)
from liminal.agents.tool_calls import ToolCall, ToolCallParseError, parse_tool_call
from liminal.agents.tools import (
    EDITING_PROFILE,
    GENERATION_PROFILE,
    AgentState,
    EditingState,
    GenerationState,
    ToolExecutor,
    ToolName,
    ToolProfile,
    ToolResult,
)

__all__ = [
    "AgentLoop",
    "AgentState",
    "ChatAgentResult",
    "EDITING_PROFILE",
    "EditingState",
    "GENERATION_PROFILE",
    "GenerationState",
    "LoggingStatusSink",
    "LoopOutcome",
    "NullStatusSink",
    "ParseFailurePolicy",
    "QueueStatusSink",
    "StatusEvent",
    "StatusSink",
    "ToolCall",
    "ToolCallParseError",
    "ToolExecutor",
    "ToolName",
    "ToolProfile",
    "ToolResult",
    "answer_question",
    "expand_selection",
    "generate_learning_material",
    "parse_tool_call",
    "remove_expansion",
    "run_editing_agent",
]
