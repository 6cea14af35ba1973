from __future__ import annotations

import pytest

from liminal.agents.tool_calls import ToolCall, ToolCallParseError, parse_tool_call, parse_tool_json


def test_tagged_call_with_nested_arguments() -> None:
    text = (
        "<thinking>Start with the intro.</thinking>\n"
        '<tool_call>{"tool": "create_file", "arguments": {"title": "Intro", "content": "# Intro"}}</tool_call>'
    )
    call = parse_tool_call(text)
    assert call == ToolCall(name="create_file", arguments={"title": "Intro", "content": "# Intro"})


def test_bare_flat_object_is_accepted() -> None:
    call = parse_tool_call('I will look first. {"tool": "list_files"} then continue.')
    assert call.name == "list_files"
    assert call.arguments == {}


def test_fenced_json_block_is_accepted() -> None:
    text = 'Done.\n```json\n{"tool": "finish", "arguments": {"summary": "Two pages"}}\n```'
    call = parse_tool_call(text)
    assert call.name == "finish"
    assert call.arg_str("summary") == "Two pages"


def test_first_matching_form_decides() -> None:
    text = '<tool_call>{"tool": broken}</tool_call>\n```json\n{"tool": "finish"}\n```'
    with pytest.raises(ToolCallParseError, match="Failed to parse tool JSON"):
        parse_tool_call(text)


def test_missing_or_non_string_tool_field() -> None:
    with pytest.raises(ToolCallParseError, match="Missing 'tool' field"):
        parse_tool_call('<tool_call>{"name": "create_file"}</tool_call>')
    with pytest.raises(ToolCallParseError, match="Missing 'tool' field"):
        parse_tool_json('{"tool": 5}')
    with pytest.raises(ToolCallParseError, match="Missing 'tool' field"):
        parse_tool_json('["tool"]')


def test_null_arguments_become_empty() -> None:
    assert parse_tool_json('{"tool": "list_files", "arguments": null}').arguments == {}


def test_non_object_arguments_are_rejected() -> None:
    with pytest.raises(ToolCallParseError, match="Invalid tool call"):
        parse_tool_json('{"tool": "read_file", "arguments": ["a.md"]}')


def test_plain_prose_has_no_tool_call() -> None:
    text = "I think the book should cover cells first. " * 10
    with pytest.raises(ToolCallParseError) as info:
        parse_tool_call(text)
    message = str(info.value)
    assert message.startswith("No valid tool call found in response: ")
    assert message.endswith(text[:200])


def test_arg_str_ignores_non_string_values() -> None:
    call = ToolCall(name="create_file", arguments={"title": 3, "content": "body"})
    assert call.arg_str("title", "Untitled") == "Untitled"
    assert call.arg_str("content") == "body"
    assert call.arg_str("missing") == ""
