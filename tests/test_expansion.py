from __future__ import annotations

import pytest

from liminal.agents import answer_question, expand_selection, remove_expansion
from liminal.llm.provider import LLMProvider
from liminal.models import SelectionRange
from liminal.patch import PatchParseError
from liminal.storage import ProjectStore

PAGE = "# Cells\n\nCells are the basic unit of life.\n\nThey divide to grow.\n"


class _Canned(LLMProvider):
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.messages: list[dict[str, str]] = []

    def is_running(self) -> bool:
        return True

    def complete(self, messages, temperature: float = 0.7) -> str:
        self.messages = list(messages)
        return self.reply


def _page(tmp_path, content: str = PAGE):
    store = ProjectStore(tmp_path)
    pid = store.create_project("Biology").id
    name = store.create_page(pid, "Cells", content)
    return store, pid, name


def test_expand_selection_applies_patch_and_saves(tmp_path) -> None:
    store, pid, name = _page(tmp_path)
    provider = _Canned(
        "Here you go:\n"
        "*** Begin Patch\n"
        "*** Update File: content.md\n"
        "@@ Cells are the basic unit of life.\n"
        " Cells are the basic unit of life.\n"
        "+Every living thing is made of one or more cells.\n"
        "*** End Patch\n"
    )
    selection = SelectionRange(selected_text="Cells are the basic unit of life.", start_line=3, end_line=3)

    result = expand_selection(pid, name, selection, "What does this mean?", provider=provider, store=store)

    assert result.expansion_id.startswith("exp_")
    assert len(result.expansion_id) == 12
    assert result.insertion_line == 4
    assert result.updated_lines == [4]
    assert result.inserted_content == "Every living thing is made of one or more cells."
    assert result.updated_markdown.splitlines()[3] == "Every living thing is made of one or more cells."
    assert store.load_page(pid, name) == result.updated_markdown
    assert "What does this mean?" in provider.messages[1]["content"]
    assert PAGE in provider.messages[1]["content"]


def test_expand_selection_without_patch_leaves_page(tmp_path) -> None:
    store, pid, name = _page(tmp_path)
    provider = _Canned("I would rather explain it in prose.")

    with pytest.raises(PatchParseError):
        expand_selection(pid, name, SelectionRange("Cells"), "Why?", provider=provider, store=store)

    assert store.load_page(pid, name) == PAGE


def test_answer_question_returns_stripped_text() -> None:
    provider = _Canned("  It means cells are the smallest living units.\n")
    answer = answer_question(SelectionRange("Cells are the basic unit of life."), "Meaning?", provider=provider)
    assert answer == "It means cells are the smallest living units."
    assert provider.messages[0]["role"] == "system"


def test_remove_expansion_drops_first_matching_block(tmp_path) -> None:
    block = '<details class="ai-expansion" data-expansion-id="exp_1a2b3c4d">\n<summary>Q</summary>\nA\n</details>'
    content = f"# Cells\n\n{block}\n\nText\n{block}\n"
    store, pid, name = _page(tmp_path, content)

    updated = remove_expansion(pid, name, "exp_1a2b3c4d", store=store)

    assert updated == f"# Cells\n\n\n\nText\n{block}\n"
    assert store.load_page(pid, name) == updated
    assert remove_expansion(pid, name, "exp_.*", store=store) == updated
