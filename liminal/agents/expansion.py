"""Expansion module.

Selection-driven edits: ask the model for a patch against one page and apply
it, or answer a question about the selection without touching the page.
"""

from __future__ import annotations

import logging
import re
import uuid

from liminal.agents.prompts import ANSWER_SYSTEM_PROMPT, EXPANSION_SYSTEM_PROMPT, answer_prompt, expansion_prompt
from liminal.llm.provider import LLMProvider, system_message, user_message
from liminal.models import ExpansionResult, SelectionRange
from liminal.patch import apply_patch_to_document, parse_patch
from liminal.storage import ProjectStore

logger = logging.getLogger(__name__)

EXPANSION_TEMPERATURE = 0.7


def new_expansion_id() -> str:
    return "exp_" + uuid.uuid4().hex[:8]


def expand_selection(
    project_id: str,
    page_name: str,
    selection: SelectionRange,
    question: str,
    *,
    provider: LLMProvider,
    store: ProjectStore,
) -> ExpansionResult:
    content = store.load_page(project_id, page_name)
    messages = [
        system_message(EXPANSION_SYSTEM_PROMPT),
        user_message(expansion_prompt(content, selection.selected_text, question)),
    ]
    response = provider.complete(messages, temperature=EXPANSION_TEMPERATURE)

    # PatchParseError propagates; the page is left untouched.
    applied = apply_patch_to_document(content, parse_patch(response))
    store.save_page(project_id, page_name, applied.text)

    result = ExpansionResult(
        expansion_id=new_expansion_id(),
        updated_markdown=applied.text,
        inserted_content=applied.inserted_text,
        insertion_line=applied.inserted_line_numbers[0] if applied.inserted_line_numbers else 1,
        updated_lines=list(applied.inserted_line_numbers),
    )
    logger.info(
        "expanded %s/%s at line %d (%d lines inserted)",
        project_id,
        page_name,
        result.insertion_line,
        len(result.updated_lines),
    )
    return result


def answer_question(selection: SelectionRange, question: str, *, provider: LLMProvider) -> str:
    messages = [
        system_message(ANSWER_SYSTEM_PROMPT),
        user_message(answer_prompt(selection.selected_text, question)),
    ]
    return provider.complete(messages, temperature=EXPANSION_TEMPERATURE).strip()


def remove_expansion(project_id: str, page_name: str, expansion_id: str, *, store: ProjectStore) -> str:
    """Drop the first `<details class="ai-expansion">` block carrying `expansion_id` and save the page."""
    content = store.load_page(project_id, page_name)
    pattern = re.compile(
        r'<details class="ai-expansion" data-expansion-id="' + re.escape(expansion_id) + r'".*?</details>',
        re.DOTALL,
    )
    updated = pattern.sub("", content, count=1)
    store.save_page(project_id, page_name, updated)
    return updated
