"""Apply module.

This module belongs to `liminal.patch` in the liminal codebase.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from liminal.patch.locator import find_line_fuzzy, loosely_matches, seek_sequence
from liminal.patch.parser import PatchOperation, UpdateFile, UpdateFileChunk

logger = logging.getLogger(__name__)


class Replacement(NamedTuple):
    start: int
    old_len: int
    new_lines: list[str]


class AppliedPatch(NamedTuple):
    text: str
    inserted_line_numbers: list[int]
    inserted_text: str


def split_lines(text: str) -> list[str]:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _locate_old_lines(lines: Sequence[str], chunk: UpdateFileChunk, cursor: int) -> int | None:
    pattern = chunk.old_lines
    found = seek_sequence(lines, pattern, cursor, chunk.is_end_of_file)

    if found is None and pattern[-1] == "":
        found = seek_sequence(lines, pattern[:-1], cursor, chunk.is_end_of_file)

    if found is None:
        first = next((p for p in pattern if p.strip()), None)
        anchor = find_line_fuzzy(lines, first) if first is not None else None
        if anchor is not None:
            matched = 0
            for offset, old in enumerate(pattern):
                if anchor + offset >= len(lines):
                    continue
                if not loosely_matches(lines[anchor + offset], old):
                    break
                matched += 1
            if matched > 0:
                found = anchor
    return found


def narrow_replacement(start: int, old_lines: Sequence[str], new_lines: Sequence[str]) -> Replacement:
    """Drop the context lines both sides share at either end, so only changed lines are replaced."""
    shared = min(len(old_lines), len(new_lines))
    head = 0
    while head < shared and old_lines[head] == new_lines[head]:
        head += 1
    tail = 0
    while tail < shared - head and old_lines[-1 - tail] == new_lines[-1 - tail]:
        tail += 1
    return Replacement(
        start + head,
        len(old_lines) - head - tail,
        list(new_lines[head : len(new_lines) - tail]),
    )


def compute_replacements(original_lines: Sequence[str], chunks: Sequence[UpdateFileChunk]) -> list[Replacement]:
    replacements: list[Replacement] = []
    cursor = 0
    total = len(original_lines)

    for chunk in chunks:
        if chunk.change_context is not None:
            idx = seek_sequence(original_lines, [chunk.change_context], cursor)
            if idx is None:
                idx = find_line_fuzzy(original_lines, chunk.change_context)
            if idx is not None:
                cursor = idx + 1
            else:
                logger.debug("context line not found: %r", chunk.change_context)

        if not chunk.old_lines:
            at = total if chunk.is_end_of_file else min(cursor, total)
            replacements.append(Replacement(at, 0, list(chunk.new_lines)))
            continue

        found = _locate_old_lines(original_lines, chunk, cursor)
        if found is None:
            if cursor > 0:
                replacements.append(Replacement(cursor, 0, list(chunk.new_lines)))
            else:
                logger.debug("chunk could not be located; appending at end of document")
                replacements.append(Replacement(total, 0, list(chunk.new_lines)))
            continue

        replacements.append(narrow_replacement(found, chunk.old_lines, chunk.new_lines))
        cursor = found + len(chunk.old_lines)

    # sorted() is stable, so equal starts keep chunk order
    return sorted(replacements, key=lambda r: r.start)


def apply_replacements(
    lines: Sequence[str],
    replacements: Sequence[Replacement],
) -> tuple[list[str], list[int], str]:
    out = list(lines)
    line_numbers: list[int] = []
    inserted: list[str] = []

    for start, old_len, new_segment in reversed(list(replacements)):
        for _ in range(old_len):
            if start < len(out):
                del out[start]
        for offset, new_line in enumerate(new_segment):
            out.insert(start + offset, new_line)
            line_numbers.append(start + offset + 1)
        inserted.extend(new_segment)

    return out, line_numbers, "\n".join(inserted)


def apply_update_chunks(text: str, chunks: Sequence[UpdateFileChunk]) -> AppliedPatch:
    lines = split_lines(text)
    if lines and lines[-1] == "":
        lines.pop()

    replacements = compute_replacements(lines, chunks)
    new_lines, line_numbers, inserted = apply_replacements(lines, replacements)

    while new_lines and new_lines[-1] == "":
        new_lines.pop()
    line_numbers = [n for n in line_numbers if n <= len(new_lines)]
    return AppliedPatch("\n".join(new_lines) + "\n", line_numbers, inserted)


def apply_patch_to_document(text: str, operations: Sequence[PatchOperation]) -> AppliedPatch:
    """Apply every non-empty update operation in order to a single document.

    Add and delete operations are ignored; the line numbers and inserted text
    reported are those of the last update that was applied.
    """
    result = AppliedPatch(text, [], "")
    for op in operations:
        if not isinstance(op, UpdateFile) or not op.chunks:
            continue
        result = apply_update_chunks(result.text, op.chunks)
    return result
