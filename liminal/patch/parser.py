"""Parser for the `*** Begin Patch` format emitted by the expansion model.

Grammar:

    *** Begin Patch
    *** Add File: <path>
    +<content line>
    *** Update File: <path>
    @@ <optional single context line>
     <context line>
    -<line to remove>
    +<line to add>
    *** End of File
    *** Delete File: <path>
    *** End Patch

The parser is lenient: unknown lines between directives are skipped and a
missing `*** End Patch` is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

BEGIN_PATCH = "*** Begin Patch"
END_PATCH = "*** End Patch"
ADD_FILE = "*** Add File:"
UPDATE_FILE = "*** Update File:"
DELETE_FILE = "*** Delete File:"
END_OF_FILE = "*** End of File"

_FILE_DIRECTIVES = (ADD_FILE, UPDATE_FILE, DELETE_FILE, END_PATCH)


class PatchParseError(ValueError):
    pass


@dataclass
class UpdateFileChunk:
    change_context: str | None = None
    old_lines: list[str] = field(default_factory=list)
    new_lines: list[str] = field(default_factory=list)
    is_end_of_file: bool = False


@dataclass(frozen=True)
class AddFile:
    path: str
    content: str


@dataclass(frozen=True)
class UpdateFile:
    path: str
    chunks: list[UpdateFileChunk] = field(default_factory=list)


@dataclass(frozen=True)
class DeleteFile:
    path: str


PatchOperation = Union[AddFile, UpdateFile, DeleteFile]


def _is_file_boundary(trimmed: str) -> bool:
    return trimmed.startswith(_FILE_DIRECTIVES)


def split_patch_lines(text: str) -> list[str]:
    raw = (text or "").split("\n")
    if raw and raw[-1] == "":
        raw.pop()
    return [line[:-1] if line.endswith("\r") else line for line in raw]


def parse_patch(text: str) -> list[PatchOperation]:
    lines = split_patch_lines(text)
    i = 0
    while i < len(lines) and not lines[i].strip().startswith(BEGIN_PATCH):
        i += 1
    if i >= len(lines):
        raise PatchParseError("No patch found in output")
    i += 1

    operations: list[PatchOperation] = []
    while i < len(lines):
        line = lines[i].strip()
        if line.startswith(END_PATCH):
            break
        if line.startswith(ADD_FILE):
            path = line[len(ADD_FILE):].strip()
            content, i = _read_add_body(lines, i + 1)
            operations.append(AddFile(path=path, content=content))
        elif line.startswith(UPDATE_FILE):
            path = line[len(UPDATE_FILE):].strip()
            chunks, i = _read_update_body(lines, i + 1)
            operations.append(UpdateFile(path=path, chunks=chunks))
        elif line.startswith(DELETE_FILE):
            operations.append(DeleteFile(path=line[len(DELETE_FILE):].strip()))
            i += 1
        else:
            i += 1
    return operations


def _read_add_body(lines: list[str], i: int) -> tuple[str, int]:
    parts: list[str] = []
    while i < len(lines):
        raw = lines[i]
        if raw.startswith("***") or not raw.startswith("+"):
            break
        parts.append(raw[1:] + "\n")
        i += 1
    return "".join(parts), i


def _read_update_body(lines: list[str], i: int) -> tuple[list[UpdateFileChunk], int]:
    chunks: list[UpdateFileChunk] = []
    while i < len(lines):
        trimmed = lines[i].strip()
        if _is_file_boundary(trimmed):
            break
        if not trimmed:
            i += 1
            continue
        chunk, consumed = parse_update_chunk(lines[i:])
        if chunk is not None:
            chunks.append(chunk)
        i += max(consumed, 1)
    return chunks, i


def parse_update_chunk(lines: list[str]) -> tuple[UpdateFileChunk | None, int]:
    """Parse one chunk from the head of `lines`.

    Returns the chunk (or None when it carries no lines) and the number of
    lines consumed.
    """
    if not lines:
        return None, 0

    first = lines[0]
    head = first.strip()
    if head.startswith("@@"):
        ctx = head[2:].strip()
        change_context = ctx or None
        start = 1
    elif first.startswith((" ", "+", "-")):
        change_context = None
        start = 0
    else:
        return None, 1

    chunk = UpdateFileChunk(change_context=change_context)
    consumed = start
    for line in lines[start:]:
        trimmed = line.strip()
        if trimmed.startswith("@@") or _is_file_boundary(trimmed):
            break
        if trimmed == END_OF_FILE:
            chunk.is_end_of_file = True
            consumed += 1
            break
        if line == "":
            chunk.old_lines.append("")
            chunk.new_lines.append("")
        elif line.startswith(" "):
            chunk.old_lines.append(line[1:])
            chunk.new_lines.append(line[1:])
        elif line.startswith("+"):
            chunk.new_lines.append(line[1:])
        elif line.startswith("-"):
            chunk.old_lines.append(line[1:])
        else:
            break
        consumed += 1

    if not chunk.old_lines and not chunk.new_lines:
        return None, consumed
    return chunk, consumed
