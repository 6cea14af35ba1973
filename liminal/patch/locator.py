"""Chunk Locator module.

Best-effort positioning of patch chunks inside a document's line list. The
order of the fallbacks is part of the contract: callers rely on an exact
copy winning over a whitespace-varied copy, and on a forward match winning
over a wrap-around match.
"""

from __future__ import annotations

from typing import Sequence


def _trimmed_match_at(lines: Sequence[str], pattern: Sequence[str], i: int) -> bool:
    for offset, pat in enumerate(pattern):
        if i + offset >= len(lines) or lines[i + offset].strip() != pat.strip():
            return False
    return True


def seek_sequence(lines: Sequence[str], pattern: Sequence[str], start: int, eof: bool = False) -> int | None:
    if not pattern:
        return start
    if len(pattern) > len(lines):
        return None

    last = len(lines) - len(pattern)
    origin = last if eof else max(0, min(start, last))
    width = len(pattern)
    wanted = list(pattern)

    for i in range(origin, last + 1):
        if list(lines[i : i + width]) == wanted:
            return i
    for i in range(origin, last + 1):
        if _trimmed_match_at(lines, pattern, i):
            return i
    # wrap-around: anchors that appear before the cursor
    for i in range(0, origin):
        if _trimmed_match_at(lines, pattern, i):
            return i
    return None


def find_line_fuzzy(lines: Sequence[str], target: str) -> int | None:
    wanted = (target or "").strip()

    for i, line in enumerate(lines):
        if line.strip() == wanted:
            return i

    for i, line in enumerate(lines):
        if wanted in line or line.strip() in wanted:
            return i

    words = wanted.split()[:3]
    if words:
        for i, line in enumerate(lines):
            if line.strip().split()[:3] == words:
                return i
    return None


def loosely_matches(original: str, expected: str) -> bool:
    orig = original.strip()
    old = expected.strip()
    return orig == old or old in orig or orig in old
