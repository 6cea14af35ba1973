from __future__ import annotations

import pytest

from liminal.patch import AddFile, DeleteFile, PatchParseError, UpdateFile, UpdateFileChunk, parse_patch
from liminal.patch.parser import parse_update_chunk


def test_add_file_body_keeps_trailing_newlines() -> None:
    ops = parse_patch("*** Begin Patch\n*** Add File: pages/01-a.md\n+# A\n+body\n*** End Patch")
    assert ops == [AddFile(path="pages/01-a.md", content="# A\nbody\n")]


def test_missing_begin_marker_is_a_parse_error() -> None:
    with pytest.raises(PatchParseError, match="No patch found in output"):
        parse_patch("Here is the explanation you asked for.\n+a line\n*** End Patch")


def test_begin_marker_may_follow_prose_and_indentation() -> None:
    text = "Sure, here is the patch:\n  *** Begin Patch\n*** Delete File: old.md\n*** End Patch\n"
    assert parse_patch(text) == [DeleteFile(path="old.md")]


def test_update_file_with_context_marker() -> None:
    text = "\n".join(
        [
            "*** Begin Patch",
            "*** Update File: content.md",
            "@@ Photosynthesis is how plants make food.",
            " Photosynthesis is how plants make food.",
            "+Plants absorb sunlight through chlorophyll.",
            "*** End Patch",
        ]
    )
    ops = parse_patch(text)
    assert len(ops) == 1
    op = ops[0]
    assert isinstance(op, UpdateFile)
    assert op.path == "content.md"
    assert op.chunks == [
        UpdateFileChunk(
            change_context="Photosynthesis is how plants make food.",
            old_lines=["Photosynthesis is how plants make food."],
            new_lines=["Photosynthesis is how plants make food.", "Plants absorb sunlight through chlorophyll."],
        )
    ]


def test_update_chunks_split_on_context_markers_and_end_of_file() -> None:
    text = "\n".join(
        [
            "*** Begin Patch",
            "*** Update File: a.md",
            "@@ one",
            "-old",
            "+new",
            "@@",
            "+tail",
            "*** End of File",
            "",
            "@@two",
            " keep",
            "*** Delete File: b.md",
            "*** End Patch",
        ]
    )
    ops = parse_patch(text)
    assert [type(op) for op in ops] == [UpdateFile, DeleteFile]
    chunks = ops[0].chunks
    assert chunks[0] == UpdateFileChunk(change_context="one", old_lines=["old"], new_lines=["new"])
    assert chunks[1] == UpdateFileChunk(change_context=None, old_lines=[], new_lines=["tail"], is_end_of_file=True)
    assert chunks[2] == UpdateFileChunk(change_context="two", old_lines=["keep"], new_lines=["keep"])
    assert ops[1] == DeleteFile(path="b.md")


def test_empty_line_inside_chunk_is_context_on_both_sides() -> None:
    chunk, consumed = parse_update_chunk([" a", "", "+b"])
    assert chunk == UpdateFileChunk(old_lines=["a", ""], new_lines=["a", "", "b"])
    assert consumed == 3


def test_non_chunk_first_line_is_consumed_alone() -> None:
    assert parse_update_chunk(["just prose"]) == (None, 1)


def test_chunk_with_no_lines_is_discarded() -> None:
    text = "*** Begin Patch\n*** Update File: a.md\n@@ anchor\n*** End Patch"
    ops = parse_patch(text)
    assert ops == [UpdateFile(path="a.md", chunks=[])]


def test_add_file_stops_at_unprefixed_line() -> None:
    text = "*** Begin Patch\n*** Add File: a.md\n+one\nstray prose\n+two\n*** End Patch"
    assert parse_patch(text) == [AddFile(path="a.md", content="one\n")]


def test_missing_end_marker_and_crlf_are_accepted() -> None:
    text = "*** Begin Patch\r\n*** Update File: a.md\r\n-x\r\n+y\r\n"
    ops = parse_patch(text)
    assert ops == [UpdateFile(path="a.md", chunks=[UpdateFileChunk(old_lines=["x"], new_lines=["y"])])]
