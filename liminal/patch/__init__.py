"""Init module.

This module belongs to `liminal.patch` in the liminal codebase.
"""

from liminal.patch.apply import (
    AppliedPatch,
    Replacement,
    apply_patch_to_document,
    apply_replacements,
    apply_update_chunks,
    compute_replacements,
)
from liminal.patch.locator import find_line_fuzzy, seek_sequence
from liminal.patch.parser import (
    AddFile,
    DeleteFile,
    PatchOperation,
    PatchParseError,
    UpdateFile,
    UpdateFileChunk,
    parse_patch,
)

__all__ = [
    "AddFile",
    "AppliedPatch",
    "DeleteFile",
    "PatchOperation",
    "PatchParseError",
    "Replacement",
    "UpdateFile",
    "UpdateFileChunk",
    "apply_patch_to_document",
    "apply_replacements",
    "apply_update_chunks",
    "compute_replacements",
    "find_line_fuzzy",
    "parse_patch",
    "seek_sequence",
]
