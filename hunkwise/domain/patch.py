"""Unified-diff patch synthesis for whole hunks and selected lines.

Patches produced here are fed to ``git apply``. Each patch has exactly two
file header lines, one ``@@`` header and one line per emitted diff line,
every line newline-terminated. The ``@@`` counts always equal the lines
actually emitted, otherwise git refuses the patch.

How each hunk line is emitted is decided by lookup tables keyed on the
line's origin, the direction and (for line patches) whether the line was
selected. HEADER lines are never emitted.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from hunkwise.domain.diff import DiffHunk, DiffLineType
from hunkwise.errors import InvalidLineSelection


class PatchLineOp(Enum):
    """How a hunk line is written into a patch."""

    CONTEXT = " "
    ADD = "+"
    REMOVE = "-"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def old_delta(self) -> int:
        """Lines this op contributes to the old side of the hunk."""
        return 0 if self is PatchLineOp.ADD else 1

    @property
    def new_delta(self) -> int:
        """Lines this op contributes to the new side of the hunk."""
        return 0 if self is PatchLineOp.REMOVE else 1


# (origin, reverse) -> op
HUNK_PATCH_TABLE: dict[tuple[DiffLineType, bool], PatchLineOp] = {
    (DiffLineType.CONTEXT, False): PatchLineOp.CONTEXT,
    (DiffLineType.CONTEXT, True): PatchLineOp.CONTEXT,
    (DiffLineType.ADDITION, False): PatchLineOp.ADD,
    (DiffLineType.ADDITION, True): PatchLineOp.REMOVE,
    (DiffLineType.DELETION, False): PatchLineOp.REMOVE,
    (DiffLineType.DELETION, True): PatchLineOp.ADD,
}

# (origin, reverse, selected) -> op
#
# Unselected additions are written as context, not dropped. Pinned by
# test_unselected_addition_is_written_as_context; see DESIGN.md.
LINE_PATCH_TABLE: dict[tuple[DiffLineType, bool, bool], PatchLineOp] = {
    (DiffLineType.CONTEXT, False, False): PatchLineOp.CONTEXT,
    (DiffLineType.CONTEXT, False, True): PatchLineOp.CONTEXT,
    (DiffLineType.CONTEXT, True, False): PatchLineOp.CONTEXT,
    (DiffLineType.CONTEXT, True, True): PatchLineOp.CONTEXT,
    (DiffLineType.ADDITION, False, True): PatchLineOp.ADD,
    (DiffLineType.DELETION, True, True): PatchLineOp.ADD,
    (DiffLineType.ADDITION, False, False): PatchLineOp.CONTEXT,
    (DiffLineType.DELETION, True, False): PatchLineOp.CONTEXT,
    (DiffLineType.DELETION, False, True): PatchLineOp.REMOVE,
    (DiffLineType.ADDITION, True, True): PatchLineOp.REMOVE,
    (DiffLineType.DELETION, False, False): PatchLineOp.CONTEXT,
    (DiffLineType.ADDITION, True, False): PatchLineOp.CONTEXT,
}


# ============================================================
# Public API
# ============================================================


def generate_hunk_patch(file_path: str, hunk: DiffHunk, reverse: bool = False) -> str:
    """Generate a unified diff patch for a single hunk.

    Args:
        file_path: Repository-relative path written into the file headers
        hunk: The hunk to turn into a patch
        reverse: Invert the patch, swapping the old/new sides of the header
            and turning additions into removals and vice versa

    Returns:
        Patch text
    """
    if reverse:
        header = _hunk_header(hunk.new_start, hunk.new_lines, hunk.old_start, hunk.old_lines)
    else:
        header = _hunk_header(hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines)

    body: list[str] = []
    for line in hunk.lines:
        op = HUNK_PATCH_TABLE.get((line.origin, reverse))
        if op is None:
            continue
        body.append(_format_line(op, line.content))

    return _file_header(file_path) + header + "".join(body)


def generate_line_patch(
    file_path: str,
    hunk: DiffHunk,
    selected_line_indices: Iterable[int],
    reverse: bool = False,
) -> str:
    """Generate a patch that carries only the selected lines of a hunk.

    Unselected changed lines are written as context. The hunk header is
    built from the counts of the lines actually written, with only the
    start positions swapped when ``reverse`` is set.

    Args:
        file_path: Repository-relative path written into the file headers
        hunk: The hunk the selection refers to
        selected_line_indices: Indices into ``hunk.lines``
        reverse: Build the patch that undoes the selected lines

    Returns:
        Patch text; with an empty selection, a patch with no +/- lines

    Raises:
        InvalidLineSelection: If an index is not a line of the hunk
    """
    selected = validate_line_selection(hunk, selected_line_indices)

    old_count = 0
    new_count = 0
    body: list[str] = []
    for index, line in enumerate(hunk.lines):
        op = LINE_PATCH_TABLE.get((line.origin, reverse, index in selected))
        if op is None:
            continue
        old_count += op.old_delta
        new_count += op.new_delta
        body.append(_format_line(op, line.content))

    if reverse:
        header = _hunk_header(hunk.new_start, old_count, hunk.old_start, new_count)
    else:
        header = _hunk_header(hunk.old_start, old_count, hunk.new_start, new_count)

    return _file_header(file_path) + header + "".join(body)


def validate_line_selection(hunk: DiffHunk, selected_line_indices: Iterable[int]) -> frozenset[int]:
    """Check that every selected index points at a line of the hunk.

    Returns:
        The selection as a frozenset

    Raises:
        InvalidLineSelection: If any index is out of range
    """
    selected = frozenset(selected_line_indices)
    invalid = sorted(i for i in selected if i < 0 or i >= len(hunk.lines))
    if invalid:
        raise InvalidLineSelection(
            f"Line indices {invalid} not in hunk {hunk.header!r} "
            f"({len(hunk.lines)} lines)"
        )
    return selected


# ============================================================
# Helpers
# ============================================================


def _file_header(file_path: str) -> str:
    return f"--- a/{file_path}\n+++ b/{file_path}\n"


def _hunk_header(old_start: int, old_count: int, new_start: int, new_count: int) -> str:
    return f"@@ -{old_start},{old_count} +{new_start},{new_count} @@\n"


def _format_line(op: PatchLineOp, content: str) -> str:
    text = op.prefix + content
    if not text.endswith("\n"):
        text += "\n"
    return text
