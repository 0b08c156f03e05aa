"""Domain models for hunkwise."""

from hunkwise.domain.diff import (
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffLineType,
    DiffOutput,
    DiffStats,
)
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.domain.line_change import (
    ChangeType,
    LineChange,
    classify_hunk,
    classify_line_changes,
)
from hunkwise.domain.patch import (
    PatchLineOp,
    generate_hunk_patch,
    generate_line_patch,
    validate_line_selection,
)
from hunkwise.domain.settings import HunkwiseSettings

__all__ = [
    "ChangeType",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffLineType",
    "DiffMode",
    "DiffOutput",
    "DiffStats",
    "HunkwiseSettings",
    "LineChange",
    "PatchLineOp",
    "classify_hunk",
    "classify_line_changes",
    "generate_hunk_patch",
    "generate_line_patch",
    "validate_line_selection",
]
