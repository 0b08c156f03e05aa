"""Domain models for repository diffs.

Parse-once pattern: the diff engine's output is copied into plain, immutable
models at the boundary. Nothing downstream ever sees an engine object.
Provides DiffLine, DiffHunk, DiffFile and DiffOutput with factory methods
that read the corresponding ``unidiff`` objects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unidiff import PatchSet
    from unidiff.patch import Hunk, Line, PatchedFile

DEV_NULL = "/dev/null"

# Marker git emits after a line that has no trailing newline
NO_NEWLINE_MARKER = "\\"

_SHORTSTAT_FILES = re.compile(r"(\d+) files? changed")
_SHORTSTAT_INSERTIONS = re.compile(r"(\d+) insertions?\(\+\)")
_SHORTSTAT_DELETIONS = re.compile(r"(\d+) deletions?\(-\)")


# ============================================================
# Domain Models
# ============================================================


class DiffLineType(Enum):
    """Origin of a line in a diff hunk."""

    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"
    HEADER = "header"

    @classmethod
    def from_marker(cls, marker: str) -> DiffLineType:
        """Map a unified-diff line marker to a line type.

        Args:
            marker: The single-character prefix the engine reported

        Returns:
            ADDITION for "+", DELETION for "-", CONTEXT for anything else
        """
        if marker == "+":
            return cls.ADDITION
        if marker == "-":
            return cls.DELETION
        return cls.CONTEXT


@dataclass(frozen=True)
class DiffLine:
    """A single line from a diff hunk.

    Attributes:
        origin: Whether this is a context, added, removed or header line
        content: Raw line text, including the trailing newline when present
        old_lineno: Line number in the old file (None for added lines)
        new_lineno: Line number in the new file (None for removed lines)
    """

    origin: DiffLineType
    content: str
    old_lineno: int | None = None
    new_lineno: int | None = None

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_unidiff(cls, line: Line) -> DiffLine:
        """Copy a unidiff line into a DiffLine."""
        return cls(
            origin=DiffLineType.from_marker(line.line_type),
            content=line.value,
            old_lineno=line.source_line_no,
            new_lineno=line.target_line_no,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_changed(self) -> bool:
        """Check if this line is an addition or a deletion."""
        return self.origin in (DiffLineType.ADDITION, DiffLineType.DELETION)

    def to_dict(self) -> dict:
        return {
            "origin": self.origin.value,
            "content": self.content,
            "old_lineno": self.old_lineno,
            "new_lineno": self.new_lineno,
        }


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of a diff.

    Starts are 1-based and taken from the engine. ``old_lines`` counts the
    context and deleted lines, ``new_lines`` the context and added lines.
    """

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    header: str
    lines: tuple[DiffLine, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_unidiff(cls, hunk: Hunk) -> DiffHunk:
        """Copy a unidiff hunk, preserving the engine's line order.

        The "\\ No newline at end of file" marker is not a diff line and is
        dropped, so the line counts always match the header.
        """
        header = (
            f"@@ -{hunk.source_start},{hunk.source_length} "
            f"+{hunk.target_start},{hunk.target_length} @@"
        )
        if hunk.section_header:
            header = f"{header} {hunk.section_header}"

        return cls(
            old_start=hunk.source_start,
            old_lines=hunk.source_length,
            new_start=hunk.target_start,
            new_lines=hunk.target_length,
            header=header,
            lines=tuple(
                DiffLine.from_unidiff(line)
                for line in hunk
                if line.line_type != NO_NEWLINE_MARKER
            ),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def count(self, *origins: DiffLineType) -> int:
        """Count the lines whose origin is one of ``origins``."""
        return sum(1 for line in self.lines if line.origin in origins)

    def counts_match(self) -> bool:
        """Check that old_lines/new_lines agree with the lines held."""
        return (
            self.old_lines == self.count(DiffLineType.CONTEXT, DiffLineType.DELETION)
            and self.new_lines == self.count(DiffLineType.CONTEXT, DiffLineType.ADDITION)
        )

    def to_dict(self) -> dict:
        return {
            "old_start": self.old_start,
            "old_lines": self.old_lines,
            "new_start": self.new_start,
            "new_lines": self.new_lines,
            "header": self.header,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class DiffFile:
    """The change to one file between two snapshots.

    A missing ``old_path`` means the file was added, a missing ``new_path``
    that it was deleted. Two different paths mean a rename.
    """

    old_path: str | None
    new_path: str | None
    hunks: tuple[DiffHunk, ...] = field(default_factory=tuple)
    is_binary: bool = False

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_unidiff(cls, patched_file: PatchedFile) -> DiffFile:
        """Copy a unidiff patched file (one delta).

        Binary deltas never carry hunks.
        """
        is_binary = bool(patched_file.is_binary_file)
        hunks: tuple[DiffHunk, ...] = ()
        if not is_binary:
            hunks = tuple(DiffHunk.from_unidiff(hunk) for hunk in patched_file)

        return cls(
            old_path=_strip_side(patched_file.source_file, "a/"),
            new_path=_strip_side(patched_file.target_file, "b/"),
            hunks=hunks,
            is_binary=is_binary,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def path(self) -> str:
        """The path this file is known by after the change."""
        return self.new_path or self.old_path or ""

    @property
    def is_added(self) -> bool:
        return self.old_path is None and self.new_path is not None

    @property
    def is_deleted(self) -> bool:
        return self.new_path is None and self.old_path is not None

    @property
    def is_renamed(self) -> bool:
        return (
            self.old_path is not None
            and self.new_path is not None
            and self.old_path != self.new_path
        )

    def to_dict(self) -> dict:
        return {
            "old_path": self.old_path,
            "new_path": self.new_path,
            "is_binary": self.is_binary,
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }


@dataclass(frozen=True)
class DiffStats:
    """Aggregate counts reported by the engine."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    @classmethod
    def empty(cls) -> DiffStats:
        return cls()

    @classmethod
    def from_shortstat(cls, text: str) -> DiffStats:
        """Parse the summary line printed by ``git diff --shortstat``.

        Args:
            text: e.g. " 2 files changed, 3 insertions(+), 1 deletion(-)"

        Returns:
            DiffStats with the parsed counts; zeros for absent parts
        """

        def _find(pattern: re.Pattern[str]) -> int:
            match = pattern.search(text)
            return int(match.group(1)) if match else 0

        return cls(
            files_changed=_find(_SHORTSTAT_FILES),
            insertions=_find(_SHORTSTAT_INSERTIONS),
            deletions=_find(_SHORTSTAT_DELETIONS),
        )

    def to_dict(self) -> dict:
        return {
            "files_changed": self.files_changed,
            "insertions": self.insertions,
            "deletions": self.deletions,
        }


@dataclass(frozen=True)
class DiffOutput:
    """A complete diff for one or more files."""

    files: tuple[DiffFile, ...] = field(default_factory=tuple)
    stats: DiffStats = field(default_factory=DiffStats)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def empty(cls) -> DiffOutput:
        return cls()

    @classmethod
    def from_patch_set(cls, patch_set: PatchSet, stats: DiffStats) -> DiffOutput:
        """Copy every delta of a parsed patch set.

        Args:
            patch_set: The engine's parsed diff
            stats: Summary counts taken from the engine, not from the hunks

        Returns:
            DiffOutput owning plain copies of all files, hunks and lines
        """
        return cls(
            files=tuple(DiffFile.from_unidiff(patched_file) for patched_file in patch_set),
            stats=stats,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.files

    def find_file(self, path: str) -> DiffFile | None:
        """Return the file whose new or old path equals ``path``."""
        for diff_file in self.files:
            if diff_file.new_path == path:
                return diff_file
        for diff_file in self.files:
            if diff_file.old_path == path:
                return diff_file
        return None

    def to_dict(self) -> dict:
        return {
            "files": [diff_file.to_dict() for diff_file in self.files],
            "stats": self.stats.to_dict(),
        }


# ============================================================
# Helpers
# ============================================================


def _strip_side(path: str | None, prefix: str) -> str | None:
    """Turn an engine path into a repository path, or None if absent."""
    if not path or path == DEV_NULL:
        return None
    if path.startswith(prefix):
        return path[len(prefix):]
    return path
