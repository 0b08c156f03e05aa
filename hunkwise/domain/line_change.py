"""Line-range classification for editor gutters.

Turns the hunks of a HEAD-vs-working-tree diff into Added, Modified and
Deleted ranges. A run of deletions immediately followed by a run of
additions is one replacement and yields a single Modified range.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hunkwise.domain.diff import DiffHunk, DiffLine, DiffLineType, DiffOutput


# ============================================================
# Domain Models
# ============================================================


class ChangeType(Enum):
    """Kind of change shown in the gutter."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class LineChange:
    """A contiguous range of changed lines.

    Attributes:
        start_line: First line of the range (1-based). New-file numbering
            for ADDED, old-file numbering for DELETED and for the start of
            a MODIFIED range
        end_line: Last line of the range. Old-file numbering for DELETED,
            new-file numbering otherwise
        change_type: ADDED, MODIFIED or DELETED
    """

    start_line: int
    end_line: int
    change_type: ChangeType

    def to_dict(self) -> dict:
        return {
            "start_line": self.start_line,
            "end_line": self.end_line,
            "change_type": self.change_type.value,
        }


# ============================================================
# Classification
# ============================================================


def classify_line_changes(diff: DiffOutput) -> list[LineChange]:
    """Classify every hunk of every textual file in a diff.

    Args:
        diff: Diff of HEAD against the working tree merged with the index

    Returns:
        Ranges in file, hunk and line order. Binary files contribute none.
    """
    changes: list[LineChange] = []
    for diff_file in diff.files:
        if diff_file.is_binary:
            continue
        for hunk in diff_file.hunks:
            changes.extend(classify_hunk(hunk))
    return changes


def classify_hunk(hunk: DiffHunk) -> list[LineChange]:
    """Scan one hunk left to right and emit its change ranges."""
    lines = hunk.lines
    changes: list[LineChange] = []
    index = 0

    while index < len(lines):
        origin = lines[index].origin

        if origin == DiffLineType.ADDITION:
            end = _run_end(lines, index, DiffLineType.ADDITION)
            changes.append(
                LineChange(
                    start_line=_new_lineno(lines[index]),
                    end_line=_new_lineno(lines[end - 1]),
                    change_type=ChangeType.ADDED,
                )
            )
            index = end

        elif origin == DiffLineType.DELETION:
            deletions_end = _run_end(lines, index, DiffLineType.DELETION)
            additions_end = _run_end(lines, deletions_end, DiffLineType.ADDITION)

            if additions_end > deletions_end:
                changes.append(
                    LineChange(
                        start_line=_old_lineno(lines[index]),
                        end_line=_new_lineno(lines[additions_end - 1]),
                        change_type=ChangeType.MODIFIED,
                    )
                )
                index = additions_end
            else:
                changes.append(
                    LineChange(
                        start_line=_old_lineno(lines[index]),
                        end_line=_old_lineno(lines[deletions_end - 1]),
                        change_type=ChangeType.DELETED,
                    )
                )
                index = deletions_end

        else:
            index += 1

    return changes


# ============================================================
# Helpers
# ============================================================


def _run_end(lines: tuple[DiffLine, ...], start: int, origin: DiffLineType) -> int:
    """Index one past the maximal run of ``origin`` lines beginning at ``start``."""
    end = start
    while end < len(lines) and lines[end].origin == origin:
        end += 1
    return end


def _old_lineno(line: DiffLine) -> int:
    return line.old_lineno if line.old_lineno is not None else 1


def _new_lineno(line: DiffLine) -> int:
    return line.new_lineno if line.new_lineno is not None else 1
