"""Diff query commands - print diffs and gutter ranges.

Output formats:
    json  - Structured DiffOutput / LineChange list (machine-readable)
    text  - Files and hunk ranges (human-readable)
"""

from __future__ import annotations

import json

from hunkwise.domain.diff import DiffOutput
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.services.diff_service import DiffService
from hunkwise.services.repository_session import RepositorySession


# ============================================================
# Commands
# ============================================================


def cmd_diff(
    session: RepositorySession,
    path: str | None = None,
    staged: bool = False,
    output_format: str = "json",
    mode: DiffMode | None = None,
) -> int:
    """Print the staged or unstaged diff, optionally for one path.

    An explicit ``mode`` takes precedence over ``staged``.

    Returns:
        Exit code (0 for success)
    """
    if mode is None:
        mode = DiffMode.for_staged(staged)
    diff = DiffService(session).diff(mode, path=path)
    print(_format(diff, output_format))
    return 0


def cmd_commit_diff(session: RepositorySession, commit: str, output_format: str = "json") -> int:
    """Print the diff introduced by one commit."""
    diff = DiffService(session).commit_diff(commit)
    print(_format(diff, output_format))
    return 0


def cmd_line_changes(session: RepositorySession, path: str) -> int:
    """Print gutter ranges for one file as JSON."""
    changes = DiffService(session).line_changes(path)
    print(json.dumps([change.to_dict() for change in changes], indent=2))
    return 0


# ============================================================
# Output Functions
# ============================================================


def format_diff_as_json(diff: DiffOutput) -> str:
    return json.dumps(diff.to_dict(), indent=2)


def format_diff_as_text(diff: DiffOutput) -> str:
    """Format a DiffOutput as human-readable text.

    Returns:
        Text listing each file, its kind of change and its hunk ranges
    """
    if diff.is_empty:
        return "Empty diff (no files changed)"

    lines = [
        f"Files changed: {diff.stats.files_changed}",
        f"Insertions: +{diff.stats.insertions}",
        f"Deletions: -{diff.stats.deletions}",
        "",
    ]

    for diff_file in diff.files:
        if diff_file.is_added:
            kind = "added"
        elif diff_file.is_deleted:
            kind = "deleted"
        elif diff_file.is_renamed:
            kind = f"renamed from {diff_file.old_path}"
        else:
            kind = "modified"
        if diff_file.is_binary:
            kind += ", binary"
        lines.append(f"{diff_file.path} ({kind})")

        for i, hunk in enumerate(diff_file.hunks):
            lines.append(
                f"  Hunk {i}: old {hunk.old_start},{hunk.old_lines} "
                f"new {hunk.new_start},{hunk.new_lines} ({len(hunk.lines)} lines)"
            )
        lines.append("")

    return "\n".join(lines).rstrip("\n")


def _format(diff: DiffOutput, output_format: str) -> str:
    if output_format == "text":
        return format_diff_as_text(diff)
    return format_diff_as_json(diff)
