"""CLI command implementations."""

from hunkwise.commands.diff import cmd_commit_diff, cmd_diff, cmd_line_changes
from hunkwise.commands.stage import (
    cmd_discard_hunk,
    cmd_hunk_patch,
    cmd_stage_hunk,
    cmd_stage_lines,
    cmd_unstage_hunk,
    cmd_unstage_lines,
)

__all__ = [
    "cmd_commit_diff",
    "cmd_diff",
    "cmd_discard_hunk",
    "cmd_hunk_patch",
    "cmd_line_changes",
    "cmd_stage_hunk",
    "cmd_stage_lines",
    "cmd_unstage_hunk",
    "cmd_unstage_lines",
]
