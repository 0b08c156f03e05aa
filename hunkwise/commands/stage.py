"""Partial staging commands - preview, stage, unstage and discard hunks or lines."""

from __future__ import annotations

import sys

from hunkwise.services.repository_session import RepositorySession
from hunkwise.services.staging_service import StagingService


def cmd_hunk_patch(
    session: RepositorySession,
    path: str,
    hunk_index: int,
    staged: bool = False,
    reverse: bool = False,
    line_indices: list[int] | None = None,
) -> int:
    """Print the patch for a hunk (or selected lines of it) without applying it."""
    service = StagingService(session)
    if line_indices is None:
        patch = service.hunk_patch(path, hunk_index, staged=staged, reverse=reverse)
    else:
        patch = service.line_patch(path, hunk_index, line_indices, staged=staged, reverse=reverse)
    sys.stdout.write(patch)
    return 0


def cmd_stage_hunk(session: RepositorySession, path: str, hunk_index: int) -> int:
    StagingService(session).stage_hunk(path, hunk_index)
    print(f"Staged hunk {hunk_index} of {path}")
    return 0


def cmd_unstage_hunk(session: RepositorySession, path: str, hunk_index: int) -> int:
    StagingService(session).unstage_hunk(path, hunk_index)
    print(f"Unstaged hunk {hunk_index} of {path}")
    return 0


def cmd_discard_hunk(session: RepositorySession, path: str, hunk_index: int) -> int:
    StagingService(session).discard_hunk(path, hunk_index)
    print(f"Discarded hunk {hunk_index} of {path}")
    return 0


def cmd_stage_lines(session: RepositorySession, path: str, hunk_index: int, line_indices: list[int]) -> int:
    StagingService(session).stage_lines(path, hunk_index, line_indices)
    print(f"Staged {len(line_indices)} line(s) of hunk {hunk_index} of {path}")
    return 0


def cmd_unstage_lines(session: RepositorySession, path: str, hunk_index: int, line_indices: list[int]) -> int:
    StagingService(session).unstage_lines(path, hunk_index, line_indices)
    print(f"Unstaged {len(line_indices)} line(s) of hunk {hunk_index} of {path}")
    return 0
