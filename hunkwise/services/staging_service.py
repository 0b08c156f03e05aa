"""Partial staging service.

Stages, unstages and discards single hunks or selected lines of a hunk.
Each operation re-reads the current diff, synthesizes a patch for the
requested part and hands it to ``git apply``, all under the session lock.

| Operation     | Diff read          | Patch          | git apply flags |
|---------------|--------------------|----------------|-----------------|
| stage_hunk    | index -> work tree | hunk           | --cached        |
| unstage_hunk  | HEAD -> index      | hunk, reversed | --cached        |
| discard_hunk  | index -> work tree | hunk           | --reverse       |
| stage_lines   | index -> work tree | lines          | --cached        |
| unstage_lines | HEAD -> index      | lines, reversed| --cached        |
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from hunkwise.domain.diff import DiffFile, DiffHunk
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.domain.patch import generate_hunk_patch, generate_line_patch
from hunkwise.errors import HunkIndexOutOfRange, NoDiffFound
from hunkwise.services.repository_session import RepositorySession

logger = logging.getLogger(__name__)

PatchBuilder = Callable[[str, DiffHunk], str]


class StagingService:
    """Hunk- and line-granular staging against one repository session."""

    def __init__(self, session: RepositorySession):
        self.session = session

    # --------------------------------------------------------
    # Hunks
    # --------------------------------------------------------

    def stage_hunk(self, path: str, hunk_index: int) -> str:
        """Stage one hunk of the unstaged diff of ``path``.

        Returns:
            The patch text that was applied

        Raises:
            NoDiffFound: If ``path`` has no unstaged textual diff
            HunkIndexOutOfRange: If ``hunk_index`` does not exist
            ApplyFailed: If git rejects the patch
        """
        return self._apply(
            path,
            hunk_index,
            DiffMode.INDEX_TO_WORKDIR,
            lambda file_path, hunk: generate_hunk_patch(file_path, hunk, reverse=False),
            cached=True,
        )

    def unstage_hunk(self, path: str, hunk_index: int) -> str:
        """Remove one hunk of the staged diff of ``path`` from the index."""
        return self._apply(
            path,
            hunk_index,
            DiffMode.HEAD_TO_INDEX,
            lambda file_path, hunk: generate_hunk_patch(file_path, hunk, reverse=True),
            cached=True,
        )

    def discard_hunk(self, path: str, hunk_index: int) -> str:
        """Throw away one unstaged hunk of ``path`` from the working tree."""
        return self._apply(
            path,
            hunk_index,
            DiffMode.INDEX_TO_WORKDIR,
            lambda file_path, hunk: generate_hunk_patch(file_path, hunk, reverse=False),
            reverse=True,
        )

    # --------------------------------------------------------
    # Lines
    # --------------------------------------------------------

    def stage_lines(self, path: str, hunk_index: int, line_indices: Iterable[int]) -> str:
        """Stage the selected lines of one unstaged hunk.

        Raises:
            InvalidLineSelection: If a line index is not in the hunk
        """
        selection = list(line_indices)
        return self._apply(
            path,
            hunk_index,
            DiffMode.INDEX_TO_WORKDIR,
            lambda file_path, hunk: generate_line_patch(file_path, hunk, selection, reverse=False),
            cached=True,
        )

    def unstage_lines(self, path: str, hunk_index: int, line_indices: Iterable[int]) -> str:
        """Unstage the selected lines of one staged hunk."""
        selection = list(line_indices)
        return self._apply(
            path,
            hunk_index,
            DiffMode.HEAD_TO_INDEX,
            lambda file_path, hunk: generate_line_patch(file_path, hunk, selection, reverse=True),
            cached=True,
        )

    # --------------------------------------------------------
    # Previews
    # --------------------------------------------------------

    def hunk_patch(self, path: str, hunk_index: int, staged: bool = False, reverse: bool = False) -> str:
        """Return the patch for one hunk without applying it."""
        with self.session.exclusive():
            diff_file, hunk = self._load_hunk(path, hunk_index, DiffMode.for_staged(staged))
            return generate_hunk_patch(diff_file.path, hunk, reverse=reverse)

    def line_patch(
        self,
        path: str,
        hunk_index: int,
        line_indices: Iterable[int],
        staged: bool = False,
        reverse: bool = False,
    ) -> str:
        """Return the patch for selected lines without applying it."""
        with self.session.exclusive():
            diff_file, hunk = self._load_hunk(path, hunk_index, DiffMode.for_staged(staged))
            return generate_line_patch(diff_file.path, hunk, line_indices, reverse=reverse)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _apply(
        self,
        path: str,
        hunk_index: int,
        mode: DiffMode,
        build_patch: PatchBuilder,
        cached: bool = False,
        reverse: bool = False,
    ) -> str:
        with self.session.exclusive() as session:
            diff_file, hunk = self._load_hunk(path, hunk_index, mode)
            patch = build_patch(diff_file.path, hunk)
            session.gateway.apply(patch, cached=cached, reverse=reverse)

        logger.info(
            "Applied hunk %d of %s (%s diff, cached=%s, reverse=%s)",
            hunk_index,
            path,
            mode.value,
            cached,
            reverse,
        )
        return patch

    def _load_hunk(self, path: str, hunk_index: int, mode: DiffMode) -> tuple[DiffFile, DiffHunk]:
        session = self.session
        repo_path = session.repo_relative(path)
        diff = session.parser.parse(session.engine.diff(mode, path=repo_path))

        diff_file = diff.find_file(repo_path)
        if diff_file is None or diff_file.is_binary or not diff_file.hunks:
            raise NoDiffFound(f"No {mode.value} diff found for {path}")

        if not 0 <= hunk_index < len(diff_file.hunks):
            raise HunkIndexOutOfRange(
                f"Hunk index {hunk_index} out of range for {path} "
                f"({len(diff_file.hunks)} hunks in {mode.value} diff)"
            )
        return diff_file, diff_file.hunks[hunk_index]
