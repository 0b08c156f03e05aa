"""Diff engine backed by ``git diff``.

Runs git with fixed, machine-oriented options for each DiffMode and hands
back the raw patch bytes together with git's own summary line. Turning
that output into domain models is the DiffParser's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hunkwise.domain.diff_mode import DiffMode
from hunkwise.domain.settings import HunkwiseSettings
from hunkwise.errors import EngineError
from hunkwise.infrastructure.git.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineDiff:
    """Raw output of one diff query.

    Attributes:
        mode: Comparison that produced the output
        patch: Unified diff bytes exactly as git wrote them
        shortstat: git's summary line (may be empty for no changes)
    """

    mode: DiffMode
    patch: bytes
    shortstat: str


class GitDiffEngine:
    """Produces EngineDiff objects for the four comparison modes.

    Receives its command runner via constructor injection.
    """

    def __init__(self, runner: CommandRunner, settings: HunkwiseSettings | None = None):
        self.runner = runner
        self.settings = settings or HunkwiseSettings()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def diff(
        self,
        mode: DiffMode,
        path: str | None = None,
        commit: str | None = None,
    ) -> EngineDiff:
        """Run one diff query.

        Args:
            mode: Which two snapshots to compare
            path: Optional path filter
            commit: Revision to show; required for DiffMode.COMMIT

        Returns:
            EngineDiff with the patch and summary

        Raises:
            EngineError: If git fails (e.g., unknown revision)
            ValueError: If COMMIT mode is requested without a commit
        """
        revisions = self._revision_args(mode, commit)
        pathspec = ["--", path] if path else []
        options = self._diff_options()

        patch = self.runner.output(["diff", *options, *revisions, *pathspec])
        shortstat = self.runner.text(["diff", "--shortstat", *options, *revisions, *pathspec])

        logger.debug(
            "diff %s path=%s commit=%s: %d bytes, %s",
            mode.value,
            path,
            commit,
            len(patch),
            shortstat.strip() or "no changes",
        )
        return EngineDiff(mode=mode, patch=patch, shortstat=shortstat)

    def head_or_empty_tree(self) -> str:
        """Return HEAD's commit id, or the empty tree when HEAD is unborn."""
        result = self.runner.run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
        if result.ok:
            return result.stdout.decode().strip()
        return self.empty_tree()

    def empty_tree(self) -> str:
        """Hash of the empty tree in this repository's object format."""
        return self.runner.text(["hash-object", "-t", "tree", "--stdin"], stdin=b"").strip()

    def first_parent_or_empty_tree(self, commit: str) -> tuple[str, str]:
        """Resolve a revision and its first parent.

        Returns:
            (parent, commit) ids; the parent is the empty tree for a root commit

        Raises:
            EngineError: If the revision does not name a commit
        """
        if not commit or commit.startswith("-"):
            raise EngineError(f"Invalid commit id '{commit}'")

        ids = self.runner.text(["rev-list", "--parents", "-n", "1", f"{commit}^{{commit}}"]).split()
        if not ids:
            raise EngineError(f"Invalid commit id '{commit}'")
        if len(ids) == 1:
            return self.empty_tree(), ids[0]
        return ids[1], ids[0]

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _diff_options(self) -> list[str]:
        return [
            "--no-color",
            "--no-ext-diff",
            "--no-textconv",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            f"-U{self.settings.context_lines}",
            "--find-renames" if self.settings.detect_renames else "--no-renames",
        ]

    def _revision_args(self, mode: DiffMode, commit: str | None) -> list[str]:
        if mode == DiffMode.INDEX_TO_WORKDIR:
            return []
        if mode == DiffMode.HEAD_TO_INDEX:
            return ["--cached", self.head_or_empty_tree()]
        if mode == DiffMode.HEAD_TO_WORKDIR:
            return [self.head_or_empty_tree()]
        if mode == DiffMode.COMMIT:
            if commit is None:
                raise ValueError("DiffMode.COMMIT requires a commit")
            parent, resolved = self.first_parent_or_empty_tree(commit)
            return [parent, resolved]
        raise ValueError(f"Unsupported diff mode: {mode}")
