"""Diff query service.

Answers the read-only questions a Git client asks: what changed in a file,
what is staged, what did a commit introduce, and which line ranges of a
file differ from HEAD. Every answer is derived fresh from the repository.
"""

from __future__ import annotations

from hunkwise.domain.diff import DiffOutput
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.domain.line_change import LineChange, classify_line_changes
from hunkwise.services.repository_session import RepositorySession


class DiffService:
    """Read-only diff queries against one repository session."""

    def __init__(self, session: RepositorySession):
        self.session = session

    def diff(self, mode: DiffMode, path: str | None = None, commit: str | None = None) -> DiffOutput:
        """Run one diff query under the session lock.

        ``path`` is relative to the directory the session was opened on;
        paths in the result are relative to the repository's top level.

        Raises:
            EngineError: If git fails
        """
        with self.session.exclusive() as session:
            if path is not None:
                path = session.repo_relative(path)
            engine_diff = session.engine.diff(mode, path=path, commit=commit)
            return session.parser.parse(engine_diff)

    def diff_file(self, path: str, staged: bool = False) -> DiffOutput:
        """Staged (HEAD vs. index) or unstaged (index vs. work tree) diff of one path."""
        return self.diff(DiffMode.for_staged(staged), path=path)

    def diff_staged(self) -> DiffOutput:
        return self.diff(DiffMode.HEAD_TO_INDEX)

    def diff_unstaged(self) -> DiffOutput:
        return self.diff(DiffMode.INDEX_TO_WORKDIR)

    def commit_diff(self, commit: str) -> DiffOutput:
        """Diff introduced by ``commit`` against its first parent.

        Raises:
            EngineError: If ``commit`` does not name a commit
        """
        return self.diff(DiffMode.COMMIT, commit=commit)

    def line_changes(self, path: str) -> list[LineChange]:
        """Gutter ranges for ``path``, covering staged and unstaged edits."""
        return classify_line_changes(self.diff(DiffMode.HEAD_TO_WORKDIR, path=path))
