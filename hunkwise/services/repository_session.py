"""Repository session service.

One RepositorySession owns everything needed to talk to one repository:
the git runner, diff engine, diff parser and apply gateway, plus the lock
that makes every operation on that repository exclusive.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from hunkwise.domain.settings import HunkwiseSettings
from hunkwise.errors import NotARepositoryError
from hunkwise.infrastructure.git.apply import GitApplyGateway
from hunkwise.infrastructure.git.diff_engine import GitDiffEngine
from hunkwise.infrastructure.git.diff_parser import DiffParser
from hunkwise.infrastructure.git.runner import CommandRunner, GitCommandRunner

logger = logging.getLogger(__name__)


class RepositorySession:
    """Exclusive-access handle to one open repository.

    Services take the session and run each operation inside
    ``session.exclusive()``. At most one read or write is in flight per
    repository, and a patch is generated and applied under one hold.
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        settings: HunkwiseSettings | None = None,
        runner: CommandRunner | None = None,
        prefix: str = "",
    ):
        """Initialize with repository path.

        Args:
            repo_path: Top level of the repository's work tree
            settings: Diff/apply settings (default: built-in defaults)
            runner: Command runner override, mainly for tests
            prefix: Directory (relative to the top level, with a trailing
                slash) that caller paths are relative to
        """
        self.repo_path = Path(repo_path)
        self.prefix = prefix
        self.settings = settings or HunkwiseSettings()
        self.runner = runner or GitCommandRunner(
            repo_path=self.repo_path,
            git_executable=self.settings.git_executable,
        )
        self.engine = GitDiffEngine(self.runner, self.settings)
        self.parser = DiffParser()
        self.gateway = GitApplyGateway(
            self.runner,
            check_first=self.settings.check_before_apply,
            unidiff_zero=self.settings.context_lines == 0,
        )
        self._lock = threading.RLock()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def open(
        cls,
        repo_path: str | Path = ".",
        settings: HunkwiseSettings | None = None,
        config_path: Path | None = None,
    ) -> RepositorySession:
        """Open a session after checking the path is a git work tree.

        ``repo_path`` may be any directory inside the work tree. The session
        runs git from the top level and resolves caller paths against
        ``repo_path``. Settings are resolved with HunkwiseSettings.load()
        from the top level unless given.

        Raises:
            NotARepositoryError: If the path is not inside a work tree
            SettingsError: If the settings file is invalid
        """
        path = Path(repo_path)
        locator = cls(path, settings or HunkwiseSettings.load(path, config_path))
        if not locator.is_work_tree():
            raise NotARepositoryError(
                f"Not a git repository: {path}\n"
                "Make sure the path is inside a git work tree."
            )

        top_level = Path(locator.runner.text(["rev-parse", "--show-toplevel"]).strip())
        prefix = locator.runner.text(["rev-parse", "--show-prefix"]).strip()
        if settings is None and prefix:
            settings = HunkwiseSettings.load(top_level, config_path)

        session = cls(top_level, settings or locator.settings, prefix=prefix)
        logger.debug("Opened repository session for %s (prefix %r)", top_level, prefix)
        return session

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @contextmanager
    def exclusive(self) -> Iterator[RepositorySession]:
        """Hold the repository lock for the duration of the block."""
        with self._lock:
            yield self

    def is_work_tree(self) -> bool:
        result = self.runner.run(["rev-parse", "--is-inside-work-tree"])
        return result.ok and result.stdout.strip() == b"true"

    def repo_relative(self, path: str) -> str:
        """Turn a path relative to the opened directory into a top-level path."""
        if not self.prefix:
            return path
        return posixpath.normpath(posixpath.join(self.prefix, path))
