"""Tests for DiffService and RepositorySession against real repositories.

Tests cover:
- Staged, unstaged and commit diffs
- Added, renamed, binary and non-ASCII files
- Gutter ranges combining staged and unstaged edits
- Opening sessions on non-repositories and on subdirectories
- Repository settings never choosing the git executable
"""

from __future__ import annotations

import os
import tempfile
import threading
import unittest
from pathlib import Path

from hunkwise.domain.diff import DiffStats
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.domain.line_change import ChangeType, LineChange
from hunkwise.domain.settings import HunkwiseSettings
from hunkwise.errors import EngineError, NotARepositoryError
from hunkwise.services.diff_service import DiffService
from hunkwise.services.repository_session import RepositorySession
from tests.git_repo import TempGitRepo, requires_git


@requires_git
class TestDiffService(unittest.TestCase):
    """Tests for DiffService queries."""

    def setUp(self):
        self.repo = TempGitRepo()
        self.addCleanup(self.repo.cleanup)
        self.repo.write("a.txt", "a\nb\nc\n")
        self.first_commit = self.repo.commit("init")
        self.service = DiffService(RepositorySession.open(self.repo.path))

    def test_clean_repository_has_empty_diffs(self):
        self.assertTrue(self.service.diff_unstaged().is_empty)
        self.assertTrue(self.service.diff_staged().is_empty)

    def test_unstaged_file_diff(self):
        self.repo.write("a.txt", "a\nX\nc\n")

        diff = self.service.diff_file("a.txt")

        self.assertEqual(len(diff.files), 1)
        hunk = diff.files[0].hunks[0]
        self.assertEqual(hunk.header, "@@ -1,3 +1,3 @@")
        self.assertEqual([line.content for line in hunk.lines if line.is_changed], ["b\n", "X\n"])
        self.assertEqual(diff.stats, DiffStats(files_changed=1, insertions=1, deletions=1))

    def test_staged_file_diff(self):
        self.repo.write("a.txt", "a\nX\nc\n")
        self.repo.git("add", "a.txt")

        self.assertTrue(self.service.diff_file("a.txt").is_empty)
        self.assertFalse(self.service.diff_file("a.txt", staged=True).is_empty)

    def test_path_filter(self):
        self.repo.write("a.txt", "a\nX\nc\n")
        self.repo.write("b.txt", "new\n")
        self.repo.git("add", "b.txt")
        self.repo.write("b.txt", "newer\n")

        self.assertEqual([f.path for f in self.service.diff_unstaged().files], ["a.txt", "b.txt"])
        self.assertEqual([f.path for f in self.service.diff_file("b.txt").files], ["b.txt"])

    def test_added_file_in_staged_diff(self):
        self.repo.write("new.txt", "1\n2\n")
        self.repo.git("add", "new.txt")

        diff_file = self.service.diff_staged().find_file("new.txt")

        self.assertTrue(diff_file.is_added)
        self.assertEqual(diff_file.hunks[0].new_lines, 2)

    def test_rename_is_detected(self):
        self.repo.write("old.txt", "".join(f"{i}\n" for i in range(20)))
        self.repo.commit("add old")
        self.repo.git("mv", "old.txt", "new.txt")

        diff = self.service.diff_staged()

        self.assertEqual(len(diff.files), 1)
        self.assertTrue(diff.files[0].is_renamed)
        self.assertEqual(diff.files[0].old_path, "old.txt")
        self.assertIs(diff.find_file("old.txt"), diff.files[0])

    def test_rename_detection_can_be_disabled(self):
        self.repo.write("old.txt", "".join(f"{i}\n" for i in range(20)))
        self.repo.commit("add old")
        self.repo.git("mv", "old.txt", "new.txt")
        service = DiffService(
            RepositorySession.open(self.repo.path, settings=HunkwiseSettings(detect_renames=False))
        )

        files = service.diff_staged().files

        self.assertEqual(len(files), 2)
        self.assertTrue(any(f.is_deleted for f in files))
        self.assertTrue(any(f.is_added for f in files))

    def test_non_ascii_path_is_not_quoted(self):
        self.repo.write("café.txt", "one\n")
        self.repo.git("add", "café.txt")

        self.assertEqual(self.service.diff_staged().files[0].path, "café.txt")

    def test_binary_file(self):
        self.repo.write("logo.bin", b"\x00\x01\x02")
        self.repo.commit("binary")
        self.repo.write("logo.bin", b"\x00\x03\x04\x05")

        diff_file = self.service.diff_file("logo.bin").files[0]

        self.assertTrue(diff_file.is_binary)
        self.assertEqual(diff_file.hunks, ())
        self.assertEqual(self.service.line_changes("logo.bin"), [])

    def test_root_commit_diff(self):
        diff = self.service.commit_diff(self.first_commit)

        self.assertTrue(diff.files[0].is_added)
        self.assertEqual(diff.stats.insertions, 3)

    def test_commit_diff_against_parent(self):
        self.repo.write("a.txt", "a\nb\nc\nd\n")
        self.repo.commit("append")

        diff = self.service.commit_diff("HEAD")

        self.assertEqual(diff.files[0].path, "a.txt")
        self.assertEqual(diff.stats, DiffStats(files_changed=1, insertions=1, deletions=0))

    def test_unknown_commit_raises(self):
        with self.assertRaises(EngineError):
            self.service.commit_diff("no-such-branch")

    def test_generic_diff_entry_point(self):
        self.repo.write("a.txt", "a\nX\nc\n")

        self.assertEqual(
            self.service.diff(DiffMode.HEAD_TO_WORKDIR, path="a.txt"),
            self.service.diff_file("a.txt"),
        )


@requires_git
class TestLineChanges(unittest.TestCase):
    """Tests for DiffService.line_changes()."""

    def setUp(self):
        self.repo = TempGitRepo()
        self.addCleanup(self.repo.cleanup)
        self.repo.write("a.txt", "a\nb\nc\n")
        self.repo.commit("init")
        self.service = DiffService(RepositorySession.open(self.repo.path))

    def test_modified_line(self):
        self.repo.write("a.txt", "a\nX\nc\n")

        self.assertEqual(self.service.line_changes("a.txt"), [LineChange(2, 2, ChangeType.MODIFIED)])

    def test_appended_line(self):
        self.repo.write("a.txt", "a\nb\nc\nd\n")

        self.assertEqual(self.service.line_changes("a.txt"), [LineChange(4, 4, ChangeType.ADDED)])

    def test_appended_third_line(self):
        self.repo.write("b.txt", "a\nb\n")
        self.repo.commit("two lines", "b.txt")
        self.repo.write("b.txt", "a\nb\nc\n")

        self.assertEqual(self.service.line_changes("b.txt"), [LineChange(3, 3, ChangeType.ADDED)])

    def test_removed_last_line(self):
        self.repo.write("a.txt", "a\nb\n")

        self.assertEqual(self.service.line_changes("a.txt"), [LineChange(3, 3, ChangeType.DELETED)])

    def test_staged_and_unstaged_edits_are_combined(self):
        self.repo.write("a.txt", "".join(f"{i}\n" for i in range(1, 21)))
        self.repo.commit("long")
        lines = [f"{i}\n" for i in range(1, 21)]
        lines[1] = "two\n"
        self.repo.write("a.txt", "".join(lines))
        self.repo.git("add", "a.txt")
        lines[17] = "eighteen\n"
        self.repo.write("a.txt", "".join(lines))

        self.assertEqual(
            self.service.line_changes("a.txt"),
            [LineChange(2, 2, ChangeType.MODIFIED), LineChange(18, 18, ChangeType.MODIFIED)],
        )

    def test_clean_file_has_no_changes(self):
        self.assertEqual(self.service.line_changes("a.txt"), [])


class TestRepositorySession(unittest.TestCase):
    """Tests for RepositorySession."""

    @requires_git
    def test_open_outside_repository_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(NotARepositoryError):
                RepositorySession.open(Path(tmpdir), settings=HunkwiseSettings())

    @requires_git
    def test_open_reads_repository_settings(self):
        repo = TempGitRepo()
        self.addCleanup(repo.cleanup)
        repo.write(".hunkwise.yaml", "context_lines: 1\ncheck_before_apply: false\n")

        session = RepositorySession.open(repo.path)

        self.assertEqual(session.settings.context_lines, 1)
        self.assertFalse(session.gateway.check_first)

    @requires_git
    @unittest.skipUnless(os.name == "posix", "needs an executable shell script")
    def test_open_never_runs_program_named_by_repository(self):
        repo = TempGitRepo()
        self.addCleanup(repo.cleanup)
        marker = repo.path / "PWNED"
        script = repo.write("evil.sh", f'#!/bin/sh\ntouch "{marker}"\nexec git "$@"\n')
        script.chmod(0o755)
        repo.write(".hunkwise.yaml", "git_executable: ./evil.sh\n")

        with self.assertLogs("hunkwise.domain.settings", level="WARNING"):
            session = RepositorySession.open(repo.path)
        DiffService(session).diff_unstaged()

        self.assertEqual(session.settings.git_executable, "git")
        self.assertFalse(marker.exists())

    @requires_git
    def test_open_on_subdirectory_uses_top_level(self):
        repo = TempGitRepo()
        self.addCleanup(repo.cleanup)
        repo.write("sub/f.txt", "a\nb\nc\n")
        repo.commit("init")
        repo.write(".hunkwise.yaml", "context_lines: 1\n")
        repo.write("sub/f.txt", "a\nX\nc\n")

        session = RepositorySession.open(repo.path / "sub")

        self.assertEqual(session.repo_path.resolve(), repo.path.resolve())
        self.assertEqual(session.prefix, "sub/")
        self.assertEqual(session.repo_relative("f.txt"), "sub/f.txt")
        self.assertEqual(session.repo_relative("../top.txt"), "top.txt")
        self.assertEqual(session.settings.context_lines, 1)
        self.assertEqual(
            [f.path for f in DiffService(session).diff_file("f.txt").files],
            ["sub/f.txt"],
        )
        self.assertEqual(
            DiffService(session).line_changes("f.txt"),
            [LineChange(2, 2, ChangeType.MODIFIED)],
        )

    def test_zero_context_enables_unidiff_zero(self):
        session = RepositorySession(".", settings=HunkwiseSettings(context_lines=0))

        self.assertTrue(session.gateway.unidiff_zero)

    def test_exclusive_is_reentrant(self):
        session = RepositorySession(".")

        with session.exclusive() as outer:
            with session.exclusive() as inner:
                self.assertIs(outer, inner)

    def test_exclusive_blocks_other_threads(self):
        session = RepositorySession(".")
        acquired = threading.Event()

        def worker():
            with session.exclusive():
                acquired.set()

        with session.exclusive():
            thread = threading.Thread(target=worker)
            thread.start()
            self.assertFalse(acquired.wait(0.1))

        thread.join(timeout=5)
        self.assertTrue(acquired.is_set())


if __name__ == "__main__":
    unittest.main()
