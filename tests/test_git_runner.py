"""Tests for GitCommandRunner.

Tests cover:
- Command line construction and working directory
- Failed commands reported as results
- output()/text() raising EngineError with git's stderr
- Missing git executable
"""

from __future__ import annotations

import subprocess
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from hunkwise.errors import EngineError
from hunkwise.infrastructure.git.runner import GitCommandResult, GitCommandRunner


def _completed(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    completed = MagicMock()
    completed.returncode = returncode
    completed.stdout = stdout
    completed.stderr = stderr
    return completed


class TestGitCommandRunner(unittest.TestCase):
    """Tests for GitCommandRunner with subprocess mocked out."""

    def setUp(self):
        self.runner = GitCommandRunner(repo_path=Path("/repo"))

    @patch("subprocess.run")
    def test_run_builds_command_line(self, mock_run):
        mock_run.return_value = _completed(stdout=b"out")

        result = self.runner.run(["diff", "--cached"])

        cmd = mock_run.call_args[0][0]
        self.assertEqual(cmd, ["git", "-c", "core.quotepath=off", "diff", "--cached"])
        self.assertEqual(mock_run.call_args.kwargs["cwd"], Path("/repo"))
        self.assertEqual(result, GitCommandResult(returncode=0, stdout=b"out", stderr=""))

    @patch("subprocess.run")
    def test_run_forces_c_locale(self, mock_run):
        mock_run.return_value = _completed()

        self.runner.run(["diff", "--shortstat"])

        self.assertEqual(mock_run.call_args.kwargs["env"]["LC_ALL"], "C")

    @patch("subprocess.run")
    def test_run_passes_stdin(self, mock_run):
        mock_run.return_value = _completed()

        self.runner.run(["apply", "-"], stdin=b"patch")

        self.assertEqual(mock_run.call_args.kwargs["input"], b"patch")

    @patch("subprocess.run")
    def test_run_uses_configured_executable(self, mock_run):
        mock_run.return_value = _completed()
        runner = GitCommandRunner(repo_path=Path("/repo"), git_executable="/opt/git")

        runner.run(["status"])

        self.assertEqual(mock_run.call_args[0][0][0], "/opt/git")

    @patch("subprocess.run")
    def test_failed_command_is_returned_not_raised(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git"], output=b"", stderr=b"fatal: bad revision\n"
        )

        result = self.runner.run(["diff", "nope"])

        self.assertFalse(result.ok)
        self.assertEqual(result.returncode, 128)
        self.assertEqual(result.stderr, "fatal: bad revision\n")

    @patch("subprocess.run")
    def test_output_raises_engine_error_with_stderr(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git"], output=b"", stderr=b"fatal: bad revision 'nope'\n"
        )

        with self.assertRaises(EngineError) as ctx:
            self.runner.output(["diff", "nope"])

        self.assertIn("git diff failed", str(ctx.exception))
        self.assertEqual(ctx.exception.stderr, "fatal: bad revision 'nope'\n")

    @patch("subprocess.run")
    def test_output_returns_raw_bytes(self, mock_run):
        mock_run.return_value = _completed(stdout=b"caf\xe9")

        self.assertEqual(self.runner.output(["diff"]), b"caf\xe9")

    @patch("subprocess.run")
    def test_text_decodes_utf8(self, mock_run):
        mock_run.return_value = _completed(stdout="héllo".encode("utf-8"))

        self.assertEqual(self.runner.text(["log"]), "héllo")

    @patch("subprocess.run")
    def test_missing_executable_raises_engine_error(self, mock_run):
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'git'")

        with self.assertRaises(EngineError) as ctx:
            self.runner.run(["status"])

        self.assertIn("Failed to execute git", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
