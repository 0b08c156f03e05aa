"""Git command runner.

Infrastructure component that wraps subprocess calls to the git CLI.
This abstraction allows the diff engine and apply gateway to be tested
without actually calling git.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from hunkwise.errors import EngineError

logger = logging.getLogger(__name__)

# Options passed before every subcommand
_GLOBAL_OPTIONS = ["-c", "core.quotepath=off"]


@dataclass(frozen=True)
class GitCommandResult:
    """Outcome of one git invocation. stdout stays bytes; stderr is text."""

    returncode: int
    stdout: bytes
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Protocol for running git commands against one repository."""

    def run(self, args: list[str], stdin: bytes | None = None) -> GitCommandResult:
        """Run git with ``args`` and return the result, failed or not."""
        ...

    def output(self, args: list[str], stdin: bytes | None = None) -> bytes:
        """Run git and return stdout, raising EngineError on failure."""
        ...

    def text(self, args: list[str], stdin: bytes | None = None) -> str:
        """Like output(), decoded as UTF-8."""
        ...


@dataclass
class GitCommandRunner:
    """Runs git CLI commands via subprocess.

    This is the production implementation of CommandRunner.
    For testing, mock this class or patch ``subprocess.run``.
    """

    repo_path: Path
    git_executable: str = "git"

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def run(self, args: list[str], stdin: bytes | None = None) -> GitCommandResult:
        """Run a git command.

        Args:
            args: Subcommand and arguments (e.g., ["diff", "--cached"])
            stdin: Optional bytes fed to the command's standard input

        Returns:
            GitCommandResult; a non-zero exit is reported, not raised

        Raises:
            EngineError: If git cannot be executed at all
        """
        cmd = [self.git_executable, *_GLOBAL_OPTIONS, *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.repo_path)

        try:
            completed = subprocess.run(
                cmd,
                cwd=self.repo_path,
                input=stdin,
                capture_output=True,
                check=True,
                env=_command_env(),
            )
        except subprocess.CalledProcessError as e:
            return GitCommandResult(
                returncode=e.returncode,
                stdout=e.stdout or b"",
                stderr=_decode(e.stderr),
            )
        except OSError as e:
            raise EngineError(f"Failed to execute {self.git_executable}: {e}") from e

        return GitCommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or b"",
            stderr=_decode(completed.stderr),
        )

    def output(self, args: list[str], stdin: bytes | None = None) -> bytes:
        """Run a git command and return its raw stdout.

        Raises:
            EngineError: If the command exits non-zero; carries git's stderr
        """
        result = self.run(args, stdin=stdin)
        if not result.ok:
            raise EngineError(
                f"git {args[0] if args else ''} failed: {result.stderr.strip()}",
                stderr=result.stderr,
            )
        return result.stdout

    def text(self, args: list[str], stdin: bytes | None = None) -> str:
        """Run a git command and return stdout as text."""
        return _decode(self.output(args, stdin=stdin))


# ============================================================
# Helpers
# ============================================================


def _command_env() -> dict[str, str]:
    # Summary lines such as --shortstat are translated unless forced to C.
    env = dict(os.environ)
    env["LC_ALL"] = "C"
    return env


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")
