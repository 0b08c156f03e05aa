"""Apply gateway backed by ``git apply``.

Feeds synthesized patch text to git on stdin, either against the working
tree or against the index only, optionally reversed. Failures surface
git's own diagnostic unchanged and are never retried.
"""

from __future__ import annotations

import logging

from hunkwise.errors import ApplyFailed
from hunkwise.infrastructure.git.runner import CommandRunner

logger = logging.getLogger(__name__)


class GitApplyGateway:
    """Applies patch text to one repository.

    Args:
        runner: Command runner bound to the repository
        check_first: Dry-run with ``--check`` before the real apply
        unidiff_zero: Accept hunks without context lines (needed when
            diffs are produced with zero context)
    """

    def __init__(
        self,
        runner: CommandRunner,
        check_first: bool = True,
        unidiff_zero: bool = False,
    ):
        self.runner = runner
        self.check_first = check_first
        self.unidiff_zero = unidiff_zero

    def apply(self, patch: str, cached: bool = False, reverse: bool = False) -> None:
        """Apply a patch.

        Args:
            patch: Unified diff text
            cached: Apply to the index only, leaving the working tree alone
            reverse: Undo the patch instead of applying it

        Raises:
            ApplyFailed: If git rejects the patch; ``stderr`` holds git's text
        """
        args = self._apply_args(cached, reverse)
        data = patch.encode("utf-8")

        if self.check_first:
            self._run(args + ["--check", "-"], data)
        self._run(args + ["-"], data)

        logger.info("Applied patch (cached=%s, reverse=%s)", cached, reverse)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _apply_args(self, cached: bool, reverse: bool) -> list[str]:
        args = ["apply", "--whitespace=nowarn"]
        if cached:
            args.append("--cached")
        if reverse:
            args.append("--reverse")
        if self.unidiff_zero:
            args.append("--unidiff-zero")
        return args

    def _run(self, args: list[str], data: bytes) -> None:
        result = self.runner.run(args, stdin=data)
        if not result.ok:
            raise ApplyFailed(
                f"git apply failed: {result.stderr.strip()}",
                stderr=result.stderr,
            )
