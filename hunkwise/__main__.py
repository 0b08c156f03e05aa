#!/usr/bin/env python3
"""CLI entry point for hunkwise.

Usage:
    python -m hunkwise [--repo PATH] [--config FILE] [-v] <command> [options]

Commands:
    diff            Print the unstaged (or --staged) diff, optionally for one path
    staged          Print the whole staged diff
    commit          Print the diff introduced by a commit
    line-changes    Print gutter ranges (added/modified/deleted) for a file
    hunk-patch      Print the patch for one hunk or selected lines
    stage-hunk      Stage one hunk
    unstage-hunk    Unstage one hunk
    discard-hunk    Discard one unstaged hunk from the working tree
    stage-lines     Stage selected lines of one hunk
    unstage-lines   Unstage selected lines of one hunk
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from hunkwise.commands.diff import cmd_commit_diff, cmd_diff, cmd_line_changes
from hunkwise.commands.stage import (
    cmd_discard_hunk,
    cmd_hunk_patch,
    cmd_stage_hunk,
    cmd_stage_lines,
    cmd_unstage_hunk,
    cmd_unstage_lines,
)
from hunkwise.domain.diff_mode import DiffMode
from hunkwise.errors import HunkwiseError
from hunkwise.services.repository_session import RepositorySession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hunkwise",
        description="Diff inspection and partial staging for git repositories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hunkwise diff src/app.py
  hunkwise diff --staged --format text
  hunkwise diff --mode head src/app.py
  hunkwise commit HEAD~1
  hunkwise line-changes src/app.py
  hunkwise stage-hunk src/app.py 0
  hunkwise stage-lines src/app.py 0 3 4
        """,
    )
    parser.add_argument("--repo", default=".", help="Path to the git repository (default: .)")
    parser.add_argument("--config", help="Settings file (default: <repo>/.hunkwise.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # diff command
    parser_diff = subparsers.add_parser("diff", help="Print the unstaged or staged diff")
    parser_diff.add_argument("path", nargs="?", help="Limit the diff to this path")
    diff_mode = parser_diff.add_mutually_exclusive_group()
    diff_mode.add_argument("--staged", action="store_true", help="Diff HEAD against the index")
    diff_mode.add_argument(
        "--mode",
        choices=[DiffMode.INDEX_TO_WORKDIR.value, DiffMode.HEAD_TO_INDEX.value, DiffMode.HEAD_TO_WORKDIR.value],
        help="Snapshots to compare (default: unstaged)",
    )
    parser_diff.add_argument("--format", choices=["json", "text"], default="json", help="Output format")

    # staged command
    parser_staged = subparsers.add_parser("staged", help="Print the whole staged diff")
    parser_staged.add_argument("--format", choices=["json", "text"], default="json", help="Output format")

    # commit command
    parser_commit = subparsers.add_parser("commit", help="Print the diff introduced by a commit")
    parser_commit.add_argument("rev", help="Commit id or revision")
    parser_commit.add_argument("--format", choices=["json", "text"], default="json", help="Output format")

    # line-changes command
    parser_lines = subparsers.add_parser("line-changes", help="Print gutter ranges for a file")
    parser_lines.add_argument("path", help="File to classify")

    # hunk-patch command
    parser_patch = subparsers.add_parser("hunk-patch", help="Print the patch for a hunk")
    _add_hunk_arguments(parser_patch)
    parser_patch.add_argument("--staged", action="store_true", help="Take the hunk from the staged diff")
    parser_patch.add_argument("--reverse", action="store_true", help="Print the reversed patch")
    parser_patch.add_argument("--lines", type=int, nargs="*", help="Only these line indices of the hunk")

    for name, help_text in (
        ("stage-hunk", "Stage one hunk"),
        ("unstage-hunk", "Unstage one hunk"),
        ("discard-hunk", "Discard one unstaged hunk"),
    ):
        _add_hunk_arguments(subparsers.add_parser(name, help=help_text))

    for name, help_text in (
        ("stage-lines", "Stage selected lines of a hunk"),
        ("unstage-lines", "Unstage selected lines of a hunk"),
    ):
        parser_select = subparsers.add_parser(name, help=help_text)
        _add_hunk_arguments(parser_select)
        parser_select.add_argument("lines", type=int, nargs="+", help="Line indices within the hunk")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        session = RepositorySession.open(
            args.repo,
            config_path=Path(args.config) if args.config else None,
        )
        return _dispatch(session, args)
    except HunkwiseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _dispatch(session: RepositorySession, args: argparse.Namespace) -> int:
    if args.command == "diff":
        mode = DiffMode.from_string(args.mode) if args.mode else DiffMode.for_staged(args.staged)
        return cmd_diff(session, path=args.path, mode=mode, output_format=args.format)
    if args.command == "staged":
        return cmd_diff(session, mode=DiffMode.HEAD_TO_INDEX, output_format=args.format)
    if args.command == "commit":
        return cmd_commit_diff(session, args.rev, output_format=args.format)
    if args.command == "line-changes":
        return cmd_line_changes(session, args.path)
    if args.command == "hunk-patch":
        return cmd_hunk_patch(
            session,
            args.path,
            args.hunk,
            staged=args.staged,
            reverse=args.reverse,
            line_indices=args.lines,
        )
    if args.command == "stage-hunk":
        return cmd_stage_hunk(session, args.path, args.hunk)
    if args.command == "unstage-hunk":
        return cmd_unstage_hunk(session, args.path, args.hunk)
    if args.command == "discard-hunk":
        return cmd_discard_hunk(session, args.path, args.hunk)
    if args.command == "stage-lines":
        return cmd_stage_lines(session, args.path, args.hunk, args.lines)
    if args.command == "unstage-lines":
        return cmd_unstage_lines(session, args.path, args.hunk, args.lines)
    raise ValueError(f"Unknown command: {args.command}")


def _add_hunk_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("path", help="File the hunk belongs to")
    subparser.add_argument("hunk", type=int, help="Hunk index (0-based)")


if __name__ == "__main__":
    sys.exit(main())
