"""Git primitives - command runner, diff engine, diff parsing and patch apply."""

from .apply import GitApplyGateway
from .diff_engine import EngineDiff, GitDiffEngine
from .diff_parser import DiffParser, decode_patch
from .runner import CommandRunner, GitCommandResult, GitCommandRunner

__all__ = [
    "CommandRunner",
    "DiffParser",
    "EngineDiff",
    "GitApplyGateway",
    "GitCommandResult",
    "GitCommandRunner",
    "GitDiffEngine",
    "decode_patch",
]
