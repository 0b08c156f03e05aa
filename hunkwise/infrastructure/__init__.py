"""Infrastructure components for hunkwise.

This layer handles external system interactions:
- git CLI invocation
- Diff acquisition and parsing
- Patch application

Organized into subdirectories:
- git/ - git runner, diff engine, diff parser, apply gateway
"""

from .git import (
    CommandRunner,
    DiffParser,
    EngineDiff,
    GitApplyGateway,
    GitCommandResult,
    GitCommandRunner,
    GitDiffEngine,
)

__all__ = [
    "CommandRunner",
    "DiffParser",
    "EngineDiff",
    "GitApplyGateway",
    "GitCommandResult",
    "GitCommandRunner",
    "GitDiffEngine",
]
