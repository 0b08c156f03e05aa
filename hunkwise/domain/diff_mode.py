"""Domain enum for diff comparison modes.

This module defines the DiffMode enum used to select which two snapshots of
a repository the diff engine compares.
"""

from __future__ import annotations

from enum import Enum


class DiffMode(Enum):
    """Pair of snapshots compared by the diff engine.

    Attributes:
        INDEX_TO_WORKDIR: Unstaged changes (index vs. working tree)
        HEAD_TO_INDEX: Staged changes (HEAD tree vs. index)
        COMMIT: Changes introduced by one commit against its first parent,
            or against the empty tree for a root commit
        HEAD_TO_WORKDIR: HEAD tree vs. working tree merged with the index,
            so staged and unstaged edits show up together

    Note:
        An unborn HEAD is treated as the empty tree in every mode.
    """

    INDEX_TO_WORKDIR = "unstaged"
    HEAD_TO_INDEX = "staged"
    COMMIT = "commit"
    HEAD_TO_WORKDIR = "head"

    @classmethod
    def for_staged(cls, staged: bool) -> DiffMode:
        """Pick the mode for a staged or unstaged file diff."""
        return cls.HEAD_TO_INDEX if staged else cls.INDEX_TO_WORKDIR

    @classmethod
    def from_string(cls, value: str) -> DiffMode:
        """Parse DiffMode from string value.

        Args:
            value: String value ("unstaged", "staged", "commit" or "head")

        Returns:
            Corresponding DiffMode enum value

        Raises:
            ValueError: If value is not a valid DiffMode

        Examples:
            >>> DiffMode.from_string("staged")
            <DiffMode.HEAD_TO_INDEX: 'staged'>
        """
        value_lower = value.lower()
        for member in cls:
            if member.value == value_lower:
                return member
        valid_values = [m.value for m in cls]
        raise ValueError(
            f"Invalid diff mode: {value}. Must be one of: {', '.join(valid_values)}"
        )
