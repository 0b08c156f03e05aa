"""Parse diff engine output into DiffOutput models.

Decodes the engine's patch bytes, reads them with ``unidiff`` and copies
the result into immutable domain models. Invalid byte sequences are
replaced rather than treated as fatal.
"""

from __future__ import annotations

import logging

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from hunkwise.domain.diff import DiffOutput, DiffStats
from hunkwise.errors import EngineError
from hunkwise.infrastructure.git.diff_engine import EngineDiff

logger = logging.getLogger(__name__)


class DiffParser:
    """Turns an EngineDiff into a DiffOutput. Holds no state."""

    def parse(self, engine_diff: EngineDiff) -> DiffOutput:
        """Parse one engine result.

        Args:
            engine_diff: Raw patch and summary from the diff engine

        Returns:
            DiffOutput whose stats are git's summary, not recounted

        Raises:
            EngineError: If the patch is not a readable unified diff
        """
        stats = DiffStats.from_shortstat(engine_diff.shortstat)
        if not engine_diff.patch.strip():
            return DiffOutput(files=(), stats=stats)

        text = decode_patch(engine_diff.patch)
        try:
            patch_set = PatchSet.from_string(text)
        except UnidiffParseError as e:
            raise EngineError(f"Unreadable {engine_diff.mode.value} diff: {e}") from e

        output = DiffOutput.from_patch_set(patch_set, stats)
        logger.debug(
            "Parsed %s diff: %d files, %d hunks",
            engine_diff.mode.value,
            len(output.files),
            sum(len(f.hunks) for f in output.files),
        )
        return output


def decode_patch(data: bytes) -> str:
    """Decode patch bytes as UTF-8, replacing invalid sequences.

    Replacement is logged as a warning; the caller still gets a diff.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(
            "EncodingLossy: diff contains invalid UTF-8 at byte %d; "
            "replacing undecodable bytes",
            e.start,
        )
        return data.decode("utf-8", errors="replace")
