"""Exceptions raised by hunkwise.

Every error derives from HunkwiseError so callers (and the CLI) can catch
the whole family at once. Lossy decoding is not an error: it is reported as
a logged warning and the diff is still produced.
"""


class HunkwiseError(Exception):
    """Base class for all hunkwise errors."""

    pass


class EngineError(HunkwiseError):
    """Raised when git fails or emits output that cannot be read as a diff."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class NotARepositoryError(EngineError):
    """Raised when a path is not inside a git work tree."""

    pass


class ApplyFailed(HunkwiseError):
    """Raised when ``git apply`` rejects a patch.

    ``stderr`` carries git's diagnostic text unmodified.
    """

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class NoDiffFound(HunkwiseError):
    """Raised when a file has no textual diff in the requested mode."""

    pass


class HunkIndexOutOfRange(HunkwiseError):
    """Raised when a hunk index does not exist in the current diff."""

    pass


class InvalidLineSelection(HunkwiseError):
    """Raised when selected line indices do not exist in the hunk."""

    pass


class SettingsError(HunkwiseError):
    """Raised when a settings file cannot be read or is invalid."""

    pass
