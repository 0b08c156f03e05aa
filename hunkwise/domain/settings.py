"""Settings for diff and apply behaviour.

Settings are read from a YAML file (``.hunkwise.yaml`` at the repository
root by default) into a typed model using from_file()/from_dict() factory
methods. Missing keys fall back to defaults; unknown keys are ignored.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

from hunkwise.errors import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = ".hunkwise.yaml"
GIT_EXECUTABLE_ENV = "HUNKWISE_GIT"


@dataclass(frozen=True)
class HunkwiseSettings:
    """Diff engine and apply options.

    Attributes:
        git_executable: Program used as diff engine and apply tool
        context_lines: Context lines around each change (``git diff -U``)
        detect_renames: Pass --find-renames instead of --no-renames
        check_before_apply: Run ``git apply --check`` before applying
    """

    git_executable: str = "git"
    context_lines: int = 3
    detect_renames: bool = True
    check_before_apply: bool = True

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping | None) -> HunkwiseSettings:
        """Build settings from a parsed YAML mapping.

        Args:
            data: Raw mapping, or None for all defaults

        Returns:
            Typed settings instance

        Raises:
            SettingsError: If a known key has the wrong type or value
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise SettingsError(f"Settings must be a mapping, got {type(data).__name__}")

        defaults = cls()
        git_executable = data.get("git_executable", defaults.git_executable)
        context_lines = data.get("context_lines", defaults.context_lines)
        detect_renames = data.get("detect_renames", defaults.detect_renames)
        check_before_apply = data.get("check_before_apply", defaults.check_before_apply)

        if not isinstance(git_executable, str) or not git_executable.strip():
            raise SettingsError("git_executable must be a non-empty string")
        if isinstance(context_lines, bool) or not isinstance(context_lines, int) or context_lines < 0:
            raise SettingsError("context_lines must be a non-negative integer")
        if not isinstance(detect_renames, bool):
            raise SettingsError("detect_renames must be true or false")
        if not isinstance(check_before_apply, bool):
            raise SettingsError("check_before_apply must be true or false")

        return cls(
            git_executable=git_executable,
            context_lines=context_lines,
            detect_renames=detect_renames,
            check_before_apply=check_before_apply,
        )

    @classmethod
    def from_file(cls, file_path: Path) -> HunkwiseSettings:
        """Load settings from a YAML file.

        Raises:
            SettingsError: If the file cannot be read or parsed
        """
        try:
            text = file_path.read_text()
        except OSError as e:
            raise SettingsError(f"Cannot read settings file {file_path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {file_path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        repo_path: Path,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> HunkwiseSettings:
        """Resolve settings for a repository.

        An explicit ``config_path`` wins, then ``<repo>/.hunkwise.yaml``,
        then defaults. ``HUNKWISE_GIT`` overrides the git executable.

        ``git_executable`` is never taken from the repository's own file;
        it is ignored there with a warning.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()

        if config_path is not None:
            settings = cls.from_file(config_path)
        elif (repo_path / SETTINGS_FILENAME).is_file():
            settings = cls.from_file(repo_path / SETTINGS_FILENAME)
            if settings.git_executable != defaults.git_executable:
                logger.warning(
                    "Ignoring git_executable %r from %s; use --config or %s instead",
                    settings.git_executable,
                    repo_path / SETTINGS_FILENAME,
                    GIT_EXECUTABLE_ENV,
                )
                settings = replace(settings, git_executable=defaults.git_executable)
        else:
            settings = defaults

        git_override = environ.get(GIT_EXECUTABLE_ENV)
        if git_override:
            settings = replace(settings, git_executable=git_override)
        return settings

    # --------------------------------------------------------
    # Serialization
    # --------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "git_executable": self.git_executable,
            "context_lines": self.context_lines,
            "detect_renames": self.detect_renames,
            "check_before_apply": self.check_before_apply,
        }
