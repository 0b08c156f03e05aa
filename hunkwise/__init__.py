"""hunkwise - diff model and partial staging for git repositories.

Reads diffs out of a repository into plain, immutable models, synthesizes
unified-diff patches for whole hunks or selected lines, applies them with
``git apply`` and classifies changed line ranges for editor gutters.

Usage:
    python -m hunkwise <command> [options]
    hunkwise <command> [options]

Structure:
    hunkwise/
    ├── __main__.py          # Entry point dispatcher
    ├── errors.py            # Exception hierarchy (HunkwiseError)
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # DiffOutput, DiffFile, DiffHunk, DiffLine
    │   ├── diff_mode.py     # DiffMode
    │   ├── line_change.py   # LineChange, classify_line_changes
    │   ├── patch.py         # generate_hunk_patch, generate_line_patch
    │   └── settings.py      # HunkwiseSettings
    ├── services/            # Business logic services
    │   ├── repository_session.py
    │   ├── diff_service.py
    │   └── staging_service.py
    ├── infrastructure/      # External system interactions
    │   └── git/             # git runner, diff engine, parser, apply
    └── commands/            # Thin command orchestrators
        ├── diff.py
        └── stage.py
"""
