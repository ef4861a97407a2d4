"""Configuration constants.

Values here are part of the tag-file contract and are NOT user-configurable.
For configurable values, see models.py.
"""

PROGRAM_NAME = "ntagger"
"""Reported in the !_TAG_PROGRAM_NAME header line."""

PROGRAM_VERSION = "0.1.0"
"""Reported in the !_TAG_PROGRAM_VERSION header line and by --version."""

TAG_FILE_FORMAT = 2
"""Extended ctags format."""

TAG_FILE_SORTED = 1
"""0=unsorted, 1=sorted, 2=foldcase."""

DEFAULT_TAGS_FILE = "tags"
"""Output file used by auto and atlas modes when no output was given."""

STDOUT_MARKER = "-"
"""Output value that forces standard output."""

REPO_CONFIG_NAME = ".ntagger.yaml"
"""Per-project config file, looked up in the scanned root."""
