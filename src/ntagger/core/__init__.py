"""Core module exports."""

from ntagger.core.errors import (
    ConfigError,
    DiscoveryError,
    ErrorCode,
    NimSyntaxError,
    NtaggerError,
    ParseError,
)
from ntagger.core.excludes import is_excluded, normalize_separators
from ntagger.core.logging import (
    configure_logging,
    get_log_file_path,
    get_logger,
    get_run_id,
    set_run_id,
)
from ntagger.core.progress import pluralize, status

__all__ = [
    # Errors
    "ConfigError",
    "DiscoveryError",
    "ErrorCode",
    "NimSyntaxError",
    "NtaggerError",
    "ParseError",
    # Excludes
    "is_excluded",
    "normalize_separators",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "status",
]
