"""ntagger error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Discovery

Parse and discovery errors are recovered where they occur (a file contributes
no tags, a toolchain query contributes no paths). Config errors surface to the
user through the CLI.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Parse (3xxx)
    PARSE_NO_TREE = 3001
    PARSE_SYNTAX_ERROR = 3002

    # Discovery (4xxx)
    DISCOVERY_TOOL_MISSING = 4001
    DISCOVERY_TOOL_FAILED = 4002


@dataclass(frozen=True, slots=True)
class NtaggerError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_SYNTAX_ERROR')."""
        return self.code.name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(NtaggerError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ParseError(NtaggerError):
    """A source file produced no syntax tree."""

    @classmethod
    def no_tree(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_NO_TREE,
            message=f"No syntax tree for {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class NimSyntaxError(ParseError):
    """The recognizer hit source it cannot tokenize."""

    @classmethod
    def at(cls, reason: str, line: int, column: int) -> "NimSyntaxError":
        return cls(
            code=ErrorCode.PARSE_SYNTAX_ERROR,
            message=f"{reason} (line {line}, column {column})",
            details={"reason": reason, "line": line, "column": column},
        )


class DiscoveryError(NtaggerError):
    """The external toolchain query could not produce search paths."""

    @classmethod
    def tool_missing(cls, executable: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_TOOL_MISSING,
            message=f"Toolchain executable not found: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def tool_failed(cls, executable: str, reason: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_TOOL_FAILED,
            message=f"Toolchain query failed for {executable}: {reason}",
            details={"executable": executable, "reason": reason},
        )
