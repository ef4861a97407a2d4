"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (NTAGGER__SECTION__KEY)
3. Project YAML (<root>/.ntagger.yaml)
4. Global YAML (~/.config/ntagger/config.yaml)
5. Built-in defaults (this file)

Examples:
    NTAGGER__LOGGING__LEVEL=DEBUG
    NTAGGER__DISCOVERY__NIM_EXECUTABLE=/opt/nim/bin/nim
    NTAGGER__TAGS__INCLUDE_PRIVATE=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        NTAGGER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every parsed file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class TagsConfig(BaseModel):
    """Tag extraction and output configuration.

    Env vars:
        NTAGGER__TAGS__INCLUDE_PRIVATE: Emit unexported declarations too
        NTAGGER__TAGS__LANGUAGE_NAME: Value of the language: field
    """

    language_name: str = Field(
        default="Nim",
        description="Value written to the language: field of every record.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".nim"],
        description="File extensions treated as Nim sources.",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Substring patterns added to every -e/--exclude given on the command line.",
    )
    include_private: bool = Field(
        default=False,
        description="Emit declarations without an export marker. Same as -p/--private.",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one source extension is required")
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]


class DiscoveryConfig(BaseModel):
    """External toolchain query configuration (auto, system and atlas modes).

    Env vars:
        NTAGGER__DISCOVERY__NIM_EXECUTABLE: Compiler used for `nim dump`
        NTAGGER__DISCOVERY__QUERY_TIMEOUT_SEC: Max wait for the query
        NTAGGER__DISCOVERY__SYSTEM_LIB_PATH: Explicit standard-library root
    """

    nim_executable: str = Field(
        default="nim",
        description="Executable queried for search paths. Looked up on PATH.",
    )
    dump_args: list[str] = Field(
        default_factory=lambda: ["dump", "--verbosity:0", "--dump.format:json", "dummy"],
        description="Arguments passed to the executable to dump its search paths.",
    )
    query_timeout_sec: float = Field(
        default=30.0,
        description="Timeout for the toolchain query. On timeout no paths are added.",
    )
    system_lib_path: str | None = Field(
        default=None,
        description="Standard-library root for -s/--system. Auto-detected when unset.",
    )

    @field_validator("query_timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class AtlasConfig(BaseModel):
    """Atlas mode: separate project and dependency tag files.

    Env vars:
        NTAGGER__ATLAS__DEPS_DIR_NAME: Workspace dependency directory
        NTAGGER__ATLAS__DEPS_TAGS_NAME: Cached dependency tag file name
    """

    deps_dir_name: str = Field(
        default="deps",
        description="Dependency checkout directory inside the project root.",
    )
    deps_tags_name: str = Field(
        default="tags.deps",
        description="Dependency tag file, written next to the project tag file.",
    )


class NtaggerConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    atlas: AtlasConfig = Field(default_factory=AtlasConfig)
