"""Index module - source discovery and tag generation orchestration."""

from ntagger.index.discovery import (
    ToolchainInfo,
    find_stdlib_root,
    iter_source_files,
    parse_dump_output,
    query_search_paths,
    query_toolchain,
)
from ntagger.index.ops import AtlasResult, GenerateResult, TagGenerator, generate_ctags_for_dir

__all__ = [
    "AtlasResult",
    "GenerateResult",
    "TagGenerator",
    "ToolchainInfo",
    "find_stdlib_root",
    "generate_ctags_for_dir",
    "iter_source_files",
    "parse_dump_output",
    "query_search_paths",
    "query_toolchain",
]
