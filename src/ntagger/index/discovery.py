"""Source enumeration and toolchain search-path discovery.

Two jobs:
- walk a directory tree for Nim sources, pruning HARDCODED_DIRS
- ask the Nim compiler (``nim dump``) for its module search paths and the
  standard-library root, for auto, system and atlas modes

A missing or failing compiler is never fatal: discovery degrades to "no
extra paths" and logs why.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ntagger.config.models import DiscoveryConfig
from ntagger.core.errors import DiscoveryError
from ntagger.core.excludes import HARDCODED_DIRS
from ntagger.core.logging import get_logger

log = get_logger("index.discovery")

# Marker file identifying a Nim standard-library root
STDLIB_MARKER = "system.nim"


def iter_source_files(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield every file under root with one of the extensions.

    Order follows the directory walk and carries no meaning.
    """
    suffixes = tuple(extensions)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in HARDCODED_DIRS]
        for filename in filenames:
            if filename.endswith(suffixes):
                yield Path(dirpath) / filename


def is_within(path: Path, parent: Path) -> bool:
    """True if path equals parent or lies below it (lexically)."""
    return path == parent or parent in path.parents


@dataclass
class ToolchainInfo:
    """What ``nim dump`` reported. Empty when the query failed."""

    search_paths: list[Path] = field(default_factory=list)
    lib_path: Path | None = None


def _run_dump(config: DiscoveryConfig) -> str:
    executable = shutil.which(config.nim_executable)
    if executable is None:
        raise DiscoveryError.tool_missing(config.nim_executable)
    try:
        proc = subprocess.run(
            [executable, *config.dump_args],
            capture_output=True,
            text=True,
            timeout=config.query_timeout_sec,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise DiscoveryError.tool_failed(executable, f"timed out after {e.timeout}s") from e
    except OSError as e:
        raise DiscoveryError.tool_failed(executable, str(e)) from e
    if proc.returncode != 0:
        reason = proc.stderr.strip().splitlines()[-1:] or [f"exit code {proc.returncode}"]
        raise DiscoveryError.tool_failed(executable, reason[0])
    return proc.stdout


def parse_dump_output(output: str) -> ToolchainInfo:
    """Read search paths from ``nim dump`` output.

    JSON output provides ``lib_paths`` and ``libpath``. Plain output is one
    path per line; only lines naming existing directories are kept.
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError:
        lines = (line.strip() for line in output.splitlines())
        return ToolchainInfo(search_paths=[Path(line) for line in lines if line and Path(line).is_dir()])

    if not isinstance(data, dict):
        return ToolchainInfo()
    raw_paths = data.get("lib_paths") or []
    paths = [Path(p) for p in raw_paths if isinstance(p, str) and p]
    lib_path = data.get("libpath")
    return ToolchainInfo(
        search_paths=paths,
        lib_path=Path(lib_path) if isinstance(lib_path, str) and lib_path else None,
    )


def query_toolchain(config: DiscoveryConfig) -> ToolchainInfo:
    """Run the toolchain query; failures yield an empty result."""
    try:
        output = _run_dump(config)
    except DiscoveryError as e:
        log.warning("toolchain_query_failed", error=e.error_name, **e.details)
        return ToolchainInfo()

    info = parse_dump_output(output)
    existing = _dedupe(p for p in info.search_paths if p.is_dir())
    log.debug("toolchain_queried", paths=len(existing), lib_path=str(info.lib_path))
    return ToolchainInfo(search_paths=existing, lib_path=info.lib_path)


def query_search_paths(config: DiscoveryConfig) -> list[Path]:
    """Auxiliary search-path directories, or [] when unavailable."""
    return query_toolchain(config).search_paths


def find_stdlib_root(config: DiscoveryConfig, info: ToolchainInfo | None = None) -> Path | None:
    """Locate the standard-library root.

    Tried in order: the configured path, the ``libpath`` reported by the
    toolchain, then ``<prefix>/lib`` next to the resolved compiler.
    """
    candidates: list[Path] = []
    if config.system_lib_path:
        candidates.append(Path(config.system_lib_path).expanduser())
    if info is not None and info.lib_path is not None:
        candidates.append(info.lib_path)
    executable = shutil.which(config.nim_executable)
    if executable is not None:
        candidates.append(Path(executable).resolve().parent.parent / "lib")

    for candidate in candidates:
        if (candidate / STDLIB_MARKER).is_file():
            return candidate
    log.warning("stdlib_not_found", tried=[str(c) for c in candidates])
    return None


def _dedupe(paths: Iterable[Path]) -> list[Path]:
    seen: set[Path] = set()
    result: list[Path] = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result
