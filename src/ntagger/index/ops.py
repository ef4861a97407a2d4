"""High-level orchestration of tag generation.

The TagGenerator is the entry point for every run. It owns one parse
context for the whole run and drives the pipeline:

Discovery -> PathFilter -> Provider -> DeclarationVisitor -> Registry -> Sort -> Serialize

Per-file parse failures are logged and the file is skipped; any other
exception aborts the run.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ntagger.config.models import NtaggerConfig
from ntagger.core.errors import ParseError
from ntagger.core.excludes import is_excluded, normalize_patterns
from ntagger.core.logging import get_logger
from ntagger.index.discovery import (
    ToolchainInfo,
    find_stdlib_root,
    is_within,
    iter_source_files,
    query_toolchain,
)
from ntagger.parsing.context import ParseContext
from ntagger.parsing.provider import NimSyntaxTreeProvider, SyntaxTreeProvider
from ntagger.tags.models import TAG_FILE_ENCODING, TAG_FILE_ERRORS
from ntagger.tags.registry import TagRegistry
from ntagger.tags.serializer import serialize_tags
from ntagger.tags.visitor import collect_tags_for_file

log = get_logger("index.ops")


def _absolute(path: Path) -> Path:
    return Path(os.path.abspath(path))


@dataclass
class GenerateResult:
    """Result of one tag generation pass."""

    content: bytes
    tag_count: int
    files_scanned: int
    files_excluded: int = 0
    failed_files: list[str] = field(default_factory=list)


@dataclass
class AtlasResult:
    """Result of an atlas run: project tags plus the dependency tag file."""

    project: GenerateResult
    deps_path: Path
    deps_rebuilt: bool
    deps: GenerateResult | None = None


class TagGenerator:
    """Scans roots, extracts declarations and renders a tag file."""

    def __init__(
        self,
        config: NtaggerConfig | None = None,
        *,
        provider: SyntaxTreeProvider | None = None,
    ) -> None:
        self.config = config or NtaggerConfig()
        self.provider = provider or NimSyntaxTreeProvider()

    def generate(
        self,
        roots: Sequence[Path],
        *,
        base_dir: Path | None = None,
        excludes: Iterable[str] = (),
        include_private: bool = False,
        skip_dirs: Iterable[Path] = (),
    ) -> GenerateResult:
        """Generate one tag file covering every root.

        Exclusion patterns match against each file's path relative to the
        root it was found under. Files below ``skip_dirs`` are ignored, as
        are files already reached through an earlier root.
        """
        abs_roots = [_absolute(root) for root in roots]
        patterns = normalize_patterns(excludes)
        skipped = [_absolute(d) for d in skip_dirs]
        context = ParseContext(project_path=abs_roots[0] if abs_roots else Path.cwd())
        registry = TagRegistry()
        seen: set[Path] = set()
        excluded = 0
        failed: list[str] = []

        for root in abs_roots:
            for path in iter_source_files(root, self.config.tags.extensions):
                if path in seen or any(is_within(path, d) for d in skipped):
                    continue
                seen.add(path)
                rel_path = path.relative_to(root).as_posix()
                if is_excluded(rel_path, patterns):
                    log.debug("file_excluded", path=rel_path)
                    excluded += 1
                    continue
                try:
                    tags = collect_tags_for_file(
                        path, context, self.provider, include_private=include_private
                    )
                except ParseError as e:
                    log.warning("parse_failed", path=str(path), code=e.error_name, error=e.message)
                    failed.append(str(path))
                    continue
                registry.extend(tags)

        content = serialize_tags(
            registry.sorted(),
            _absolute(base_dir) if base_dir is not None else None,
            self.config.tags.language_name,
        )
        return GenerateResult(
            content=content,
            tag_count=len(registry),
            files_scanned=registry.file_count,
            files_excluded=excluded,
            failed_files=failed,
        )

    def resolve_roots(self, root: Path, *, auto: bool = False, system: bool = False) -> list[Path]:
        """Scan roots for a run: the project, then search paths, then the stdlib.

        Toolchain search paths inside the standard library are only kept when
        ``system`` is set.
        """
        roots = [_absolute(root)]
        if auto:
            roots.extend(self._toolchain_roots(system=system))
        elif system:
            stdlib = find_stdlib_root(self.config.discovery)
            if stdlib is not None:
                roots.append(_absolute(stdlib))
        return _unique(roots)

    def dependency_roots(self, root: Path, *, system: bool = False) -> list[Path]:
        """Roots covered by the dependency tag file in atlas mode.

        The workspace ``deps`` directory first, then toolchain search paths.
        """
        deps: list[Path] = []
        workspace_deps = _absolute(root) / self.config.atlas.deps_dir_name
        if workspace_deps.is_dir():
            deps.append(workspace_deps)
        deps.extend(self._toolchain_roots(system=system))
        return _unique(deps)

    def _toolchain_roots(self, *, system: bool) -> list[Path]:
        info = query_toolchain(self.config.discovery)
        if not system:
            return _dependency_paths(info, info.lib_path)
        paths = [_absolute(p) for p in info.search_paths]
        stdlib = find_stdlib_root(self.config.discovery, info)
        if stdlib is not None:
            paths.append(_absolute(stdlib))
        return paths

    def generate_atlas(
        self,
        root: Path,
        *,
        deps_path: Path,
        rebuild_deps: bool = False,
        base_dir: Path | None = None,
        excludes: Iterable[str] = (),
        include_private: bool = False,
        system: bool = False,
    ) -> AtlasResult:
        """Project tags, with dependencies kept in a separate cached tag file.

        The dependency file is written here; it is regenerated when missing
        or when ``rebuild_deps`` is set. The project content is returned for
        the caller to write.
        """
        root = _absolute(root)
        excludes = list(excludes)
        dep_roots = self.dependency_roots(root, system=system)

        deps_result: GenerateResult | None = None
        rebuilt = rebuild_deps or not deps_path.exists()
        if rebuilt:
            deps_result = self.generate(
                dep_roots,
                base_dir=deps_path.parent,
                excludes=excludes,
                include_private=include_private,
            )
            deps_path.parent.mkdir(parents=True, exist_ok=True)
            deps_path.write_bytes(deps_result.content)
            log.info("tags_written", path=str(deps_path), tags=deps_result.tag_count, deps=True)
        else:
            log.info("deps_tags_cached", path=str(deps_path))

        project = self.generate(
            [root],
            base_dir=base_dir,
            excludes=excludes,
            include_private=include_private,
            skip_dirs=[d for d in dep_roots if is_within(d, root)],
        )
        return AtlasResult(project=project, deps_path=deps_path, deps_rebuilt=rebuilt, deps=deps_result)


def _dependency_paths(info: ToolchainInfo, stdlib: Path | None) -> list[Path]:
    """Search paths outside the standard library."""
    paths = [_absolute(p) for p in info.search_paths]
    if stdlib is None:
        return paths
    stdlib = _absolute(stdlib)
    return [p for p in paths if not is_within(p, stdlib)]


def _unique(paths: Iterable[Path]) -> list[Path]:
    result: list[Path] = []
    for path in paths:
        if path not in result:
            result.append(path)
    return result


def generate_ctags_for_dir(
    root: Path | str,
    *,
    excludes: Iterable[str] = (),
    include_private: bool = False,
    config: NtaggerConfig | None = None,
) -> str:
    """Tag file text for every Nim source under one directory.

    Paths are rendered relative to ``root``.
    """
    root = Path(root)
    result = TagGenerator(config).generate(
        [root], base_dir=root, excludes=excludes, include_private=include_private
    )
    return result.content.decode(TAG_FILE_ENCODING, TAG_FILE_ERRORS)
