"""Declaration visitor: walks a syntax tree and collects tags for one file.

Traversal is shallow. Only statement lists, declaration
sections, routine definitions and the first branch of ``when`` blocks are
looked at; every other node kind is inert.
"""

from __future__ import annotations

from pathlib import Path

from ntagger.parsing.ast import NAME_POS, ROUTINE_KINDS, SECTION_KINDS, Node, NodeKind
from ntagger.parsing.context import ParseContext
from ntagger.parsing.provider import SyntaxTreeProvider
from ntagger.tags.models import Tag, TagKind
from ntagger.tags.names import is_visible, resolve_name
from ntagger.tags.signatures import build_signature


class DeclarationVisitor:
    """Collects tags from one file's tree in source order."""

    def __init__(self, file: str, *, include_private: bool = False) -> None:
        self.file = file
        self.include_private = include_private
        self.tags: list[Tag] = []

    def visit(self, node: Node) -> list[Tag]:
        self._visit(node)
        return self.tags

    def _visit(self, node: Node) -> None:
        kind = node.kind
        if kind in ROUTINE_KINDS:
            self._visit_routine(node)
        elif kind in SECTION_KINDS:
            self._visit_section(node)
        elif kind is NodeKind.STMT_LIST:
            for child in node:
                self._visit(child)
        elif kind is NodeKind.WHEN_STMT:
            # First branch only; later branches are never visited
            if len(node) > 0 and len(node[0]) > 0:
                self._visit(node[0].last_son())
        # COMMENT_STMT and everything else: nothing to collect

    def _visit_routine(self, node: Node) -> None:
        if len(node) <= NAME_POS:
            return
        resolved = resolve_name(node[NAME_POS])
        if not is_visible(resolved, self.include_private):
            return
        self._add(resolved.name, node.line, TagKind.for_routine(node.kind), build_signature(node))

    def _visit_section(self, node: Node) -> None:
        tag_kind = TagKind.for_section(node.kind)
        for member in node:
            if member.kind is NodeKind.COMMENT_STMT or len(member) == 0:
                continue
            resolved = resolve_name(member[0])
            if is_visible(resolved, self.include_private):
                self._add(resolved.name, member.line, tag_kind)

    def _add(self, name: str, line: int, kind: TagKind, signature: str = "") -> None:
        tag = Tag.create(name, self.file, line, kind, signature)
        if tag is not None:
            self.tags.append(tag)


def collect_tags(node: Node | None, file: str, *, include_private: bool = False) -> list[Tag]:
    """Collect tags from a tree; a missing tree yields no tags."""
    if node is None:
        return []
    return DeclarationVisitor(file, include_private=include_private).visit(node)


def collect_tags_for_file(
    path: Path,
    context: ParseContext,
    provider: SyntaxTreeProvider,
    *,
    include_private: bool = False,
) -> list[Tag]:
    """Parse one file through the provider and collect its tags."""
    tree = provider.parse(path, context)
    return collect_tags(tree, str(path), include_private=include_private)
