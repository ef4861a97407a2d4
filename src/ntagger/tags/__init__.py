"""Tags module - declaration extraction and ctags serialization."""

from ntagger.tags.models import Tag, TagKind
from ntagger.tags.names import ResolvedName, is_visible, resolve_name
from ntagger.tags.registry import TagRegistry, sort_tags
from ntagger.tags.serializer import HEADER_LINES, render_tags, serialize_tags
from ntagger.tags.signatures import build_signature
from ntagger.tags.visitor import DeclarationVisitor, collect_tags, collect_tags_for_file

__all__ = [
    "HEADER_LINES",
    "DeclarationVisitor",
    "ResolvedName",
    "Tag",
    "TagKind",
    "TagRegistry",
    "build_signature",
    "collect_tags",
    "collect_tags_for_file",
    "is_visible",
    "render_tags",
    "resolve_name",
    "serialize_tags",
    "sort_tags",
]
