"""Tag records and kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ntagger.parsing.ast import NodeKind

# Undecodable file name bytes come back from os.walk as lone surrogates;
# surrogateescape turns them into the original bytes again.
TAG_FILE_ENCODING = "utf-8"
TAG_FILE_ERRORS = "surrogateescape"


def encode_field(text: str) -> bytes:
    """Bytes of one tag file field as they appear on disk."""
    return text.encode(TAG_FILE_ENCODING, TAG_FILE_ERRORS)


class TagKind(IntEnum):
    """Closed set of tag kinds.

    TYPE, VAR, LET and CONST must stay contiguous and in the same order as
    the section node kinds: section members map to their kind by offset.
    """

    TYPE = 0
    VAR = 1
    LET = 2
    CONST = 3
    PROC = 4
    FUNC = 5
    METHOD = 6
    ITERATOR = 7
    CONVERTER = 8
    MACRO = 9
    TEMPLATE = 10

    @property
    def ctags_name(self) -> str:
        """Name used in the kind: field."""
        return self.name.lower()

    @property
    def is_routine(self) -> bool:
        return self >= TagKind.PROC

    @classmethod
    def for_section(cls, section: NodeKind) -> TagKind:
        """Map a section node kind to its members' tag kind."""
        offset = section - NodeKind.TYPE_SECTION
        if not 0 <= offset <= NodeKind.CONST_SECTION - NodeKind.TYPE_SECTION:
            raise ValueError(f"Not a declaration section: {section.name}")
        return cls(cls.TYPE + offset)

    @classmethod
    def for_routine(cls, routine: NodeKind) -> TagKind:
        return _ROUTINE_TAG_KINDS[routine]


_ROUTINE_TAG_KINDS: dict[NodeKind, TagKind] = {
    NodeKind.PROC_DEF: TagKind.PROC,
    NodeKind.FUNC_DEF: TagKind.FUNC,
    NodeKind.METHOD_DEF: TagKind.METHOD,
    NodeKind.ITERATOR_DEF: TagKind.ITERATOR,
    NodeKind.CONVERTER_DEF: TagKind.CONVERTER,
    NodeKind.MACRO_DEF: TagKind.MACRO,
    NodeKind.TEMPLATE_DEF: TagKind.TEMPLATE,
}


@dataclass(frozen=True, slots=True)
class Tag:
    """One extracted declaration."""

    name: str
    file: str
    line: int
    kind: TagKind
    signature: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tag name must not be empty")
        if self.line < 0:
            raise ValueError(f"Tag line must be non-negative, got {self.line}")

    @classmethod
    def create(
        cls,
        name: str,
        file: str,
        line: int,
        kind: TagKind,
        signature: str = "",
    ) -> Tag | None:
        """Build a tag, or None for an empty name."""
        if not name:
            return None
        return cls(name=name, file=file, line=line, kind=kind, signature=signature)

    def sort_key(self) -> tuple[bytes, bytes, int]:
        return (encode_field(self.name), encode_field(self.file), self.line)
