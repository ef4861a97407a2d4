"""Syntax-tree node model produced by the Nim recognizer.

The layout follows the Nim compiler's own AST closely enough that the tag
visitor can index children by position:

- routine definitions: ``[name, pattern, generic_params, params, pragmas,
  misc, body]`` (see the ``*_POS`` constants)
- ``FORMAL_PARAMS``: ``[return_type, ident_defs...]``, ``EMPTY`` return type
  when none is declared
- ``IDENT_DEFS``: ``[name..., type, default]``
- ``TYPE_DEF``: ``[name, generic_params, body]``
- ``CONST_DEF``: ``[name, type, value]``
- ``WHEN_STMT``: ``[ELIF_BRANCH(cond, body)..., ELSE(body)?]``

Every node keeps the unparsed source text it was recognized from, which is
what signatures are rendered from.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum, auto


class NodeKind(IntEnum):
    """Node kinds. Section kinds must stay contiguous and in this order."""

    EMPTY = auto()
    OTHER = auto()
    STMT_LIST = auto()
    COMMENT_STMT = auto()

    # Names
    IDENT = auto()
    SYM = auto()
    POSTFIX = auto()
    PRAGMA_EXPR = auto()
    ACC_QUOTED = auto()
    OPEN_SYM_CHOICE = auto()
    CLOSED_SYM_CHOICE = auto()
    OPEN_SYM = auto()

    # Routines
    PROC_DEF = auto()
    FUNC_DEF = auto()
    METHOD_DEF = auto()
    ITERATOR_DEF = auto()
    CONVERTER_DEF = auto()
    MACRO_DEF = auto()
    TEMPLATE_DEF = auto()

    # Sections, in TagKind order
    TYPE_SECTION = auto()
    VAR_SECTION = auto()
    LET_SECTION = auto()
    CONST_SECTION = auto()

    # Section members and routine parts
    TYPE_DEF = auto()
    IDENT_DEFS = auto()
    CONST_DEF = auto()
    VAR_TUPLE = auto()
    GENERIC_PARAMS = auto()
    FORMAL_PARAMS = auto()
    PRAGMA = auto()
    EXPR = auto()

    # Conditional compilation
    WHEN_STMT = auto()
    ELIF_BRANCH = auto()
    ELSE = auto()


ROUTINE_KINDS: frozenset[NodeKind] = frozenset(
    (
        NodeKind.PROC_DEF,
        NodeKind.FUNC_DEF,
        NodeKind.METHOD_DEF,
        NodeKind.ITERATOR_DEF,
        NodeKind.CONVERTER_DEF,
        NodeKind.MACRO_DEF,
        NodeKind.TEMPLATE_DEF,
    )
)

SECTION_KINDS: frozenset[NodeKind] = frozenset(
    (
        NodeKind.TYPE_SECTION,
        NodeKind.VAR_SECTION,
        NodeKind.LET_SECTION,
        NodeKind.CONST_SECTION,
    )
)

# Routine child positions
NAME_POS = 0
PATTERN_POS = 1
GENERIC_PARAMS_POS = 2
PARAMS_POS = 3
PRAGMAS_POS = 4
MISC_POS = 5
BODY_POS = 6
ROUTINE_LEN = 7


@dataclass(frozen=True, slots=True)
class Symbol:
    """A name already bound to a declaration."""

    name: str


@dataclass(slots=True)
class Node:
    """A syntax-tree node.

    ``text`` is the identifier for ``IDENT`` nodes and the unparsed source
    slice for everything else.
    """

    kind: NodeKind
    line: int = 0
    text: str = ""
    children: list[Node] = field(default_factory=list)
    sym: Symbol | None = None

    def __len__(self) -> int:
        return len(self.children)

    def __getitem__(self, index: int) -> Node:
        return self.children[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def last_son(self) -> Node:
        return self.children[-1]

    @property
    def is_empty(self) -> bool:
        return self.kind == NodeKind.EMPTY


def empty(line: int = 0) -> Node:
    return Node(NodeKind.EMPTY, line)


def ident(name: str, line: int = 0) -> Node:
    return Node(NodeKind.IDENT, line, name)
