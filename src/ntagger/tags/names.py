"""Name resolution for declaration name nodes.

Unwraps the decorations a declared name can carry (export marker, pragmas,
backtick quoting, symbol choices) down to its plain text, and reports
whether the export marker was present on the way.
"""

from __future__ import annotations

from typing import NamedTuple

from ntagger.parsing.ast import Node, NodeKind


class ResolvedName(NamedTuple):
    name: str
    exported: bool


UNRESOLVED = ResolvedName("", False)


def resolve_name(node: Node) -> ResolvedName:
    """Resolve a name node to ``(name, exported)``.

    Unknown shapes resolve to an empty name, which callers treat as "no tag".
    """
    match node.kind:
        case NodeKind.POSTFIX:
            if len(node) < 2:
                return UNRESOLVED
            return ResolvedName(resolve_name(node[1]).name, True)
        case NodeKind.PRAGMA_EXPR:
            if len(node) < 1:
                return UNRESOLVED
            return resolve_name(node[0])
        case NodeKind.ACC_QUOTED:
            return ResolvedName("".join(resolve_name(part).name for part in node), False)
        case NodeKind.SYM:
            return ResolvedName(node.sym.name if node.sym is not None else "", False)
        case NodeKind.IDENT:
            return ResolvedName(node.text, False)
        case NodeKind.OPEN_SYM_CHOICE | NodeKind.CLOSED_SYM_CHOICE | NodeKind.OPEN_SYM:
            if len(node) < 1:
                return UNRESOLVED
            return resolve_name(node[0])
        case _:
            return UNRESOLVED


def is_visible(resolved: ResolvedName, include_private: bool) -> bool:
    """Whether a resolved declaration should produce a tag."""
    return bool(resolved.name) and (include_private or resolved.exported)
