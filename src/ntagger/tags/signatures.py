"""Signature synthesis for routine tags.

Renders ``[G1, G2](p1: T1 = d1, p2: T2): R {. A1, A2 .}`` from a routine
node, using the source text the parser kept for every sub-node.
"""

from __future__ import annotations

import re

from ntagger.parsing.ast import (
    GENERIC_PARAMS_POS,
    PARAMS_POS,
    PRAGMAS_POS,
    Node,
    NodeKind,
)
from ntagger.tags.names import resolve_name

# Record fields are tab separated and newline terminated
_LINE_BREAK_RE = re.compile(r"[ \t]*[\r\n\t]+[ \t]*")


def _one_line(text: str) -> str:
    return _LINE_BREAK_RE.sub(" ", text).strip()


def _child(node: Node, pos: int) -> Node | None:
    return node[pos] if pos < len(node) else None


def _render_generics(generics: Node | None) -> str:
    if generics is None or generics.kind is not NodeKind.GENERIC_PARAMS or len(generics) == 0:
        return ""
    return "[" + ", ".join(_one_line(group.text) for group in generics) + "]"


def _render_param_group(group: Node) -> list[str]:
    """One ``name[: Type][ = default]`` entry per name in an IDENT_DEFS group."""
    if group.kind is not NodeKind.IDENT_DEFS or len(group) < 2:
        return []
    *names, type_node, default = group.children
    suffix = ""
    if not type_node.is_empty:
        suffix += f": {_one_line(type_node.text)}"
    if not default.is_empty:
        suffix += f" = {_one_line(default.text)}"
    rendered = (_one_line(name.text) or resolve_name(name).name for name in names)
    return [f"{name}{suffix}" for name in rendered if name]


def _render_params(params: Node | None) -> tuple[str, str]:
    """Return the ``(...)`` segment and the return type text."""
    if params is None or params.kind is not NodeKind.FORMAL_PARAMS or len(params) == 0:
        return "()", ""
    return_type, *groups = params.children
    entries = [entry for group in groups for entry in _render_param_group(group)]
    returns = "" if return_type.is_empty else _one_line(return_type.text)
    return "(" + ", ".join(entries) + ")", returns


def _render_pragmas(pragmas: Node | None) -> str:
    if pragmas is None or pragmas.kind is not NodeKind.PRAGMA or len(pragmas) == 0:
        return ""
    return "{. " + ", ".join(_one_line(item.text) for item in pragmas) + " .}"


def build_signature(routine: Node) -> str:
    """Synthesize the one-line signature of a routine definition."""
    generics = _render_generics(_child(routine, GENERIC_PARAMS_POS))
    params, returns = _render_params(_child(routine, PARAMS_POS))
    signature = generics + params
    if returns:
        signature += f": {returns}"
    pragmas = _render_pragmas(_child(routine, PRAGMAS_POS))
    if pragmas:
        signature += f" {pragmas}"
    return signature
