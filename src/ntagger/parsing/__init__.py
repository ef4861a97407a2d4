"""Parsing module - the syntax-tree provider behind the tag visitor.

- ``lexer``: indentation and bracket aware Nim tokenizer
- ``parser``: recognizer for declaration shapes
- ``ast``: node model shared with the tag visitor
- ``provider``: ``parse(path, context) -> Node | None``
"""

from ntagger.parsing.ast import Node, NodeKind, Symbol
from ntagger.parsing.context import IdentCache, ParseContext
from ntagger.parsing.parser import parse_source
from ntagger.parsing.provider import NimSyntaxTreeProvider, SyntaxTreeProvider

__all__ = [
    "IdentCache",
    "NimSyntaxTreeProvider",
    "Node",
    "NodeKind",
    "ParseContext",
    "Symbol",
    "SyntaxTreeProvider",
    "parse_source",
]
