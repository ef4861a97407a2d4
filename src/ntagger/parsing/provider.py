"""Syntax-tree providers.

The tag visitor only needs ``parse(path, context) -> Node | None``. The
default provider reads a file and runs the Nim declaration recognizer on it;
tests and alternative front ends can supply their own.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ntagger.core.errors import ParseError
from ntagger.core.logging import get_logger
from ntagger.parsing.ast import Node
from ntagger.parsing.context import ParseContext
from ntagger.parsing.parser import parse_source

log = get_logger("parsing.provider")


class SyntaxTreeProvider(Protocol):
    """Turns one source file into a syntax tree, or None when it cannot."""

    def parse(self, path: Path, context: ParseContext) -> Node | None: ...


class NimSyntaxTreeProvider:
    """Reads a Nim file and recognizes its declarations.

    Unreadable or undecodable files yield None. Tokenizer faults raise
    NimSyntaxError and are left to the caller.
    """

    encoding = "utf-8-sig"

    def parse(self, path: Path, context: ParseContext) -> Node | None:
        try:
            with path.open(encoding=self.encoding) as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            error = ParseError.no_tree(str(path), str(e))
            log.warning("parse_failed", path=str(path), code=error.error_name, error=error.message)
            return None

        tree = parse_source(source, context)
        context.files_parsed += 1
        log.debug("file_parsed", path=str(path), statements=len(tree))
        return tree
