"""Tokenizer for Nim source.

Produces just enough structure for the declaration recognizer: every token
carries its line, column, bracket depth, source offsets and whether it opens
a physical line. Ordinary comments are dropped; documentation comments are
kept as tokens since they are statements in their own right.

Depth convention: an opening bracket sits at the depth outside it, a closing
bracket at the depth inside it. A closer that starts a line is therefore
never mistaken for the start of a new top-level statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NoReturn

from ntagger.core.errors import NimSyntaxError


class TokenKind(Enum):
    IDENT = "ident"
    OPERATOR = "operator"
    PUNCT = "punct"
    OPEN = "open"
    CLOSE = "close"
    NUMBER = "number"
    STRING = "string"
    CHAR = "char"
    ACCENT = "accent"
    DOC_COMMENT = "doc_comment"


@dataclass(slots=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    col: int
    start: int
    end: int
    depth: int
    first_on_line: bool
    # Index of the matching bracket, -1 for non-brackets
    match: int = -1

    def is_op(self, text: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.text == text

    def is_keyword(self, *words: str) -> bool:
        return self.kind is TokenKind.IDENT and self.text in words


OPERATOR_CHARS = frozenset("=+-*/<>@$~&%|!?^.\\")

_NUMBER_RE = re.compile(
    r"(?:0[xX][0-9A-Fa-f_]+|0[oO][0-7_]+|0[bB][01_]+"
    r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d[\d_]*)?)"
    r"(?:'?[A-Za-z]\w*)?"
)
_CHAR_RE = re.compile(r"'(?:\\(?:x[0-9A-Fa-f]{2}|\d+|.)|[^'\\\n])'")
_STRING_RE = re.compile(r'"(?:\\.|[^"\\\n])*"')
_RAW_STRING_RE = re.compile(r'"(?:""|[^"\n])*"')


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_" or ord(c) >= 0x80


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_" or ord(c) >= 0x80


class Lexer:
    """Single-use tokenizer over one source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.at_line_start = True
        self.tokens: list[Token] = []
        self._stack: list[int] = []

    def tokenize(self) -> list[Token]:
        src = self.source
        n = len(src)
        while self.pos < n:
            c = src[self.pos]
            if c == "\n":
                self._newline(self.pos)
                self.pos += 1
            elif c in " \t\r\f\v":
                self.pos += 1
            elif c == "#":
                self._comment()
            elif _is_ident_start(c):
                self._ident()
            elif c.isdigit():
                m = _NUMBER_RE.match(src, self.pos)
                self._emit(TokenKind.NUMBER, m.end() if m else self.pos + 1)
            elif c == '"':
                self._string(self.pos, raw=False)
            elif c == "'":
                m = _CHAR_RE.match(src, self.pos)
                self._emit(TokenKind.CHAR if m else TokenKind.PUNCT, m.end() if m else self.pos + 1)
            elif c == "`":
                self._emit(TokenKind.ACCENT, self.pos + 1)
            elif c == "{" and src.startswith(".", self.pos + 1) and not src.startswith("..", self.pos + 1):
                self._open(2)
            elif c in "([{":
                self._open(1)
            elif c == "." and src.startswith("}", self.pos + 1):
                self._close(2)
            elif c in ")]}":
                self._close(1)
            elif c in ",;:":
                self._emit(TokenKind.PUNCT, self.pos + 1)
            elif c in OPERATOR_CHARS:
                self._operator()
            else:
                self._emit(TokenKind.PUNCT, self.pos + 1)

        if self._stack:
            tok = self.tokens[self._stack[-1]]
            raise NimSyntaxError.at(f"unclosed '{tok.text}'", tok.line, tok.col)
        return self.tokens

    # -- helpers ------------------------------------------------------------

    def _newline(self, at: int) -> None:
        self.line += 1
        self.line_start = at + 1
        self.at_line_start = True

    def _advance_over(self, start: int, end: int) -> None:
        """Account for newlines inside a multi-line token or comment."""
        newlines = self.source.count("\n", start, end)
        if newlines:
            self.line += newlines
            self.line_start = self.source.rindex("\n", start, end) + 1
        self.pos = end

    def _emit(self, kind: TokenKind, end: int) -> Token:
        start = self.pos
        tok = Token(
            kind=kind,
            text=self.source[start:end],
            line=self.line,
            col=start - self.line_start,
            start=start,
            end=end,
            depth=len(self._stack),
            first_on_line=self.at_line_start,
        )
        self.tokens.append(tok)
        self.at_line_start = False
        self._advance_over(start, end)
        return tok

    def _open(self, width: int) -> None:
        self._emit(TokenKind.OPEN, self.pos + width)
        self._stack.append(len(self.tokens) - 1)

    def _close(self, width: int) -> None:
        tok = self._emit(TokenKind.CLOSE, self.pos + width)
        if self._stack:
            opener = self._stack.pop()
            tok.match = opener
            self.tokens[opener].match = len(self.tokens) - 1

    def _operator(self) -> None:
        src = self.source
        end = self.pos
        while end < len(src) and src[end] in OPERATOR_CHARS:
            # `.}` closes a pragma, it is never part of an operator
            if src[end] == "." and src.startswith("}", end + 1) and end > self.pos:
                break
            end += 1
        self._emit(TokenKind.OPERATOR, end)

    def _ident(self) -> None:
        src = self.source
        end = self.pos + 1
        while end < len(src) and _is_ident_char(src[end]):
            end += 1
        if src.startswith('"', end):
            # r"...", fmt"...": generalized raw string literal
            self._string(end, raw=True)
        else:
            self._emit(TokenKind.IDENT, end)

    def _string(self, quote: int, *, raw: bool) -> None:
        src = self.source
        if src.startswith('"""', quote):
            close = src.find('"""', quote + 3)
            if close < 0:
                self._fail("unterminated triple-quoted string")
            end = close + 3
            while src.startswith('"', end):
                end += 1
        else:
            m = (_RAW_STRING_RE if raw else _STRING_RE).match(src, quote)
            if m:
                end = m.end()
            else:
                # Unterminated on this line; stop at the line break
                newline = src.find("\n", quote)
                end = len(src) if newline < 0 else newline
        self._emit(TokenKind.STRING, end)

    def _comment(self) -> None:
        src = self.source
        if src.startswith("##[", self.pos):
            end = self._block_end("##[", "]##")
            self._emit(TokenKind.DOC_COMMENT, end)
        elif src.startswith("#[", self.pos):
            end = self._block_end("#[", "]#")
            self._advance_over(self.pos, end)
        else:
            newline = src.find("\n", self.pos)
            end = len(src) if newline < 0 else newline
            if src.startswith("##", self.pos):
                self._emit(TokenKind.DOC_COMMENT, end)
            else:
                self.pos = end

    def _block_end(self, opener: str, closer: str) -> int:
        src = self.source
        level = 1
        i = self.pos + len(opener)
        while i < len(src):
            if src.startswith(opener, i):
                level += 1
                i += len(opener)
            elif src.startswith(closer, i):
                level -= 1
                i += len(closer)
                if level == 0:
                    return i
            else:
                i += 1
        self._fail("unterminated block comment")

    def _fail(self, reason: str) -> NoReturn:
        raise NimSyntaxError.at(reason, self.line, self.pos - self.line_start)


def tokenize(source: str) -> list[Token]:
    """Tokenize Nim source text.

    Raises:
        NimSyntaxError: On unterminated block comments, triple-quoted strings
            or unclosed brackets.
    """
    return Lexer(source).tokenize()
