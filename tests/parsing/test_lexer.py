"""Tests for parsing/lexer.py module.

Covers:
- Token positions, depth and line-start flags
- Comment handling (plain, block, nested, documentation)
- String, character and number literals
- Pragma brackets and backtick quoting
- NimSyntaxError on unterminated constructs
"""

from __future__ import annotations

import pytest

from ntagger.core.errors import ErrorCode, NimSyntaxError, ParseError
from ntagger.parsing.lexer import TokenKind, tokenize


def _texts(source: str) -> list[str]:
    return [tok.text for tok in tokenize(source)]


def _kinds(source: str) -> list[TokenKind]:
    return [tok.kind for tok in tokenize(source)]


class TestTokenPositions:
    """Line, column and first-on-line bookkeeping."""

    def test_lines_and_columns(self) -> None:
        tokens = tokenize("proc foo\n  bar")
        assert [(t.text, t.line, t.col) for t in tokens] == [
            ("proc", 1, 0),
            ("foo", 1, 5),
            ("bar", 2, 2),
        ]

    def test_first_on_line(self) -> None:
        tokens = tokenize("a b\nc")
        assert [t.first_on_line for t in tokens] == [True, False, True]

    def test_offsets_slice_source(self) -> None:
        source = "let x* = 42"
        for tok in tokenize(source):
            assert source[tok.start : tok.end] == tok.text

    def test_empty_source(self) -> None:
        assert tokenize("") == []


class TestBrackets:
    """Bracket depth and matching."""

    def test_opener_outside_closer_inside(self) -> None:
        """Openers sit at the outer depth, closers at the inner depth."""
        tokens = tokenize("(a)")
        assert [(t.text, t.depth) for t in tokens] == [("(", 0), ("a", 1), (")", 1)]

    def test_matching_indices(self) -> None:
        tokens = tokenize("f(a[1], b)")
        open_paren = next(i for i, t in enumerate(tokens) if t.text == "(")
        close_paren = tokens[open_paren].match
        assert tokens[close_paren].text == ")"
        assert tokens[close_paren].match == open_paren

    def test_pragma_brackets_are_single_tokens(self) -> None:
        tokens = tokenize("{.inline, raises: [].}")
        assert tokens[0].text == "{."
        assert tokens[0].kind is TokenKind.OPEN
        assert tokens[-1].text == ".}"
        assert tokens[-1].kind is TokenKind.CLOSE

    def test_range_inside_braces_is_not_pragma(self) -> None:
        tokens = tokenize("{..}")
        assert tokens[0].text == "{"

    def test_unclosed_bracket_raises(self) -> None:
        with pytest.raises(NimSyntaxError) as exc_info:
            tokenize("proc foo(x: int")
        assert exc_info.value.code == ErrorCode.PARSE_SYNTAX_ERROR
        assert exc_info.value.details["line"] == 1


class TestComments:
    """Comment handling."""

    def test_plain_comment_dropped(self) -> None:
        assert _texts("a # trailing\nb") == ["a", "b"]

    def test_block_comment_dropped_and_lines_counted(self) -> None:
        tokens = tokenize("a #[ one\ntwo ]# b\nc")
        assert [(t.text, t.line) for t in tokens] == [("a", 1), ("b", 2), ("c", 3)]

    def test_nested_block_comment(self) -> None:
        assert _texts("#[ outer #[ inner ]# still outer ]# x") == ["x"]

    def test_doc_comment_kept(self) -> None:
        tokens = tokenize("## Documented\nproc")
        assert tokens[0].kind is TokenKind.DOC_COMMENT
        assert tokens[0].text == "## Documented"

    def test_doc_block_comment_kept(self) -> None:
        tokens = tokenize("##[ multi\nline ]##\nx")
        assert tokens[0].kind is TokenKind.DOC_COMMENT
        assert tokens[1].line == 3

    def test_unterminated_block_comment_raises(self) -> None:
        with pytest.raises(NimSyntaxError, match="unterminated block comment"):
            tokenize("#[ never closed")

    def test_syntax_error_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            tokenize("#[")


class TestLiterals:
    """Strings, characters and numbers."""

    def test_string_with_hash_is_one_token(self) -> None:
        tokens = tokenize('x = "not # a comment"')
        assert tokens[-1].kind is TokenKind.STRING
        assert tokens[-1].text == '"not # a comment"'

    def test_escaped_quote(self) -> None:
        assert _texts(r'"a\"b" c') == [r'"a\"b"', "c"]

    def test_triple_quoted_string_spans_lines(self) -> None:
        tokens = tokenize('s = """line one\nline two"""\nnext')
        assert tokens[2].kind is TokenKind.STRING
        assert tokens[3].text == "next"
        assert tokens[3].line == 3

    def test_unterminated_triple_quoted_string_raises(self) -> None:
        with pytest.raises(NimSyntaxError, match="triple-quoted"):
            tokenize('s = """never closed')

    def test_generalized_raw_string(self) -> None:
        tokens = tokenize('r"C:\\path" x')
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[0].text == 'r"C:\\path"'

    def test_unterminated_string_stops_at_line_end(self) -> None:
        tokens = tokenize('"open\nnext')
        assert tokens[1].text == "next"

    def test_char_literal(self) -> None:
        assert _kinds("'a' '\\n'") == [TokenKind.CHAR, TokenKind.CHAR]

    def test_number_with_suffix(self) -> None:
        assert _texts("0xFF'u8 3.14 1_000") == ["0xFF'u8", "3.14", "1_000"]


class TestOperatorsAndNames:
    """Operators, punctuation and backticks."""

    def test_export_marker_before_colon(self) -> None:
        tokens = tokenize("x*: int")
        assert tokens[1].is_op("*")
        assert tokens[2].kind is TokenKind.PUNCT

    def test_operator_runs(self) -> None:
        assert _texts("a ..< b") == ["a", "..<", "b"]

    def test_backticks(self) -> None:
        assert _kinds("`+`") == [TokenKind.ACCENT, TokenKind.OPERATOR, TokenKind.ACCENT]

    def test_unicode_identifier(self) -> None:
        assert _texts("proc größe") == ["proc", "größe"]

    def test_is_keyword(self) -> None:
        tok = tokenize("elif")[0]
        assert tok.is_keyword("elif", "else")
        assert not tok.is_keyword("when")
