"""Recognizer for Nim declaration shapes.

This is not a full Nim parser. It splits a token stream into statements by
indentation and only looks inside the statements that can declare something
at module level:

- routine headers (``proc``, ``func``, ``method``, ``iterator``,
  ``converter``, ``macro``, ``template``)
- ``type``/``var``/``let``/``const`` sections, block or inline form
- ``when``/``elif``/``else`` blocks
- documentation comments

Every other statement becomes an ``OTHER`` node carrying only its leading
token. Routine bodies and object bodies are never descended into.
"""

from __future__ import annotations

from ntagger.parsing.ast import Node, NodeKind, empty, ident
from ntagger.parsing.context import ParseContext
from ntagger.parsing.lexer import Token, TokenKind, tokenize

ROUTINE_KEYWORDS: dict[str, NodeKind] = {
    "proc": NodeKind.PROC_DEF,
    "func": NodeKind.FUNC_DEF,
    "method": NodeKind.METHOD_DEF,
    "iterator": NodeKind.ITERATOR_DEF,
    "converter": NodeKind.CONVERTER_DEF,
    "macro": NodeKind.MACRO_DEF,
    "template": NodeKind.TEMPLATE_DEF,
}

SECTION_KEYWORDS: dict[str, NodeKind] = {
    "type": NodeKind.TYPE_SECTION,
    "var": NodeKind.VAR_SECTION,
    "let": NodeKind.LET_SECTION,
    "const": NodeKind.CONST_SECTION,
}

_NAME_TOKENS = (TokenKind.IDENT, TokenKind.ACCENT)


class NimParser:
    """Builds a declaration-level syntax tree from a token stream."""

    def __init__(
        self,
        source: str,
        tokens: list[Token],
        context: ParseContext | None = None,
    ) -> None:
        self.source = source
        self.tokens = tokens
        self.context = context

    def parse(self) -> Node:
        return Node(NodeKind.STMT_LIST, 1, children=self._parse_block(0, len(self.tokens)))

    # -- statements ---------------------------------------------------------

    def _parse_block(self, start: int, end: int) -> list[Node]:
        if start < end and not self.tokens[start].first_on_line:
            # Inline body after `when ...:`, a single statement
            return [self._parse_statement(start, end, end)[0]]
        nodes: list[Node] = []
        i = start
        while i < end:
            node, i = self._parse_statement(i, end)
            nodes.append(node)
        return nodes

    def _statement_end(self, i: int, limit: int) -> int:
        """Index of the first line-leading token at or left of token i's column."""
        tokens = self.tokens
        col = tokens[i].col
        depth = tokens[i].depth
        for j in range(i + 1, limit):
            tok = tokens[j]
            if tok.first_on_line and tok.depth <= depth and tok.col <= col:
                return j
        return limit

    def _parse_statement(self, i: int, limit: int, stop: int | None = None) -> tuple[Node, int]:
        tok = self.tokens[i]
        if stop is None:
            stop = self._statement_end(i, limit)

        if tok.kind is TokenKind.DOC_COMMENT:
            return Node(NodeKind.COMMENT_STMT, tok.line, tok.text), stop
        if tok.kind is TokenKind.IDENT:
            if tok.text in ROUTINE_KEYWORDS and i + 1 < stop and self.tokens[i + 1].kind in _NAME_TOKENS:
                return self._parse_routine(i, stop), stop
            if tok.text in SECTION_KEYWORDS:
                return self._parse_section(i, stop), stop
            if tok.text == "when":
                return self._parse_when(i, limit, stop)
        return Node(NodeKind.OTHER, tok.line, tok.text), stop

    def _parse_when(self, i: int, limit: int, stop: int) -> tuple[Node, int]:
        tokens = self.tokens
        head = tokens[i]
        branches = [self._parse_branch(NodeKind.ELIF_BRANCH, i, stop)]
        k = stop
        while (
            k < limit
            and tokens[k].first_on_line
            and tokens[k].col == head.col
            and tokens[k].is_keyword("elif", "else")
        ):
            end = self._statement_end(k, limit)
            kind = NodeKind.ELSE if tokens[k].text == "else" else NodeKind.ELIF_BRANCH
            branches.append(self._parse_branch(kind, k, end))
            k = end
        return Node(NodeKind.WHEN_STMT, head.line, head.text, branches), k

    def _parse_branch(self, kind: NodeKind, i: int, stop: int) -> Node:
        head = self.tokens[i]
        colon = self._find(i + 1, stop, head.depth, TokenKind.PUNCT, ":")
        body = Node(NodeKind.STMT_LIST, head.line, children=self._parse_block(colon + 1, stop))
        if kind is NodeKind.ELSE:
            return Node(kind, head.line, head.text, [body])
        return Node(kind, head.line, head.text, [self._expr(i + 1, colon), body])

    # -- routines -----------------------------------------------------------

    def _parse_routine(self, i: int, stop: int) -> Node:
        tokens = self.tokens
        head = tokens[i]
        depth = head.depth

        name, p = self._parse_name(i + 1, stop)

        pattern = empty(head.line)
        if self._at_open(p, stop, "{"):
            close = self._closing(p, stop)
            pattern = self._expr(p, close + 1)
            p = close + 1

        generics = empty(head.line)
        if self._at_open(p, stop, "["):
            close = self._closing(p, stop)
            generics = Node(
                NodeKind.GENERIC_PARAMS,
                tokens[p].line,
                self._slice(p, close + 1),
                self._parse_ident_defs_list(p + 1, close, tokens[p].depth + 1),
            )
            p = close + 1

        param_groups: list[Node] = []
        params_text = ""
        if self._at_open(p, stop, "("):
            close = self._closing(p, stop)
            param_groups = self._parse_ident_defs_list(p + 1, close, tokens[p].depth + 1)
            params_text = self._slice(p, close + 1)
            p = close + 1

        return_type = empty(head.line)
        if p < stop and tokens[p].kind is TokenKind.PUNCT and tokens[p].text == ":":
            q = p + 1
            while q < stop and not (
                tokens[q].depth == depth
                and (tokens[q].is_op("=") or (tokens[q].kind is TokenKind.OPEN and tokens[q].text == "{."))
            ):
                q += 1
            return_type = self._expr(p + 1, q)
            p = q
        params = Node(NodeKind.FORMAL_PARAMS, head.line, params_text, [return_type, *param_groups])

        pragmas = empty(head.line)
        if self._at_open(p, stop, "{."):
            close = self._closing(p, stop)
            pragmas = self._pragma(p, close)
            p = close + 1

        body = empty(head.line)
        if p < stop and tokens[p].is_op("="):
            body = Node(NodeKind.OTHER, tokens[p].line, "=")

        return Node(
            ROUTINE_KEYWORDS[head.text],
            head.line,
            self._slice(i, p),
            [name, pattern, generics, params, pragmas, empty(head.line), body],
        )

    # -- sections -----------------------------------------------------------

    def _parse_section(self, i: int, stop: int) -> Node:
        head = self.tokens[i]
        kind = SECTION_KEYWORDS[head.text]
        start = i + 1
        members: list[Node] = []
        if start < stop and not self.tokens[start].first_on_line:
            members.append(self._parse_member(kind, start, stop))
        else:
            j = start
            while j < stop:
                end = self._statement_end(j, stop)
                members.append(self._parse_member(kind, j, end))
                j = end
        return Node(kind, head.line, head.text, members)

    def _parse_member(self, kind: NodeKind, start: int, end: int) -> Node:
        tokens = self.tokens
        tok = tokens[start]
        depth = tok.depth

        if tok.kind is TokenKind.DOC_COMMENT:
            return Node(NodeKind.COMMENT_STMT, tok.line, tok.text)

        if kind is NodeKind.TYPE_SECTION:
            name, p = self._parse_name(start, end, allow_pragma=True)
            generics = empty(tok.line)
            if self._at_open(p, end, "["):
                close = self._closing(p, end)
                generics = Node(
                    NodeKind.GENERIC_PARAMS,
                    tokens[p].line,
                    self._slice(p, close + 1),
                    self._parse_ident_defs_list(p + 1, close, tokens[p].depth + 1),
                )
                p = close + 1
            eq = self._find(p, end, depth, TokenKind.OPERATOR, "=")
            return Node(
                NodeKind.TYPE_DEF,
                tok.line,
                self._slice(start, end),
                [name, generics, self._expr(eq + 1, end)],
            )

        if tok.kind is TokenKind.OPEN and tok.text == "(":
            close = self._closing(start, end)
            names = [
                self._parse_name(s, e, allow_pragma=True)[0]
                for s, e in self._segments(start + 1, close, depth + 1, (",",))
            ]
            colon = self._find(close + 1, end, depth, TokenKind.PUNCT, ":")
            eq = self._find(close + 1, end, depth, TokenKind.OPERATOR, "=")
            return self._ident_defs(NodeKind.VAR_TUPLE, names or [empty(tok.line)], start, end, colon, eq)

        colon = self._find(start, end, depth, TokenKind.PUNCT, ":")
        eq = self._find(start, end, depth, TokenKind.OPERATOR, "=")
        names = [
            self._parse_name(s, e, allow_pragma=True)[0]
            for s, e in self._segments(start, min(colon, eq), depth, (",",))
        ]
        node_kind = NodeKind.CONST_DEF if kind is NodeKind.CONST_SECTION else NodeKind.IDENT_DEFS
        return self._ident_defs(node_kind, names or [empty(tok.line)], start, end, colon, eq)

    # -- shared pieces ------------------------------------------------------

    def _parse_name(self, p: int, stop: int, *, allow_pragma: bool = False) -> tuple[Node, int]:
        """Parse ``name``, ``name*``, ```op```, optionally followed by ``{.pragmas.}``."""
        tokens = self.tokens
        if p >= stop:
            return empty(), p
        tok = tokens[p]
        start = p

        if tok.kind is TokenKind.IDENT:
            node = ident(self._intern(tok.text), tok.line)
            p += 1
        elif tok.kind is TokenKind.ACCENT:
            q = p + 1
            parts: list[Node] = []
            while q < stop and tokens[q].kind is not TokenKind.ACCENT:
                parts.append(ident(self._intern(tokens[q].text), tokens[q].line))
                q += 1
            p = min(q + 1, stop)
            node = Node(NodeKind.ACC_QUOTED, tok.line, self._slice(start, p), parts)
        else:
            return empty(tok.line), p

        if p < stop and tokens[p].is_op("*"):
            node = Node(NodeKind.POSTFIX, tok.line, self._slice(start, p + 1), [ident("*", tok.line), node])
            p += 1

        if allow_pragma and self._at_open(p, stop, "{."):
            close = self._closing(p, stop)
            node = Node(
                NodeKind.PRAGMA_EXPR,
                tok.line,
                self._slice(start, close + 1),
                [node, self._pragma(p, close)],
            )
            p = close + 1

        return node, p

    def _parse_ident_defs_list(self, a: int, b: int, depth: int) -> list[Node]:
        """Group ``a, b: int = 0; c: string`` into IDENT_DEFS nodes."""
        groups: list[Node] = []
        pending: list[Node] = []
        group_start = a
        for s, e in self._segments(a, b, depth, (",", ";")):
            if not pending:
                group_start = s
            colon = self._find(s, e, depth, TokenKind.PUNCT, ":")
            eq = self._find(s, e, depth, TokenKind.OPERATOR, "=")
            pending.append(self._parse_name(s, min(colon, eq), allow_pragma=True)[0])
            if colon == e and eq == e:
                continue
            groups.append(self._ident_defs(NodeKind.IDENT_DEFS, pending, group_start, e, colon, eq))
            pending = []
        if pending:
            groups.append(
                Node(
                    NodeKind.IDENT_DEFS,
                    self.tokens[group_start].line,
                    self._slice(group_start, b),
                    [*pending, empty(), empty()],
                )
            )
        return groups

    def _ident_defs(
        self,
        kind: NodeKind,
        names: list[Node],
        start: int,
        end: int,
        colon: int,
        eq: int,
    ) -> Node:
        type_node = empty()
        if colon < end and colon < eq:
            type_node = self._expr(colon + 1, min(eq, end))
        default = self._expr(eq + 1, end) if eq < end else empty()
        return Node(kind, self.tokens[start].line, self._slice(start, end), [*names, type_node, default])

    def _pragma(self, open_idx: int, close_idx: int) -> Node:
        depth = self.tokens[open_idx].depth + 1
        items = [self._expr(s, e) for s, e in self._segments(open_idx + 1, close_idx, depth, (",",))]
        return Node(NodeKind.PRAGMA, self.tokens[open_idx].line, self._slice(open_idx, close_idx + 1), items)

    def _segments(self, a: int, b: int, depth: int, seps: tuple[str, ...]) -> list[tuple[int, int]]:
        """Split [a, b) at separators sitting at ``depth``; doc comments are trimmed."""
        tokens = self.tokens
        bounds: list[tuple[int, int]] = []
        s = a
        for j in range(a, b + 1):
            if j < b and not (tokens[j].depth == depth and tokens[j].kind is TokenKind.PUNCT and tokens[j].text in seps):
                continue
            e = j
            while s < e and tokens[s].kind is TokenKind.DOC_COMMENT:
                s += 1
            while e > s and tokens[e - 1].kind is TokenKind.DOC_COMMENT:
                e -= 1
            if e > s:
                bounds.append((s, e))
            s = j + 1
        return bounds

    def _find(self, a: int, b: int, depth: int, kind: TokenKind, text: str) -> int:
        """Index of the first ``text`` token at ``depth`` in [a, b), else b."""
        for j in range(a, b):
            tok = self.tokens[j]
            if tok.depth == depth and tok.kind is kind and tok.text == text:
                return j
        return b

    def _at_open(self, p: int, stop: int, text: str) -> bool:
        return p < stop and self.tokens[p].kind is TokenKind.OPEN and self.tokens[p].text == text

    def _closing(self, p: int, stop: int) -> int:
        match = self.tokens[p].match
        if match < 0 or match >= stop:
            return stop - 1
        return match

    def _expr(self, a: int, b: int) -> Node:
        if a >= b:
            return empty(self.tokens[a].line if a < len(self.tokens) else 0)
        return Node(NodeKind.EXPR, self.tokens[a].line, self._slice(a, b))

    def _slice(self, a: int, b: int) -> str:
        if a >= b:
            return ""
        return self.source[self.tokens[a].start : self.tokens[b - 1].end]

    def _intern(self, name: str) -> str:
        if self.context is None:
            return name
        return self.context.idents.get_ident(name)


def parse_source(source: str, context: ParseContext | None = None) -> Node:
    """Parse Nim source text into a STMT_LIST root.

    Raises:
        NimSyntaxError: When the source cannot be tokenized.
    """
    return NimParser(source, tokenize(source), context).parse()
