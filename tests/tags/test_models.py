"""Tests for tags/models.py module."""

from __future__ import annotations

import pytest

from ntagger.parsing.ast import NodeKind
from ntagger.tags.models import Tag, TagKind


class TestTagKind:
    """Tests for TagKind."""

    def test_ctags_names(self) -> None:
        assert [kind.ctags_name for kind in TagKind] == [
            "type",
            "var",
            "let",
            "const",
            "proc",
            "func",
            "method",
            "iterator",
            "converter",
            "macro",
            "template",
        ]

    @pytest.mark.parametrize(
        ("section", "expected"),
        [
            (NodeKind.TYPE_SECTION, TagKind.TYPE),
            (NodeKind.VAR_SECTION, TagKind.VAR),
            (NodeKind.LET_SECTION, TagKind.LET),
            (NodeKind.CONST_SECTION, TagKind.CONST),
        ],
    )
    def test_for_section(self, section: NodeKind, expected: TagKind) -> None:
        assert TagKind.for_section(section) is expected

    def test_for_section_rejects_other_kinds(self) -> None:
        with pytest.raises(ValueError, match="Not a declaration section"):
            TagKind.for_section(NodeKind.PROC_DEF)

    def test_for_routine(self) -> None:
        assert TagKind.for_routine(NodeKind.ITERATOR_DEF) is TagKind.ITERATOR

    def test_is_routine(self) -> None:
        assert not TagKind.CONST.is_routine
        assert TagKind.PROC.is_routine
        assert TagKind.TEMPLATE.is_routine


class TestTag:
    """Tests for Tag."""

    def test_defaults_to_no_signature(self) -> None:
        assert Tag("x", "a.nim", 1, TagKind.VAR).signature == ""

    def test_rejects_empty_name(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            Tag("", "a.nim", 1, TagKind.VAR)

    def test_rejects_negative_line(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            Tag("x", "a.nim", -1, TagKind.VAR)

    def test_create_discards_empty_name(self) -> None:
        assert Tag.create("", "a.nim", 1, TagKind.PROC) is None

    def test_create(self) -> None:
        tag = Tag.create("p", "a.nim", 4, TagKind.PROC, "()")
        assert tag == Tag("p", "a.nim", 4, TagKind.PROC, "()")

    def test_is_immutable(self) -> None:
        tag = Tag("x", "a.nim", 1, TagKind.VAR)
        with pytest.raises(AttributeError):
            tag.name = "y"  # type: ignore[misc]

    def test_sort_key(self) -> None:
        assert Tag("x", "a.nim", 7, TagKind.VAR).sort_key() == (b"x", b"a.nim", 7)
