"""Tests for tags/registry.py module."""

from __future__ import annotations

from ntagger.tags.models import Tag, TagKind
from ntagger.tags.registry import TagRegistry, sort_tags


def _tag(name: str, file: str = "a.nim", line: int = 1) -> Tag:
    return Tag(name, file, line, TagKind.PROC)


class TestSortTags:
    """Tests for sort_tags."""

    def test_orders_by_name_file_line(self) -> None:
        tags = [
            _tag("b", "a.nim", 1),
            _tag("a", "b.nim", 1),
            _tag("a", "a.nim", 9),
            _tag("a", "a.nim", 2),
        ]
        assert [(t.name, t.file, t.line) for t in sort_tags(tags)] == [
            ("a", "a.nim", 2),
            ("a", "a.nim", 9),
            ("a", "b.nim", 1),
            ("b", "a.nim", 1),
        ]

    def test_byte_order_not_case_folded(self) -> None:
        """Uppercase sorts before lowercase, as in a byte comparison."""
        names = [t.name for t in sort_tags([_tag("apple"), _tag("Zebra"), _tag("_under")])]
        assert names == ["Zebra", "_under", "apple"]

    def test_matches_utf8_byte_order(self) -> None:
        names = ["é", "z", "ä", "Ω", "a"]
        result = [t.name for t in sort_tags(_tag(n) for n in names)]
        assert result == sorted(names, key=lambda n: n.encode("utf-8"))

    def test_undecodable_file_names_sort_by_disk_bytes(self) -> None:
        """b"a\\xff.nim" is written after "a\\ue000.nim" (EE 80 80), although its code point is lower."""
        raw = _tag("x", file="a\udcff.nim")
        private_use = _tag("x", file="a\ue000.nim")
        assert sort_tags([raw, private_use]) == [private_use, raw]

    def test_line_compared_numerically(self) -> None:
        lines = [t.line for t in sort_tags([_tag("x", line=10), _tag("x", line=9)])]
        assert lines == [9, 10]

    def test_stable_for_equal_keys(self) -> None:
        first = Tag("x", "a.nim", 1, TagKind.VAR)
        second = Tag("x", "a.nim", 1, TagKind.CONST)
        assert sort_tags([first, second]) == [first, second]

    def test_empty(self) -> None:
        assert sort_tags([]) == []


class TestTagRegistry:
    """Tests for TagRegistry."""

    def test_extend_collects_all(self) -> None:
        registry = TagRegistry()
        registry.extend([_tag("one")])
        registry.extend([_tag("two"), _tag("three")])
        assert len(registry) == 3
        assert [t.name for t in registry.sorted()] == ["one", "three", "two"]

    def test_extend_counts_files(self) -> None:
        registry = TagRegistry()
        registry.extend([_tag("a")])
        registry.extend([])
        assert registry.file_count == 2

    def test_sorted_does_not_mutate(self) -> None:
        registry = TagRegistry()
        registry.extend([_tag("b"), _tag("a")])
        snapshot = registry.sorted()
        assert [t.name for t in snapshot] == ["a", "b"]
        snapshot.clear()
        assert len(registry.sorted()) == 2
