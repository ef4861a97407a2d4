"""Tests for tags/serializer.py module."""

from __future__ import annotations

from pathlib import Path

from ntagger.tags.models import Tag, TagKind
from ntagger.tags.serializer import HEADER_LINES, format_tag, render_path, render_tags, serialize_tags


class TestHeader:
    """Header block."""

    def test_four_fixed_lines(self) -> None:
        assert HEADER_LINES == (
            "!_TAG_FILE_FORMAT\t2\t/extended format/\n",
            "!_TAG_FILE_SORTED\t1\t/0=unsorted, 1=sorted, 2=foldcase/\n",
            "!_TAG_PROGRAM_NAME\tntagger\t//\n",
            "!_TAG_PROGRAM_VERSION\t0.1.0\t//\n",
        )

    def test_emitted_with_no_tags(self) -> None:
        assert render_tags([], None, "Nim") == "".join(HEADER_LINES)


class TestRenderPath:
    """Tests for render_path."""

    def test_inside_base(self) -> None:
        assert render_path("/proj/src/a.nim", Path("/proj")) == "src/a.nim"

    def test_outside_base_unchanged(self) -> None:
        assert render_path("/elsewhere/a.nim", Path("/proj")) == "/elsewhere/a.nim"

    def test_no_base(self) -> None:
        assert render_path("/proj/a.nim", None) == "/proj/a.nim"


class TestFormatTag:
    """Tests for format_tag."""

    def test_routine_record(self) -> None:
        tag = Tag("publicProc", "/proj/src/foo.nim", 12, TagKind.PROC, "(x: int): int")
        line = format_tag(tag, Path("/proj"), "Nim")
        assert line == (
            'publicProc\tsrc/foo.nim\t12;"\tkind:proc\tline:12\tsignature:(x: int): int\tlanguage:Nim\n'
        )

    def test_no_signature_field_when_empty(self) -> None:
        tag = Tag("Foo", "/proj/foo.nim", 3, TagKind.TYPE)
        line = format_tag(tag, Path("/proj"), "Nim")
        assert line == 'Foo\tfoo.nim\t3;"\tkind:type\tline:3\tlanguage:Nim\n'
        assert "signature:" not in line

    def test_language_name(self) -> None:
        tag = Tag("x", "a.nim", 1, TagKind.VAR)
        assert format_tag(tag, None, "Nimrod").endswith("\tlanguage:Nimrod\n")


class TestSerializeTags:
    """Tests for serialize_tags."""

    def test_utf8_bytes_in_given_order(self) -> None:
        tags = [
            Tag("größe", "/p/a.nim", 1, TagKind.VAR),
            Tag("zeta", "/p/a.nim", 2, TagKind.VAR),
        ]
        data = serialize_tags(tags, Path("/p"), "Nim")
        assert isinstance(data, bytes)
        lines = data.decode("utf-8").splitlines()
        assert len(lines) == 6
        assert lines[4].startswith("größe\ta.nim\t")
        assert lines[5].startswith("zeta\t")
        assert data.endswith(b"\n")

    def test_repeatable(self) -> None:
        tags = [Tag("a", "/p/a.nim", 1, TagKind.PROC, "()")]
        assert serialize_tags(tags, Path("/p"), "Nim") == serialize_tags(tags, Path("/p"), "Nim")

    def test_undecodable_file_name_written_as_original_bytes(self) -> None:
        # os.walk hands back b"caf\xe9.nim" as "caf\udce9.nim" on POSIX
        tags = [Tag("cafe", "/p/caf\udce9.nim", 1, TagKind.PROC)]
        data = serialize_tags(tags, Path("/p"), "Nim")
        assert b"cafe\tcaf\xe9.nim\t1;\"" in data
