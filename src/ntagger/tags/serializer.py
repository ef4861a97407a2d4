"""Extended-format ctags serialization.

Output layout::

    !_TAG_FILE_FORMAT	2	/extended format/
    !_TAG_FILE_SORTED	1	/0=unsorted, 1=sorted, 2=foldcase/
    !_TAG_PROGRAM_NAME	ntagger	//
    !_TAG_PROGRAM_VERSION	0.1.0	//
    publicProc	src/foo.nim	12;"	kind:proc	line:12	signature:(x: int): int	language:Nim

The ex-command is a bare line number, terminated by the ``;"`` that marks
the start of the extended fields.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePath

from ntagger.config.constants import (
    PROGRAM_NAME,
    PROGRAM_VERSION,
    TAG_FILE_FORMAT,
    TAG_FILE_SORTED,
)
from ntagger.tags.models import Tag, encode_field

HEADER_LINES: tuple[str, ...] = (
    f"!_TAG_FILE_FORMAT\t{TAG_FILE_FORMAT}\t/extended format/\n",
    f"!_TAG_FILE_SORTED\t{TAG_FILE_SORTED}\t/0=unsorted, 1=sorted, 2=foldcase/\n",
    f"!_TAG_PROGRAM_NAME\t{PROGRAM_NAME}\t//\n",
    f"!_TAG_PROGRAM_VERSION\t{PROGRAM_VERSION}\t//\n",
)


def render_path(file: str, base_dir: Path | None) -> str:
    """Path relative to ``base_dir`` when it lies inside it, else unchanged."""
    if base_dir is None:
        return file
    try:
        return PurePath(file).relative_to(base_dir).as_posix()
    except ValueError:
        return file


def format_tag(tag: Tag, base_dir: Path | None, language_name: str) -> str:
    fields = [
        tag.name,
        render_path(tag.file, base_dir),
        f'{tag.line};"',
        f"kind:{tag.kind.ctags_name}",
        f"line:{tag.line}",
    ]
    if tag.signature:
        fields.append(f"signature:{tag.signature}")
    fields.append(f"language:{language_name}")
    return "\t".join(fields) + "\n"


def render_tags(sorted_tags: Iterable[Tag], base_dir: Path | None, language_name: str) -> str:
    """Header block followed by one record per tag, in the order given."""
    parts = list(HEADER_LINES)
    parts.extend(format_tag(tag, base_dir, language_name) for tag in sorted_tags)
    return "".join(parts)


def serialize_tags(sorted_tags: Iterable[Tag], base_dir: Path | None, language_name: str) -> bytes:
    """Render the tag file as UTF-8 bytes.

    File names that were not valid UTF-8 on disk are written back as their
    original bytes.
    """
    return encode_field(render_tags(sorted_tags, base_dir, language_name))
