"""Tag accumulation and canonical ordering."""

from __future__ import annotations

from collections.abc import Iterable

from ntagger.tags.models import Tag


def sort_tags(tags: Iterable[Tag]) -> list[Tag]:
    """Order by name, then file, then line.

    Names and files compare as the bytes written to the tag file, so the
    result satisfies the ``!_TAG_FILE_SORTED 1`` header. ``sorted`` is stable.
    """
    return sorted(tags, key=Tag.sort_key)


class TagRegistry:
    """Append-only collection of tags from every scanned file."""

    def __init__(self) -> None:
        self._tags: list[Tag] = []
        self._files = 0

    def extend(self, tags: Iterable[Tag]) -> None:
        """Add all tags of one file."""
        self._tags.extend(tags)
        self._files += 1

    @property
    def file_count(self) -> int:
        return self._files

    def sorted(self) -> list[Tag]:
        return sort_tags(self._tags)

    def __len__(self) -> int:
        return len(self._tags)
