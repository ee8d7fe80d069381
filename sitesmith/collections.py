from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import Post


def sort_by_date(posts: Iterable[Post]) -> list[Post]:
    """Sort posts newest first by their canonical date string.

    The sort is stable, so posts sharing a date keep their relative order and
    sorting an already sorted list changes nothing.
    """
    return sorted(posts, key=lambda p: p.date, reverse=True)


class PostCollection(Sequence["Post"]):
    """Lightweight helper for working with lists of Posts in templates and code."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def __repr__(self) -> str:
        return f"PostCollection({self._posts!r})"

    def sorted(self) -> PostCollection:
        """Return a new collection ordered newest first."""
        return PostCollection(sort_by_date(self._posts))

    def latest(self, count: int = 5) -> PostCollection:
        return self.sorted()[:count]

    def by_author(self, author: str) -> PostCollection:
        return PostCollection(p for p in self._posts if p.author == author)

    def with_cover(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.cover_image)
