from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from .content import PostSummary

FEATURED_COUNT = 6


@dataclass(frozen=True)
class Category:
    name: str
    count: int


class PostCollection(Sequence[PostSummary]):
    """Lightweight helper for working with lists of posts in templates and code.

    The collection keeps the order it was given; ``get_all_posts`` already
    returns posts newest first.
    """

    def __init__(self, posts: Iterable[PostSummary]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[PostSummary]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def with_tag(self, tag: str) -> PostCollection:
        """Posts carrying the tag, compared case-insensitively."""
        wanted = tag.strip().lower()
        return PostCollection(
            p for p in self._posts if any(t.lower() == wanted for t in p.tags)
        )

    def search(self, query: str) -> PostCollection:
        """Posts whose title, description or tags contain the query."""
        needle = query.strip().lower()
        if not needle:
            return PostCollection(self._posts)
        return PostCollection(
            p
            for p in self._posts
            if needle in " ".join([p.title, p.description, *p.tags]).lower()
        )

    def filter(self, query: str = "", tag: str = "") -> PostCollection:
        """Apply the home page tag filter, then the search query."""
        posts = self.with_tag(tag) if tag.strip() else self
        return posts.search(query)

    def latest(self, count: int = FEATURED_COUNT) -> PostCollection:
        return PostCollection(self._posts[:count])

    def categories(self) -> list[Category]:
        """Count posts per tag, most used first, then alphabetically."""
        counts: dict[str, int] = {}
        for post in self._posts:
            for tag in post.tags:
                counts[tag] = counts.get(tag, 0) + 1
        categories = [Category(name, count) for name, count in counts.items()]
        return sorted(categories, key=lambda c: (-c.count, c.name.lower(), c.name))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
