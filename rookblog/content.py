"""Post ingestion for Rookblog.

This module discovers post source files, parses each into a validated record,
and assembles the sorted collections used by pages and feeds.

Records are re-derived from disk on every call; nothing is cached and nothing
is shared between calls. Listings never pay for Markdown conversion: only
``PostRepository.get_post_by_slug`` renders a body to HTML.

Key classes:
- PostSummary: Validated front matter plus reading time (listings).
- ParsedPost: PostSummary plus the raw Markdown body.
- Post: ParsedPost plus the rendered HTML (single post pages).
- PostFileLoader: Discovers source files in the content directory.
- PostParser: Parses and validates one source file.
- PostRepository: Collection assembly over loader and parser.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from .renderers import render_html
from .utils import calculate_reading_time, is_markdown, utc_midnight
from .validators import extract_frontmatter, require_date, require_tags, require_text


@dataclass(frozen=True)
class PostSummary:
    """A validated post without its body.

    Attributes:
        title: Post title.
        slug: Unique identifier used in URLs.
        date: Publication date as ``YYYY-MM-DD``.
        description: Short description for cards, feeds and metadata.
        tags: Tags in front matter order.
        cover_image: Path or URL of the cover image.
        reading_time_minutes: Estimated reading time, at least 1.
    """

    title: str
    slug: str
    date: str
    description: str
    tags: tuple[str, ...]
    cover_image: str
    reading_time_minutes: int

    @property
    def url(self) -> str:
        return f"/posts/{self.slug}"

    @property
    def published(self) -> datetime:
        """Publication instant (UTC midnight of ``date``)."""
        return utc_midnight(self.date)

    def to_summary(self) -> PostSummary:
        fields = {name: getattr(self, name) for name in PostSummary.__dataclass_fields__}
        return PostSummary(**fields)


@dataclass(frozen=True)
class ParsedPost(PostSummary):
    """A validated post with its raw Markdown body."""

    content: str


@dataclass(frozen=True)
class Post(ParsedPost):
    """A single post ready for its page, with the body rendered to HTML."""

    html: str


class PostFileLoader:
    """Discovers post source files.

    Only regular files ending in ``.md`` directly inside the content
    directory are considered; subdirectories are not searched.

    Attributes:
        content_dir: Directory holding post sources.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def list_source_files(self) -> list[str]:
        """List post source file names.

        Returns:
            Sorted file names, or an empty list when the content directory
            does not exist yet.
        """
        if not self.content_dir.is_dir():
            return []
        return sorted(
            path.name
            for path in self.content_dir.iterdir()
            if path.is_file() and is_markdown(path)
        )


class PostParser:
    """Parses a post source file into a validated ParsedPost.

    Attributes:
        content_dir: Directory holding post sources.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def parse_record(self, file_name: str) -> ParsedPost:
        """Read, split and validate one post file.

        Args:
            file_name: Name of the file inside the content directory.

        Returns:
            ParsedPost with trimmed fields and computed reading time.

        Raises:
            ValidationError: If any front matter field is missing or invalid.
            OSError: If the file cannot be read.
        """
        source = (self.content_dir / file_name).read_text(encoding="utf-8-sig")
        data, body = extract_frontmatter(source, file_name)
        return ParsedPost(
            title=require_text(data.get("title"), "title", file_name),
            slug=require_text(data.get("slug"), "slug", file_name),
            date=require_date(data.get("date"), file_name),
            description=require_text(data.get("description"), "description", file_name),
            tags=require_tags(data.get("tags"), file_name),
            cover_image=require_text(data.get("coverImage"), "coverImage", file_name),
            reading_time_minutes=calculate_reading_time(body),
            content=body,
        )


class PostRepository:
    """Assembles post collections from the content directory.

    Every call re-reads the directory. A single invalid post aborts the
    whole call with its ValidationError.

    Attributes:
        content_dir: Directory holding post sources.
    """

    def __init__(
        self,
        content_dir: Path,
        loader: PostFileLoader | None = None,
        parser: PostParser | None = None,
    ):
        self.content_dir = content_dir
        self._loader = loader or PostFileLoader(content_dir)
        self._parser = parser or PostParser(content_dir)

    def _parse_all(self) -> list[ParsedPost]:
        return [
            self._parser.parse_record(file_name)
            for file_name in self._loader.list_source_files()
        ]

    def get_all_posts(self) -> list[PostSummary]:
        """Return every post, newest first.

        Posts sharing a date keep their discovery order.
        """
        summaries = [post.to_summary() for post in self._parse_all()]
        return sorted(summaries, key=lambda post: post.published, reverse=True)

    def get_all_slugs(self) -> list[str]:
        return [post.slug for post in self.get_all_posts()]

    async def get_post_by_slug(self, slug: str) -> Post | None:
        """Find a post by exact slug and render its body.

        Args:
            slug: Case-sensitive slug to look up.

        Returns:
            The Post with its HTML, or None if no post has this slug.
        """
        parsed = next((post for post in self._parse_all() if post.slug == slug), None)
        if parsed is None:
            return None
        html = await render_html(parsed.content)
        return Post(**asdict(parsed), html=html)


def list_source_files(content_dir: Path) -> list[str]:
    return PostFileLoader(content_dir).list_source_files()


def parse_record(content_dir: Path, file_name: str) -> ParsedPost:
    return PostParser(content_dir).parse_record(file_name)


def get_all_posts(content_dir: Path) -> list[PostSummary]:
    return PostRepository(content_dir).get_all_posts()


def get_all_slugs(content_dir: Path) -> list[str]:
    return PostRepository(content_dir).get_all_slugs()


async def get_post_by_slug(content_dir: Path, slug: str) -> Post | None:
    return await PostRepository(content_dir).get_post_by_slug(slug)
