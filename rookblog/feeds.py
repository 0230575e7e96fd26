"""Feed generation for Rookblog.

This module provides functionality for generating the machine-readable
documents served next to the blog pages (rss.xml, sitemap.xml, robots.txt)
from post summaries. Feed generation is separate from build orchestration so
the static export and the development server share it.

Classes:
    FeedGenerator: Base class for feed generators.
    RSSGenerator: Generates the RSS 2.0 feed.
    SitemapGenerator: Generates sitemap.xml.
    RobotsGenerator: Generates robots.txt.
    FeedRegistry: Registry for managing feed generators.

Functions:
    create_default_feed_registry: Create a registry with default generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .content import PostSummary
from .html_utils import escape_xml, join_root_url
from .utils import http_date, iso_timestamp

RSS_MAX_ITEMS = 20
FEED_CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate=86400"


class FeedGenerator(ABC):
    """Abstract base class for feed generators.

    Subclasses implement one document format each and declare the file
    name and content type it is served under.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename, such as 'sitemap.xml'."""
        ...

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Return the HTTP content type for the document."""
        ...

    @abstractmethod
    def generate(
        self,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
        now: datetime | None = None,
    ) -> str:
        """Generate the document.

        Args:
            posts: Post summaries, newest first.
            config: Site configuration with site_url, site_name and site_description.
            now: Build time; defaults to the current UTC time.

        Returns:
            Document text.
        """
        ...

    def write(
        self,
        output_dir: Path,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
    ) -> Path:
        """Generate and write the document to the output directory.

        Returns:
            Path of the written file.
        """
        output_path = output_dir / self.filename
        output_path.write_text(self.generate(posts, config), encoding="utf-8")
        return output_path


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed of the most recent posts."""

    def __init__(self, max_items: int = RSS_MAX_ITEMS):
        self.max_items = max_items

    @property
    def filename(self) -> str:
        return "rss.xml"

    @property
    def content_type(self) -> str:
        return "application/rss+xml; charset=utf-8"

    def generate(
        self,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
        now: datetime | None = None,
    ) -> str:
        site_url = config["site_url"]
        items = []
        for post in list(posts)[: self.max_items]:
            link = join_root_url(site_url, post.url)
            items.append(
                "\n".join(
                    [
                        "<item>",
                        f"  <title>{escape_xml(post.title)}</title>",
                        f"  <link>{link}</link>",
                        f"  <guid>{link}</guid>",
                        f"  <description>{escape_xml(post.description)}</description>",
                        f"  <pubDate>{http_date(post.published)}</pubDate>",
                        "</item>",
                    ]
                )
            )

        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "<channel>",
            f"  <title>{escape_xml(config['site_name'])}</title>",
            f"  <link>{site_url}</link>",
            f"  <description>{escape_xml(config['site_description'])}</description>",
            f"  <lastBuildDate>{http_date(_now(now))}</lastBuildDate>",
        ]
        rss.extend(items)
        rss.extend(["</channel>", "</rss>"])
        return "\n".join(rss)


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml listing the home page and every post."""

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    @property
    def content_type(self) -> str:
        return "application/xml; charset=utf-8"

    def generate(
        self,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
        now: datetime | None = None,
    ) -> str:
        site_url = config["site_url"]
        entries = [(join_root_url(site_url, "/"), iso_timestamp(_now(now)))]
        entries.extend(
            (join_root_url(site_url, post.url), iso_timestamp(post.published))
            for post in posts
        )
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for loc, lastmod in entries:
            lines.extend(
                [
                    "  <url>",
                    f"    <loc>{escape_xml(loc)}</loc>",
                    f"    <lastmod>{lastmod}</lastmod>",
                    "  </url>",
                ]
            )
        lines.append("</urlset>")
        return "\n".join(lines)


class RobotsGenerator(FeedGenerator):
    """Generates robots.txt allowing all crawlers and pointing at the sitemap."""

    @property
    def filename(self) -> str:
        return "robots.txt"

    @property
    def content_type(self) -> str:
        return "text/plain; charset=utf-8"

    def generate(
        self,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
        now: datetime | None = None,
    ) -> str:
        sitemap = join_root_url(config["site_url"], "/sitemap.xml")
        return f"User-agent: *\nAllow: /\n\nSitemap: {sitemap}\n"


class FeedRegistry:
    """Registry for managing feed generators.

    Attributes:
        _generators: Registered feed generators keyed by file name.
    """

    def __init__(self) -> None:
        self._generators: dict[str, FeedGenerator] = {}

    def register(self, generator: FeedGenerator) -> None:
        self._generators[generator.filename] = generator

    def get(self, filename: str) -> FeedGenerator | None:
        """Look up the generator serving a file name, e.g. 'rss.xml'."""
        return self._generators.get(filename)

    def generate_all(
        self,
        output_dir: Path,
        posts: Sequence[PostSummary],
        config: dict[str, Any],
    ) -> list[str]:
        """Write every registered feed.

        Returns:
            List of filenames that were generated.
        """
        generated = []
        for generator in self._generators.values():
            generator.write(output_dir, posts, config)
            generated.append(generator.filename)
        return generated


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with RSS, sitemap and robots generators."""
    registry = FeedRegistry()
    registry.register(RSSGenerator())
    registry.register(SitemapGenerator())
    registry.register(RobotsGenerator())
    return registry
