"""Page metadata for Rookblog.

Builds the title, description, canonical path and Open Graph values for each
page, plus the BlogPosting structured data embedded in post pages. The
templates turn these into ``<meta>``/``<link>`` tags.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .content import Post, PostSummary
from .html_utils import join_root_url
from .utils import iso_timestamp


@dataclass
class PageMetadata:
    """Head metadata for one rendered page.

    Attributes:
        title: Document title, already combined with the site name.
        description: Meta description.
        canonical: Canonical path (relative to the site URL).
        og_type: Open Graph type ("website" or "article").
        og_image: Optional Open Graph image URL.
        og_image_alt: Alt text for the Open Graph image.
        published_time: ISO timestamp for articles.
        tags: Article tags.
    """

    title: str
    description: str
    canonical: str | None = None
    og_type: str = "website"
    og_image: str | None = None
    og_image_alt: str | None = None
    published_time: str | None = None
    tags: Sequence[str] = field(default_factory=tuple)


def page_title(title: str | None, config: dict[str, Any]) -> str:
    site_name = config["site_name"]
    return f"{title} | {site_name}" if title else site_name


def home_metadata(posts: Sequence[PostSummary], config: dict[str, Any]) -> PageMetadata:
    """Metadata for the home page; the newest cover doubles as the share image."""
    first = posts[0] if posts else None
    return PageMetadata(
        title=page_title(None, config),
        description=config["site_description"],
        canonical="/",
        og_image=first.cover_image if first else None,
        og_image_alt=config["site_name"] if first else None,
    )


def post_metadata(post: PostSummary | None, config: dict[str, Any]) -> PageMetadata:
    """Metadata for a post page, or the not-found page when post is None."""
    if post is None:
        return PageMetadata(
            title=page_title("Post Not Found", config),
            description="The requested post could not be found.",
        )
    return PageMetadata(
        title=page_title(post.title, config),
        description=post.description,
        canonical=post.url,
        og_type="article",
        og_image=post.cover_image,
        og_image_alt=f"Cover image for {post.title}",
        published_time=iso_timestamp(post.published),
        tags=post.tags,
    )


def blog_posting_schema(post: Post, config: dict[str, Any]) -> dict[str, Any]:
    """Schema.org BlogPosting structured data for a post."""
    site_url = config["site_url"]
    published = iso_timestamp(post.published)
    return {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.title,
        "description": post.description,
        "datePublished": published,
        "dateModified": published,
        "url": join_root_url(site_url, post.url),
        "image": join_root_url(site_url, post.cover_image),
        "author": {"@type": "Person", "name": config["author"]["name"]},
        "keywords": ", ".join(post.tags),
    }


def json_ld(data: dict[str, Any]) -> str:
    """Serialize structured data for a ``<script type="application/ld+json">`` block.

    ``<`` is escaped so post text can never close the script element.
    """
    return json.dumps(data, ensure_ascii=False).replace("<", "\\u003c")
