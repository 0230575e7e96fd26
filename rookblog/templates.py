"""Template rendering engine for Rookblog.

This module uses Jinja2 to render the blog pages: the home feed, a single
post and the not-found page. Bundled layouts live in the ``layouts``
directory next to this module; a project can override any of them by placing
a file with the same name in its own templates directory.

Key class:
- TemplateEngine: Renders pages from posts and site configuration.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .collections import PostCollection
from .content import Post, PostSummary
from .html_utils import build_query, join_root_url
from .metadata import blog_posting_schema, home_metadata, json_ld, post_metadata
from .renderers import pygments_css
from .utils import format_date

LAYOUTS_DIR = Path(__file__).parent / "layouts"


def share_links(post: PostSummary, config: dict[str, Any]) -> list[tuple[str, str]]:
    """Return (label, href) pairs for the post share row."""
    url = quote(join_root_url(config["site_url"], post.url), safe="")
    text = quote(post.title, safe="")
    return [
        ("X", f"https://twitter.com/intent/tweet?text={text}&url={url}"),
        ("Facebook", f"https://www.facebook.com/sharer/sharer.php?u={url}"),
        ("LinkedIn", f"https://www.linkedin.com/sharing/share-offsite/?url={url}"),
    ]


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        config: Site configuration.
        env: Jinja2 environment.
    """

    def __init__(self, config: dict[str, Any], templates_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            config: Site configuration (site_name, site_url, author, ...).
            templates_dir: Optional directory with layout overrides.
        """
        self.config = config
        search_path = [LAYOUTS_DIR]
        if templates_dir is not None and templates_dir.is_dir():
            search_path.insert(0, templates_dir)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["config"] = self.config
        self.env.globals["author"] = self.config["author"]
        self.env.globals["format_date"] = format_date
        self.env.globals["build_query"] = build_query
        self.env.globals["pygments_css"] = Markup(pygments_css())

    def render_home(
        self, posts: Sequence[PostSummary], query: str = "", tag: str = ""
    ) -> str:
        """Render the home feed.

        Args:
            posts: All posts, newest first.
            query: Search text from the ``q`` parameter.
            tag: Tag filter from the ``tag`` parameter.

        Returns:
            Rendered HTML string.
        """
        collection = PostCollection(posts)
        query = query.strip()
        tag = tag.strip()
        has_filters = bool(query or tag)
        feed = collection.filter(query, tag) if has_filters else collection.latest()
        context = {
            "meta": home_metadata(collection, self.config),
            "posts": feed,
            "latest_post": collection[0] if collection else None,
            "categories": collection.categories(),
            "query": query,
            "active_tag": tag,
            "active_tag_lower": tag.lower(),
            "has_filters": has_filters,
        }
        return self.env.get_template("home.html").render(**context)

    def render_post(self, post: Post) -> str:
        """Render a single post page.

        Args:
            post: Post with rendered HTML body.

        Returns:
            Rendered HTML string.
        """
        context = {
            "meta": post_metadata(post, self.config),
            "post": post,
            "post_html": Markup(post.html),
            "schema": Markup(json_ld(blog_posting_schema(post, self.config))),
            "share_links": share_links(post, self.config),
        }
        return self.env.get_template("post.html").render(**context)

    def render_not_found(self) -> str:
        return self.env.get_template("404.html").render(
            meta=post_metadata(None, self.config)
        )
