"""Static export for Rookblog.

This module loads the project configuration, parses every post, renders all
pages and feeds, and writes the static site into the output directory.

Key functions:
- build_site: Build the entire static site.
- load_config: Load site configuration from rookblog.yaml.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError

from .content import Post, PostRepository, PostSummary
from .feeds import create_default_feed_registry
from .templates import TemplateEngine
from .utils import copy_tree, ensure_clean_dir

CONFIG_FILENAME = "rookblog.yaml"
SITE_URL_ENV = "ROOKBLOG_SITE_URL"


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": "content/posts",
    "output_dir": "output",
    "public_dir": "public",
    "templates_dir": "templates",
    "port": 3000,
    "site_name": "blog.rook.works",
    "site_description": "Posts from blog.rook.works",
    "site_url": "https://blog.rook.works",
    "author": {
        "name": "Jacob Herrmann",
        "role": "Primary Contributor",
        "bio": "Economic systems, tools, and working notes from the craft edge.",
        "avatar": "/images/authors/jacob-herrmann.png",
    },
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        posts: Summaries of every post, newest first.
        output_dir: Directory where the site was built.
        feeds: File names of the generated feeds.
    """

    posts: list[PostSummary]
    output_dir: Path
    feeds: list[str]


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from rookblog.yaml.

    Values from the file are merged over DEFAULT_CONFIG (the ``author``
    mapping key by key). ``ROOKBLOG_SITE_URL`` overrides ``site_url``.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    config["author"] = dict(DEFAULT_CONFIG["author"])
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            author = loaded.pop("author", None)
            config.update(loaded)
            if isinstance(author, dict):
                config["author"].update(author)
    env_url = os.environ.get(SITE_URL_ENV)
    if env_url:
        config["site_url"] = env_url
    config["site_url"] = str(config["site_url"]).rstrip("/")
    return config


def resolve_dir(project_root: Path, config: dict[str, Any], key: str) -> Path:
    """Resolve a configured directory relative to the project root."""
    return project_root / str(config[key])


def build_site(
    project_root: Path,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        output_dir_override: Optional path to write the build output instead
            of the configured output_dir.

    Returns:
        BuildResult with the posts, output directory and generated feeds.

    Raises:
        ValidationError: If any post is invalid; nothing is rendered.
        BuildError: If a page fails to render.
    """
    config = load_config(project_root)
    output_dir = output_dir_override or resolve_dir(project_root, config, "output_dir")
    content_dir = resolve_dir(project_root, config, "content_dir")
    repository = PostRepository(content_dir)
    posts = repository.get_all_posts()
    for summary in posts:
        _check_slug_path(summary.slug)

    engine = TemplateEngine(config, resolve_dir(project_root, config, "templates_dir"))
    ensure_clean_dir(output_dir)
    copy_tree(resolve_dir(project_root, config, "public_dir"), output_dir)

    _write_page(output_dir / "index.html", _render("home.html", engine.render_home, posts))
    _write_page(output_dir / "404.html", _render("404.html", engine.render_not_found))
    for post in asyncio.run(_load_full_posts(repository, posts)):
        target = output_dir / "posts" / post.slug / "index.html"
        _write_page(target, _render("post.html", engine.render_post, post))

    feeds = create_default_feed_registry().generate_all(output_dir, posts, config)
    return BuildResult(posts=posts, output_dir=output_dir, feeds=feeds)


def _check_slug_path(slug: str) -> None:
    """Ensure a slug maps to a single directory under ``posts/``.

    Raises:
        BuildError: If the slug contains a path separator or is ``.``/``..``.
    """
    if "/" in slug or "\\" in slug or slug in (".", ".."):
        raise BuildError(
            Path("posts") / slug.replace("/", "_").replace("\\", "_"),
            f"Slug {slug!r} cannot be used as an output directory name",
        )


def _render(template_name: str, render: Callable[..., str], *args: Any) -> str:
    """Call a TemplateEngine render method, wrapping template failures in BuildError."""
    try:
        return render(*args)
    except TemplateError as exc:
        raise BuildError(Path(template_name), _format_error_message(exc), exc) from exc


async def _load_full_posts(
    repository: PostRepository, posts: list[PostSummary]
) -> list[Post]:
    full_posts = []
    for summary in posts:
        post = await repository.get_post_by_slug(summary.slug)
        if post is not None:
            full_posts.append(post)
    return full_posts


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateSyntaxError":
        return f"Template syntax error on line {getattr(exc, 'lineno', '?')}: {error_msg}"

    return f"{error_type}: {error_msg}"


def _write_page(target: Path, rendered: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(rendered)
