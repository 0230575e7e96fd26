"""Command-line interface for Rookblog.

This module defines the CLI commands using Click framework.

Commands:
- build: Build the static site into the output directory.
- serve: Run the development server with live reload.
- check: Validate every post and list them.
- new: Create a new post interactively.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .build import load_config, resolve_dir
from .content import PostRepository
from .utils import format_date, slugify
from .validators import ValidationError


@click.group()
@click.version_option(version=__version__, prog_name="rookblog")
def cli():
    """Rookblog static blog."""


def _fail_invalid_post(exc: ValidationError) -> None:
    click.echo(click.style("Invalid post:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {exc.file_name}", fg="yellow"), err=True)
    click.echo(click.style(f"  Field: {exc.field}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
    raise SystemExit(1)


@cli.command()
def build():
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(project_root)
    except ValidationError as exc:
        _fail_invalid_post(exc)
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  Template: {exc.source_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.posts)} posts into {result.output_dir}")


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the dev server (overrides rookblog.yaml)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides rookblog.yaml ws_port)",
)
def serve(port: int | None, ws_port: int | None):
    """Run dev server with live reload."""
    project_root = Path.cwd()
    from .server import DevServer

    server = DevServer(project_root, http_port=port, ws_port=ws_port)
    server.start()


@cli.command()
def check():
    """Validate every post and list them newest first."""
    project_root = Path.cwd()
    config = load_config(project_root)
    repository = PostRepository(resolve_dir(project_root, config, "content_dir"))
    try:
        posts = repository.get_all_posts()
    except ValidationError as exc:
        _fail_invalid_post(exc)
    for post in posts:
        click.echo(
            f"{post.date}  {post.slug}  ({post.reading_time_minutes} min read)  {post.title}"
        )
    click.echo(f"{len(posts)} valid posts")


@cli.command()
def new():
    """Create a new post interactively."""
    project_root = Path.cwd()
    config = load_config(project_root)
    content_dir = resolve_dir(project_root, config, "content_dir")

    title = _ask(
        questionary.text(
            "Title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        )
    ).strip()
    slug = _ask(
        questionary.text(
            "Slug:",
            default=slugify(title),
            validate=lambda x: len(slugify(x)) > 0 or "Slug cannot be empty",
            style=_questionary_style(),
        )
    )
    slug = slugify(slug)
    description = _ask(
        questionary.text(
            "Description:",
            validate=lambda x: len(x.strip()) > 0 or "Description cannot be empty",
            style=_questionary_style(),
        )
    ).strip()
    tags_answer = _ask(
        questionary.text(
            "Tags (comma separated):",
            validate=lambda x: len(_split_tags(x)) > 0 or "Add at least one tag",
            style=_questionary_style(),
        )
    )
    cover_image = _ask(
        questionary.text(
            "Cover image:",
            default=f"/images/posts/{slug}.png",
            validate=lambda x: len(x.strip()) > 0 or "Cover image cannot be empty",
            style=_questionary_style(),
        )
    ).strip()

    target_path = content_dir / f"{slug}.md"
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )
    try:
        existing = PostRepository(content_dir).get_all_slugs()
    except ValidationError as exc:
        _fail_invalid_post(exc)
    if slug in existing:
        raise click.ClickException(f"A post with slug '{slug}' already exists")

    today = date.today()
    content_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        render_post_source(title, slug, today, description, _split_tags(tags_answer), cover_image),
        encoding="utf-8",
    )
    click.echo(
        f"Created {target_path.relative_to(project_root)} dated {format_date(today.isoformat())}"
    )


def render_post_source(
    title: str,
    slug: str,
    published: date,
    description: str,
    tags: list[str],
    cover_image: str,
) -> str:
    """Return the text of a new post file: front matter and a heading."""
    frontmatter = {
        "title": title,
        "slug": slug,
        "date": published,
        "description": description,
        "tags": tags,
        "coverImage": cover_image,
    }
    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    return f"---\n{header}---\n\n# {title}\n\n"


def _split_tags(answer: str) -> list[str]:
    return [tag.strip() for tag in answer.split(",") if tag.strip()]


def _ask(question):
    """Ask a questionary question, aborting when the user cancels."""
    answer = question.ask()
    if answer is None:
        raise click.Abort()
    return answer


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
