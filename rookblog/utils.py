"""Utility functions for Rookblog.

This module contains small helpers used throughout the Rookblog codebase:
reading time estimation, date formatting, path predicates and output
directory handling.

Key functions:
    slugify: Convert a title to a URL slug.
    calculate_reading_time: Estimate minutes to read a Markdown body.
    utc_midnight: Interpret a YYYY-MM-DD string as UTC midnight.
    format_date: Human-readable date used in bylines and cards.
    is_markdown: Check if a path is a post source file.
    ensure_clean_dir: Ensure a directory exists and is empty.

Note:
    HTML-related utilities (escape_xml, join_root_url, build_query) live in
    html_utils.py but are re-exported here.
"""

from __future__ import annotations

import math
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path

from .html_utils import build_query, escape_xml, join_root_url  # noqa: F401

WORDS_PER_MINUTE = 225
MARKDOWN_SUFFIX = ".md"


def slugify(text: str) -> str:
    """Convert a title to a URL slug.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", text)
    return cleaned.strip("-").lower()


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def calculate_reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimate reading time in whole minutes.

    Args:
        text: Markdown body.
        words_per_minute: Reading speed.

    Returns:
        Minutes rounded up, never less than 1.

    Examples:
        >>> calculate_reading_time("word " * 226)
        2
    """
    return max(1, math.ceil(count_words(text) / words_per_minute))


def utc_midnight(iso_date: str) -> datetime:
    """Return an aware datetime at UTC midnight of a ``YYYY-MM-DD`` date."""
    return datetime.strptime(iso_date, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format an aware datetime as ISO 8601 with milliseconds and a ``Z`` suffix.

    Examples:
        >>> iso_timestamp(utc_midnight("2024-01-05"))
        '2024-01-05T00:00:00.000Z'
    """
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def http_date(moment: datetime) -> str:
    """Format an aware datetime as an RFC 1123 date in GMT.

    Examples:
        >>> http_date(utc_midnight("2024-01-05"))
        'Fri, 05 Jan 2024 00:00:00 GMT'
    """
    return moment.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


def format_date(iso_date: str) -> str:
    """Format a ``YYYY-MM-DD`` date as e.g. ``January 5, 2024``.

    The date is read as UTC so the displayed day never shifts.
    """
    moment = utc_midnight(iso_date)
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def is_markdown(path: Path) -> bool:
    """Check if a path is a post source file.

    Args:
        path: Path to check.

    Returns:
        True if the file name ends with .md.
    """
    return path.name.endswith(MARKDOWN_SUFFIX)


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, target: Path) -> list[Path]:
    """Copy every file under source into target, keeping relative paths.

    Args:
        source: Directory to copy from. Missing directories copy nothing.
        target: Destination directory.

    Returns:
        List of written destination paths.
    """
    written: list[Path] = []
    if not source.is_dir():
        return written
    for src_path in sorted(source.rglob("*")):
        if src_path.is_dir():
            continue
        dest_path = target / src_path.relative_to(source)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
        written.append(dest_path)
    return written
