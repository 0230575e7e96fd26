"""HTML and XML utility functions for Rookblog.

This module provides string helpers for markup and URLs used by the feed
generators, templates and the development server.

Functions:
    escape_xml: Escape special characters for XML text and attributes.
    join_root_url: Join a base URL with a path.
    build_query: Build a query string from non-empty parameters.
"""

from __future__ import annotations

from urllib.parse import urlencode


def escape_xml(text: str) -> str:
    """Escape special XML characters in a string.

    Converts the following characters to their entity equivalents:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &apos;

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for XML text and attribute values.

    Examples:
        >>> escape_xml('Tom & "Jerry"')
        'Tom &amp; &quot;Jerry&quot;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about')
        'https://example.com/about'

        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def build_query(params: dict[str, str | None]) -> str:
    """Build a ``?key=value`` query string, skipping blank values.

    Examples:
        >>> build_query({"q": "", "tag": "python"})
        '?tag=python'

        >>> build_query({"q": None})
        ''
    """
    pairs = [(key, value) for key, value in params.items() if value and value.strip()]
    query = urlencode(pairs)
    return f"?{query}" if query else ""
