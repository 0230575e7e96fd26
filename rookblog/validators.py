"""Front matter extraction and validation for Rookblog.

This module splits a post source into its YAML front matter and Markdown body,
and validates the front matter fields every post must carry.

Key functions:
- extract_frontmatter: Split raw text into (metadata, body).
- require_text: Validate a required, non-empty text field.
- require_date: Validate and normalize the publication date.
- require_tags: Validate the non-empty tag list.

Every failure raises a subclass of ValidationError naming the offending field
and the source file.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


class _FrontmatterLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps impossible timestamps as plain text.

    ``date: 2024-02-30`` then reaches require_date as a string and fails
    there with InvalidDateValueError instead of aborting the YAML parse.
    """


def _construct_timestamp(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> Any:
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


_FrontmatterLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


class ValidationError(Exception):
    """A post file failed front matter validation.

    Attributes:
        field: Name of the offending front matter field.
        file_name: Name of the source file.
        message: Human-readable error message.
    """

    def __init__(self, field: str, file_name: str, message: str):
        self.field = field
        self.file_name = file_name
        self.message = message
        super().__init__(message)


class MissingFieldError(ValidationError):
    """A required field is absent, empty, or not of the expected type."""

    def __init__(self, field: str, file_name: str):
        super().__init__(field, file_name, f'Invalid "{field}" in {file_name}')


class InvalidDateFormatError(ValidationError):
    """The date does not look like YYYY-MM-DD."""

    def __init__(self, file_name: str, value: str):
        super().__init__(
            "date",
            file_name,
            f'Invalid "date" format in {file_name}. Expected YYYY-MM-DD, got {value!r}.',
        )


class InvalidDateValueError(ValidationError):
    """The date looks like YYYY-MM-DD but is not a real calendar date."""

    def __init__(self, file_name: str, value: str):
        super().__init__(
            "date", file_name, f'Invalid "date" value in {file_name}: {value!r}'
        )


class EmptyTagListError(ValidationError):
    def __init__(self, file_name: str):
        super().__init__(
            "tags",
            file_name,
            f'Invalid "tags" in {file_name}. Expected a non-empty list.',
        )


class InvalidTagValueError(ValidationError):
    def __init__(self, file_name: str, index: int):
        super().__init__(
            "tags", file_name, f"Invalid tag value at position {index} in {file_name}"
        )


class FrontmatterError(ValidationError):
    """The front matter block is not a YAML mapping."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(
            "frontmatter", file_name, f"Invalid front matter in {file_name}: {reason}"
        )


def extract_frontmatter(text: str, file_name: str) -> tuple[dict[str, Any], str]:
    """Split raw post text into front matter and body.

    Text without a leading ``---`` block has no front matter; the whole text
    is the body.

    Args:
        text: Raw file content.
        file_name: Source file name, used in error messages.

    Returns:
        Tuple of (front matter dict, remaining body).

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.load(match.group(1), Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterError(file_name, str(exc).splitlines()[0]) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(file_name, f"expected a mapping, got {type(data).__name__}")
    return data, text[match.end() :]


def require_text(value: Any, field: str, file_name: str) -> str:
    """Return the trimmed text of a required field.

    Raises:
        MissingFieldError: If the value is not a string or is blank.
    """
    if not isinstance(value, str) or not value.strip():
        raise MissingFieldError(field, file_name)
    return value.strip()


def normalize_date(value: Any) -> str | None:
    """Normalize a YAML date value to text.

    Native dates use their UTC calendar fields so a timestamp late in the day
    west of Greenwich does not shift to the next day. Naive datetimes are
    taken as UTC.

    Returns:
        The date text, or None for missing or unsupported values.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return None


def require_date(value: Any, file_name: str) -> str:
    """Validate the publication date and return it as ``YYYY-MM-DD``.

    Raises:
        MissingFieldError: Missing, blank or of an unsupported type.
        InvalidDateFormatError: Text does not match ``YYYY-MM-DD``.
        InvalidDateValueError: Matches the pattern but is not a calendar date.
    """
    text = normalize_date(value)
    if not text:
        raise MissingFieldError("date", file_name)
    if not DATE_PATTERN.match(text):
        raise InvalidDateFormatError(file_name, text)
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError as exc:
        raise InvalidDateValueError(file_name, text) from exc
    return text


def require_tags(value: Any, file_name: str) -> tuple[str, ...]:
    """Validate the tag list, keeping its order.

    Raises:
        EmptyTagListError: Missing, not a list, or empty.
        InvalidTagValueError: An element is not a non-blank string.
    """
    if not isinstance(value, (list, tuple)) or not value:
        raise EmptyTagListError(file_name)
    tags = []
    for index, tag in enumerate(value):
        if not isinstance(tag, str) or not tag.strip():
            raise InvalidTagValueError(file_name, index)
        tags.append(tag.strip())
    return tuple(tags)
