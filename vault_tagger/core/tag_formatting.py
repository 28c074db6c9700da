"""Canonical tag surface form and the YAML rendering of the tags field."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Callable, Optional

import yaml

_WHITESPACE = re.compile(r"\s+")
_TAGS_KEY_LINE = re.compile(r"^tags\s*:(?P<value>.*)$", re.IGNORECASE)
_TOP_LEVEL_KEY = re.compile(r"^[^\s\-#\[\]][^:]*:(\s|$)")
_QUOTES = "\"'"


def is_top_level_key(line: str) -> bool:
    """Return True when ``line`` starts a new unindented ``key:`` entry."""
    return _TOP_LEVEL_KEY.match(line) is not None


def format_tag(tag: str, case_format: str = "lowercase") -> str:
    """Format a tag for storage in frontmatter.

    Double quotes are removed, whitespace runs become a single hyphen, and the
    case format is applied. Unknown formats fall back to lowercase.

    Examples:
        >>> format_tag('Machine  Learning')
        'machine-learning'
        >>> format_tag('deep LEARNING', 'titlecase')
        'Deep-Learning'
    """
    formatted = _WHITESPACE.sub("-", tag.replace('"', "").strip())

    if case_format == "uppercase":
        return formatted.upper()
    if case_format == "titlecase":
        return "-".join(word[:1].upper() + word[1:].lower() for word in formatted.split("-"))
    if case_format == "retain":
        return formatted
    return formatted.lower()


def _yaml_scalar(value: str) -> str:
    """Render ``value`` plain unless YAML would read it back as something else.

    Colons and a leading dash are always quoted.
    """
    if ":" not in value and not value.startswith("-"):
        try:
            loaded = yaml.safe_load(value)
        except yaml.YAMLError:
            loaded = None
        if isinstance(loaded, str) and loaded == value:
            return value

    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def serialize_tags(tags: Iterable[str], case_format: str = "lowercase") -> str:
    """Render tags as YAML list items, one ``- value`` line per tag."""
    lines = []
    for tag in tags:
        formatted = format_tag(tag, case_format)
        if formatted:
            lines.append(f"- {_yaml_scalar(formatted)}")
    return "\n".join(lines)


def serialize_tags_field(tags: Iterable[str], case_format: str = "lowercase") -> str:
    """Render the complete ``tags`` field in canonical list form."""
    items = serialize_tags(tags, case_format)
    if not items:
        return "tags: []"
    return f"tags:\n{items}"


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        inner = value[1:-1]
        return inner.replace("''", "'") if value[0] == "'" else inner
    return value.strip(_QUOTES).strip()


def _parse_list_shape(value: str, continuation: list[str]) -> Optional[list[str]]:
    if value:
        return None
    items = [line.strip() for line in continuation if line.strip().startswith("-")]
    if not items:
        return None
    parsed = (_unquote(item[1:]) for item in items)
    return [tag for tag in parsed if tag]


def _parse_inline_shape(value: str, continuation: list[str]) -> Optional[list[str]]:
    if not value.startswith("["):
        return None
    array_lines = [value]
    if "]" not in value:
        for line in continuation:
            if is_top_level_key(line):
                break
            array_lines.append(line.strip())
            if "]" in line:
                break
    joined = " ".join(array_lines)
    closing = joined.rfind("]")
    inner = joined[1:closing] if closing != -1 else joined[1:]
    parsed = (_unquote(part) for part in inner.split(","))
    return [tag for tag in parsed if tag]


def _parse_scalar_shape(value: str, continuation: list[str]) -> Optional[list[str]]:
    try:
        loaded = yaml.safe_load(value)
    except yaml.YAMLError:
        loaded = value
    # null, ~ and Null mean the field is unset
    if loaded is None:
        return []
    tag = _unquote(value)
    if not tag:
        return None
    return [tag]


_SHAPE_PARSERS: tuple[Callable[[str, list[str]], Optional[list[str]]], ...] = (
    _parse_list_shape,
    _parse_inline_shape,
    _parse_scalar_shape,
)


def parse_tags_field(text: str) -> list[str]:
    """Read tag values from the text of a ``tags`` field.

    ``text`` starts at the ``tags:`` line and includes its continuation lines.
    The YAML list, inline array, and single scalar shapes are tried in that
    order; when none matches the field is treated as empty.
    """
    lines = text.split("\n")
    match = _TAGS_KEY_LINE.match(lines[0])
    if match is None:
        return []

    value = match.group("value").strip()
    continuation = lines[1:]
    for parser in _SHAPE_PARSERS:
        tags = parser(value, continuation)
        if tags is not None:
            return tags
    return []
