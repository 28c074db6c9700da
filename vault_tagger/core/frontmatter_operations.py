"""Frontmatter tag merging.

The merger never raises for malformed input. A block without a closing
delimiter is treated as absent, an unreadable tags field as empty, and the
result is always a well-formed document. Lines outside the tags field, the
delimiters, and the body are carried over byte for byte.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

import frontmatter
import yaml

from vault_tagger.constants import FRONTMATTER_DELIMITER
from vault_tagger.errors import MalformedInputError
from vault_tagger.core.spelling import comparison_key, preferred_spelling
from vault_tagger.core.tag_formatting import (
    format_tag,
    is_top_level_key,
    parse_tags_field,
    serialize_tags_field,
)

logger = logging.getLogger(__name__)

_OPENING = f"{FRONTMATTER_DELIMITER}\n"
_TAGS_KEY = re.compile(r"^tags\s*:", re.IGNORECASE)
_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_TAGS_PLACEHOLDER = "{{tags}}"


# ==============================================================================
# DATA STRUCTURES
# ==============================================================================


@dataclass
class Frontmatter:
    """A frontmatter block split into its inner lines and the remaining body."""

    lines: list[str]
    closing: str
    body: str

    def render(self) -> str:
        inner = "".join(f"{line}\n" for line in self.lines)
        return f"{_OPENING}{inner}{self.closing}{self.body}"


class TagSet:
    """Ordered tags, unique by comparison key. The first spelling seen wins."""

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags: dict[str, str] = {}
        self.extend(tags)

    def add(self, tag: str) -> bool:
        """Add ``tag`` unless an equivalent tag is present. Returns True when added."""
        key = comparison_key(tag)
        if key in self._tags:
            return False
        self._tags[key] = tag
        return True

    def extend(self, tags: Iterable[str]) -> list[str]:
        """Add each tag in order, returning the ones that were new."""
        return [tag for tag in tags if self.add(tag)]

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and comparison_key(tag) in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags.values())

    def __len__(self) -> int:
        return len(self._tags)


# ==============================================================================
# SCANNING
# ==============================================================================


def split_frontmatter(document: str) -> Optional[Frontmatter]:
    """Scan ``document`` for a leading frontmatter block.

    The block opens with a first line of exactly ``---`` and closes at the next
    line of exactly ``---``. Returns None when there is no opening line or the
    block is never closed.
    """
    if not document.startswith(_OPENING):
        return None

    lines: list[str] = []
    offset = len(_OPENING)
    while offset < len(document):
        newline = document.find("\n", offset)
        if newline == -1:
            if document[offset:] == FRONTMATTER_DELIMITER:
                return Frontmatter(lines=lines, closing=FRONTMATTER_DELIMITER, body="")
            break

        line = document[offset:newline]
        if line == FRONTMATTER_DELIMITER:
            return Frontmatter(lines=lines, closing=_OPENING, body=document[newline + 1 :])
        lines.append(line)
        offset = newline + 1

    logger.debug("Frontmatter opening delimiter without a closing delimiter; treating as absent")
    return None


def _field_end(lines: list[str], start: int) -> int:
    """Return the index one past the last line belonging to the field at ``start``."""
    value = _TAGS_KEY.sub("", lines[start], count=1).strip()
    end = start + 1

    if value.startswith("[") and "]" not in value:
        # An unclosed array stops before the next key
        while end < len(lines) and not is_top_level_key(lines[end]):
            end += 1
            if "]" in lines[end - 1]:
                break
        return end

    if value:
        return end

    probe = end
    while probe < len(lines):
        stripped = lines[probe].strip()
        if stripped.startswith("-"):
            probe += 1
            end = probe
        elif not stripped:
            probe += 1
        else:
            break
    return end


def _locate_tags_field(lines: list[str]) -> Optional[tuple[int, int]]:
    for index, line in enumerate(lines):
        if _TAGS_KEY.match(line):
            return index, _field_end(lines, index)
    return None


def _existing_tags(block: Frontmatter, extent: tuple[int, int]) -> list[str]:
    start, end = extent
    return parse_tags_field("\n".join(block.lines[start:end]))


def _write_tags_field(
    block: Frontmatter,
    tags: Iterable[str],
    case_format: str,
) -> None:
    field_lines = serialize_tags_field(tags, case_format).split("\n")
    extent = _locate_tags_field(block.lines)
    if extent is None:
        block.lines.extend(field_lines)
    else:
        start, end = extent
        block.lines[start:end] = field_lines


# ==============================================================================
# TEMPLATES
# ==============================================================================


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders. Unknown placeholders are left as-is."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


def _fresh_block(
    tags: list[str],
    case_format: str,
    template: Optional[str],
    template_vars: Optional[Mapping[str, Any]],
) -> str:
    block: Optional[Frontmatter] = None
    if template and template.strip():
        kept = [line for line in template.split("\n") if line.strip() != _TAGS_PLACEHOLDER]
        variables = {**(template_vars or {}), "tags": ""}
        rendered = render_template("\n".join(kept), variables)
        if not rendered.endswith("\n"):
            rendered += "\n"
        block = split_frontmatter(rendered)
        if block is None:
            logger.warning("Frontmatter template does not render a closed block; using minimal block")

    if block is None:
        block = Frontmatter(lines=[], closing=_OPENING, body="")

    _write_tags_field(block, tags, case_format)
    return block.render()


# ==============================================================================
# PUBLIC OPERATIONS
# ==============================================================================


def merge_tags(
    document: str,
    new_tags: Iterable[str],
    case_format: str = "lowercase",
    mode: str = "append",
    template: Optional[str] = None,
    template_vars: Optional[Mapping[str, Any]] = None,
    language_preference: str = "uk",
) -> str:
    """Merge ``new_tags`` into the frontmatter of ``document``.

    Args:
        document: Full note text, with or without a frontmatter block.
        new_tags: Candidate tags in generation order.
        case_format: ``lowercase``, ``uppercase``, ``titlecase`` or ``retain``.
        mode: ``append`` keeps existing tags and adds unseen ones after them;
            ``replace`` discards existing tags.
        template: Block template used when the document has no usable
            frontmatter. ``{{tags}}`` marks where the tag list goes; other
            placeholders come from ``template_vars``.
        template_vars: Values for template placeholders.
        language_preference: ``uk`` or ``us`` spelling for variant words.

    Returns:
        The updated document. An empty ``new_tags`` leaves the document as it
        was, except that append mode still rewrites an existing tags field in
        canonical form.
    """
    incoming = [
        preferred_spelling(tag, language_preference)
        for tag in new_tags
        if format_tag(tag, case_format)
    ]

    block = split_frontmatter(document)
    if block is None:
        if not incoming:
            return document
        head = _fresh_block(list(TagSet(incoming)), case_format, template, template_vars)
        if not document:
            return head
        return head.rstrip("\n") + "\n\n" + document

    extent = _locate_tags_field(block.lines)
    if extent is None:
        if not incoming:
            return document
        _write_tags_field(block, TagSet(incoming), case_format)
        return block.render()

    if mode == "replace":
        if not incoming:
            return document
        merged = TagSet(incoming)
    else:
        existing = [
            preferred_spelling(tag, language_preference)
            for tag in _existing_tags(block, extent)
        ]
        if not incoming and not existing:
            return document
        merged = TagSet(existing)
        added = merged.extend(incoming)
        logger.debug("Appending %d of %d new tags", len(added), len(incoming))

    _write_tags_field(block, merged, case_format)
    return block.render()


def read_tags(document: str) -> list[str]:
    """Return the tag values currently stored in the frontmatter of ``document``."""
    block = split_frontmatter(document)
    if block is None:
        return []
    extent = _locate_tags_field(block.lines)
    if extent is None:
        return []
    return _existing_tags(block, extent)


def strip_frontmatter(document: str) -> str:
    """Return the note body without its frontmatter block."""
    block = split_frontmatter(document)
    if block is None:
        return document
    return block.body.strip()


def read_frontmatter_metadata(document: str, strict: bool = False) -> dict[str, Any]:
    """Parse the frontmatter block as YAML for display purposes.

    Returns an empty dictionary when the block is absent. A block that is not
    a valid YAML mapping also yields an empty dictionary unless ``strict`` is
    set.

    Raises:
        MalformedInputError: If ``strict`` and the block cannot be parsed.
    """
    if split_frontmatter(document) is None:
        return {}

    try:
        post = frontmatter.loads(document)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        if strict:
            raise MalformedInputError(f"Frontmatter is not a valid YAML mapping: {exc}") from exc
        logger.debug("Frontmatter is not valid YAML: %s", exc)
        return {}

    def _convert(value: Any) -> Any:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Mapping):
            return {str(k): _convert(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_convert(item) for item in value]
        return value

    return {str(key): _convert(value) for key, value in dict(post.metadata or {}).items()}
