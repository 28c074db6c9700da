"""Word-count validation of AI-generated tags."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_WORD_SEPARATORS = re.compile(r"[-_]+")


@dataclass(frozen=True)
class TagFilterResult:
    """Outcome of filtering a candidate tag list."""

    valid_tags: list[str]
    has_erroneous_tags: bool


def count_words(tag: str) -> int:
    """Count the words of ``tag``, treating hyphens and underscores as separators."""
    return len(_WORD_SEPARATORS.sub(" ", tag).split())


def is_valid_tag(tag: str, max_words_per_tag: int) -> bool:
    """Return True when ``tag`` respects the word limit.

    A limit of one word still accepts two-word tags; backends asked for single
    words routinely answer with two.
    """
    word_count = count_words(tag)
    if word_count == 0:
        return False
    if max_words_per_tag == 1:
        return word_count <= 2
    return word_count <= max_words_per_tag


def filter_erroneous_tags(tags: Iterable[str], max_words_per_tag: int) -> TagFilterResult:
    """Drop over-long tags, keeping the valid ones in order.

    ``has_erroneous_tags`` is set only when nothing survives, so a partially
    usable answer never triggers a retry.
    """
    valid_tags: list[str] = []
    for tag in tags:
        if is_valid_tag(tag, max_words_per_tag):
            valid_tags.append(tag)
        else:
            logger.debug("Tag '%s' was filtered out due to word count", tag)

    return TagFilterResult(valid_tags=valid_tags, has_erroneous_tags=not valid_tags)
