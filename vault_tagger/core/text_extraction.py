"""Plain-text extraction from notes and companion files."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from vault_tagger.core.frontmatter_operations import strip_frontmatter
from vault_tagger.errors import ExtractionError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = frozenset({"md", "markdown", "txt"})

_URL_PATTERN = re.compile(
    r"(https?://|www\.)[^\s]+(\.[^\s]+){1,}[^\s.,;:?!)\"']",
    re.IGNORECASE,
)


def strip_urls(text: str) -> str:
    """Replace URLs with a space so they do not end up as tags."""
    if not text:
        return ""
    return _URL_PATTERN.sub(" ", text)


def is_file_type_supported(path: Path, accepted_file_types: Iterable[str]) -> bool:
    """Return True when ``path`` has an extension listed in ``accepted_file_types``."""
    extension = path.suffix.lower().lstrip(".")
    return extension in {file_type.lower().lstrip(".") for file_type in accepted_file_types}


def _read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"File '{path.name}' is not UTF-8 encoded and cannot be processed.") from exc


def _read_pdf(path: Path) -> str:
    try:
        reader = PdfReader(path)
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError) as exc:
        raise ExtractionError(f"Could not read PDF '{path.name}': {exc}") from exc
    return "\n".join(pages)


def extract_text(path: Path, accepted_file_types: Iterable[str] = ("pdf",)) -> str:
    """Extract the text of ``path`` for tag generation.

    Markdown and plain text files are always accepted; other types must be
    listed in ``accepted_file_types`` and have an extraction engine.

    Args:
        path: File to read.
        accepted_file_types: Extensions (without dot) the user enabled.

    Returns:
        The text with URLs removed and any frontmatter stripped.

    Raises:
        ExtractionError: If the file is missing, unsupported, unreadable, or
            contains no text.
    """
    if not path.is_file():
        raise ExtractionError(f"File '{path.name}' not found.")

    extension = path.suffix.lower().lstrip(".")
    if extension in TEXT_EXTENSIONS:
        text = _read_text_file(path)
    elif not is_file_type_supported(path, accepted_file_types):
        raise ExtractionError(
            f"File type '{extension}' is not supported. "
            f"Supported types: {', '.join(accepted_file_types)}"
        )
    elif extension == "pdf":
        text = _read_pdf(path)
    else:
        raise ExtractionError(f"File type '{extension}' cannot be processed: no text extractor available.")

    text = strip_urls(strip_frontmatter(text)).strip()
    if not text:
        raise ExtractionError(f"No text could be extracted from '{path.name}'.")

    logger.debug("Extracted %d characters from '%s'", len(text), path)
    return text
