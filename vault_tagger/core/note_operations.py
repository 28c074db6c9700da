"""Tagging operations on vault notes and companion files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any, Awaitable, Callable, Optional

from vault_tagger.constants import FRONTMATTER_DELIMITER
from vault_tagger.core.frontmatter_operations import (
    merge_tags,
    read_frontmatter_metadata,
    read_tags,
    split_frontmatter,
    strip_frontmatter,
)
from vault_tagger.core.tag_generation import StatusCallback, TagRequester, generate_tags
from vault_tagger.core.text_extraction import extract_text, is_file_type_supported, strip_urls
from vault_tagger.core.vault_operations import (
    ensure_vault_ready,
    note_display_name,
    read_document,
    resolve_note_path,
    resolve_vault_file,
    write_document,
)
from vault_tagger.data_models import TaggerSettings, VaultMetadata
from vault_tagger.errors import ExtractionError, MalformedInputError, ProviderError, UserCancelled
from vault_tagger.session import document_guard

logger = logging.getLogger(__name__)

ManualTagPrompt = Callable[[], Awaitable[list[str]]]


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def parse_manual_tags(raw: str) -> list[str]:
    """Split user-typed tags on commas, trimming whitespace and dropping blanks."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _template_vars(title: str) -> dict[str, str]:
    return {"title": title, "date": date.today().isoformat()}


def _merge(
    content: str,
    tags: Iterable[str],
    settings: TaggerSettings,
    mode: str,
    title: str,
) -> str:
    return merge_tags(
        content,
        tags,
        settings.tag_case_format,
        mode,
        settings.default_template,
        _template_vars(title),
        settings.language_preference,
    )


async def _tags_for_text(
    text: Optional[str],
    label: str,
    settings: TaggerSettings,
    provider: Optional[TagRequester],
    on_status: Optional[StatusCallback],
    manual_prompt: Optional[ManualTagPrompt],
) -> list[str]:
    """Generate tags for ``text``, falling back to manual entry when allowed.

    Raises:
        ProviderError: If generation fails and no manual prompt is available.
        ExtractionError: If there is no text and no manual prompt.
        UserCancelled: If the user dismisses the manual prompt.
    """
    if not text or not text.strip():
        if manual_prompt is None:
            raise ExtractionError(f"'{label}' has no text to generate tags from.")
        logger.warning("No text available for '%s'; asking for manual tags", label)
        return await manual_prompt()

    try:
        tags = await generate_tags(text, settings, provider, on_status=on_status)
    except ProviderError as exc:
        if manual_prompt is None:
            logger.error("Tag generation failed for '%s': %s", label, exc)
            raise
        logger.warning(
            "Could not generate tags with %s for '%s' (%s); asking for manual tags",
            exc.provider,
            label,
            exc,
        )
        return await manual_prompt()

    if not tags and manual_prompt is not None:
        logger.warning("No tags were generated for '%s'; asking for manual tags", label)
        return await manual_prompt()
    return tags


# ==============================================================================
# TAGGING OPERATIONS
# ==============================================================================


async def tag_note(
    vault: VaultMetadata,
    title: str,
    settings: TaggerSettings,
    provider: Optional[TagRequester],
    mode: Optional[str] = None,
    on_status: Optional[StatusCallback] = None,
    manual_prompt: Optional[ManualTagPrompt] = None,
) -> dict[str, Any]:
    """Generate tags for a note and merge them into its frontmatter.

    The note is written only after a non-empty tag set is obtained.

    Args:
        vault: Vault metadata.
        title: Pre-validated note identifier.
        settings: Tagging settings.
        provider: AI backend; ``None`` means no backend is configured.
        mode: ``append`` or ``replace``; defaults to ``settings.merge_mode``.
        on_status: Awaited before each network attempt.
        manual_prompt: Asked for tags when generation fails or yields nothing.

    Returns:
        Dictionary with vault, note, path, status (``updated``, ``unchanged``,
        ``no_tags`` or ``cancelled``), mode, and the tags involved.

    Raises:
        FileNotFoundError: If the note does not exist.
        ConfigurationError: If no provider is configured.
        ProviderError: If generation fails and no manual prompt is available.
    """
    ensure_vault_ready(vault)
    target_path = resolve_note_path(vault, title)
    merge_mode = mode or settings.merge_mode

    async with document_guard(target_path):
        content = read_document(vault, target_path)
        note_name = note_display_name(vault, target_path)
        payload: dict[str, Any] = {
            "vault": vault.name,
            "note": note_name,
            "path": str(target_path),
            "mode": merge_mode,
        }

        text = strip_urls(strip_frontmatter(content))
        try:
            tags = await _tags_for_text(text, note_name, settings, provider, on_status, manual_prompt)
        except UserCancelled:
            logger.info("Tagging cancelled for note '%s' in vault '%s'", note_name, vault.name)
            return {**payload, "status": "cancelled", "tags": []}

        if not tags:
            logger.info("No tags were generated for note '%s' in vault '%s'", note_name, vault.name)
            return {**payload, "status": "no_tags", "tags": []}

        updated = _merge(content, tags, settings, merge_mode, target_path.stem)
        if updated == content:
            logger.info("No new tags to add to note '%s' in vault '%s'", note_name, vault.name)
            return {**payload, "status": "unchanged", "tags": tags, "note_tags": read_tags(content)}

        write_document(target_path, updated)

    logger.info(
        "%d tag%s merged into note '%s' in vault '%s' (mode=%s)",
        len(tags),
        "" if len(tags) == 1 else "s",
        note_name,
        vault.name,
        merge_mode,
    )
    return {**payload, "status": "updated", "tags": tags, "note_tags": read_tags(updated)}


async def apply_manual_tags(
    vault: VaultMetadata,
    title: str,
    tags: list[str],
    settings: TaggerSettings,
    mode: Optional[str] = None,
) -> dict[str, Any]:
    """Merge user-supplied tags into a note without calling any backend.

    Returns:
        Dictionary with vault, note, path, status (``updated`` or ``unchanged``),
        mode, and the note's tags after the merge.
    """
    ensure_vault_ready(vault)
    target_path = resolve_note_path(vault, title)
    merge_mode = mode or settings.merge_mode

    async with document_guard(target_path):
        content = read_document(vault, target_path)
        updated = _merge(content, tags, settings, merge_mode, target_path.stem)
        if updated != content:
            write_document(target_path, updated)

    note_name = note_display_name(vault, target_path)
    status = "unchanged" if updated == content else "updated"
    logger.info(
        "Manual tags %s for note '%s' in vault '%s' (mode=%s)",
        status,
        note_name,
        vault.name,
        merge_mode,
    )
    return {
        "vault": vault.name,
        "note": note_name,
        "path": str(target_path),
        "status": status,
        "mode": merge_mode,
        "note_tags": read_tags(updated),
    }


def read_note_tags(vault: VaultMetadata, title: str) -> dict[str, Any]:
    """Read the tags and frontmatter of a note.

    Returns:
        Dictionary with vault, note, path, tags, frontmatter, has_frontmatter,
        and status.
    """
    ensure_vault_ready(vault)
    target_path = resolve_note_path(vault, title)
    content = read_document(vault, target_path)
    note_name = note_display_name(vault, target_path)

    payload: dict[str, Any] = {
        "vault": vault.name,
        "note": note_name,
        "path": str(target_path),
        "tags": read_tags(content),
        "has_frontmatter": split_frontmatter(content) is not None,
        "status": "read",
    }
    try:
        payload["frontmatter"] = read_frontmatter_metadata(content, strict=True)
    except MalformedInputError as exc:
        logger.warning("Frontmatter of note '%s' in vault '%s' is malformed: %s", note_name, vault.name, exc)
        payload["frontmatter"] = {}
        payload["frontmatter_error"] = str(exc)

    logger.info("Read tags for note '%s' in vault '%s'", note_name, vault.name)
    return payload


async def tag_folder(
    vault: VaultMetadata,
    folder: str,
    settings: TaggerSettings,
    provider: Optional[TagRequester],
    on_status: Optional[StatusCallback] = None,
) -> dict[str, Any]:
    """Generate tags for every note in a folder that has no frontmatter yet.

    Only the folder's own ``.md`` files are visited, in name order. A note
    whose first line is ``---`` is skipped untouched. Each note is read and
    written under its own document guard, and one note failing does not stop
    the rest.

    Args:
        vault: Vault metadata.
        folder: Vault-relative folder path; empty for the vault root.
        settings: Tagging settings.
        provider: AI backend used for every note.
        on_status: Awaited before each network attempt.

    Returns:
        Dictionary with vault, folder, path, status, the number of notes
        updated, and a ``notes`` list holding one ``{note, status}`` entry per
        note. Note statuses are ``updated``, ``skipped``, ``no_text``,
        ``no_tags`` or ``failed``.

    Raises:
        FileNotFoundError: If the folder does not exist.
        ProviderError: If the backend rejects the credentials.
    """
    ensure_vault_ready(vault)
    folder_path = resolve_vault_file(vault, folder) if folder else vault.path.resolve(strict=False)
    if not folder_path.is_dir():
        raise FileNotFoundError(f"Folder '{folder}' not found in vault '{vault.name}'.")

    results: list[dict[str, Any]] = []
    for note_path in sorted(folder_path.glob("*.md")):
        if not note_path.is_file():
            continue
        note_name = note_display_name(vault, note_path)

        async with document_guard(note_path):
            content = read_document(vault, note_path)
            if content.split("\n", 1)[0] == FRONTMATTER_DELIMITER:
                results.append({"note": note_name, "status": "skipped"})
                continue

            text = strip_urls(content)
            if not text.strip():
                results.append({"note": note_name, "status": "no_text"})
                continue

            try:
                tags = await generate_tags(text, settings, provider, on_status=on_status)
            except ProviderError as exc:
                if exc.kind == "auth":
                    raise
                logger.warning("Tag generation failed for note '%s': %s", note_name, exc)
                results.append({"note": note_name, "status": "failed", "error": str(exc)})
                continue

            if not tags:
                results.append({"note": note_name, "status": "no_tags"})
                continue

            updated = _merge(content, tags, settings, "append", note_path.stem)
            write_document(note_path, updated)
            results.append({"note": note_name, "status": "updated", "tags": read_tags(updated)})

    updated_count = sum(1 for result in results if result["status"] == "updated")
    logger.info(
        "Tagged %d of %d notes in folder '%s' of vault '%s'",
        updated_count,
        len(results),
        folder or "/",
        vault.name,
    )
    return {
        "vault": vault.name,
        "folder": folder,
        "path": str(folder_path),
        "status": "completed",
        "updated": updated_count,
        "notes": results,
    }


async def create_note_for_file(
    vault: VaultMetadata,
    file_path: str,
    settings: TaggerSettings,
    provider: Optional[TagRequester],
    on_status: Optional[StatusCallback] = None,
    manual_prompt: Optional[ManualTagPrompt] = None,
) -> dict[str, Any]:
    """Create a tagged companion note next to a non-Markdown file.

    The note embeds the file, optionally includes its extracted text, and is
    tagged with generated tags plus the file's extension. Without a provider
    only the extension tag is written.

    Args:
        vault: Vault metadata.
        file_path: Vault-relative path of the source file (e.g. ``Papers/a.pdf``).
        settings: Tagging settings.
        provider: AI backend, or ``None`` when no backend is configured.
        on_status: Awaited before each network attempt.
        manual_prompt: Asked for tags when extraction or generation fails.

    Returns:
        Dictionary with vault, note, path, source, status (``created`` or
        ``cancelled``), and tags.

    Raises:
        FileNotFoundError: If the source file does not exist.
        FileExistsError: If the companion note already exists.
        ExtractionError: If the file type is unsupported, or text extraction
            fails and no manual prompt is available.
    """
    ensure_vault_ready(vault)
    source = resolve_vault_file(vault, file_path)
    if not source.is_file():
        raise FileNotFoundError(f"File '{file_path}' not found in vault '{vault.name}'.")

    extension = source.suffix.lower().lstrip(".")
    if extension in ("md", "markdown") or not is_file_type_supported(source, settings.accepted_file_types):
        raise ExtractionError(
            f"File type '{extension}' is not supported. "
            f"Supported types: {', '.join(settings.accepted_file_types)}"
        )

    note_path = source.with_suffix(".md")
    async with document_guard(note_path):
        if note_path.exists():
            raise FileExistsError(f"Note '{note_display_name(vault, note_path)}' already exists")

        extracted: Optional[str]
        try:
            extracted = extract_text(source, settings.accepted_file_types)
        except ExtractionError as exc:
            if manual_prompt is None:
                raise
            logger.warning("Text extraction failed for '%s': %s", file_path, exc)
            extracted = None

        tags: list[str] = []
        try:
            if extracted is None or provider is not None:
                tags = await _tags_for_text(
                    extracted, source.name, settings, provider, on_status, manual_prompt
                )
        except UserCancelled:
            logger.info("Note creation cancelled for '%s' in vault '%s'", file_path, vault.name)
            return {
                "vault": vault.name,
                "note": note_display_name(vault, note_path),
                "path": str(note_path),
                "source": file_path,
                "status": "cancelled",
                "tags": [],
            }

        tags = [*tags, extension]
        body = f"## {source.stem}\n\n![[{source.name}]]"
        if settings.include_extracted_text and extracted:
            body += f"\n\n## Extracted Text\n\n{extracted}"

        content = _merge(body, tags, settings, "replace", source.stem)
        write_document(note_path, content + "\n")

    note_name = note_display_name(vault, note_path)
    logger.info("Created note '%s' for file '%s' in vault '%s'", note_name, file_path, vault.name)
    return {
        "vault": vault.name,
        "note": note_name,
        "path": str(note_path),
        "source": file_path,
        "status": "created",
        "tags": read_tags(content),
    }
