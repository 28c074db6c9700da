"""Tagging MCP tools.

This module provides MCP tool wrappers for tag operations:
- Generate tags for a note with the configured AI backend
- Apply user-supplied tags to a note
- Read the current tags of a note
- Create a tagged companion note for a non-Markdown file
- Tag every note in a folder that has no frontmatter yet

All tools delegate to core operations in vault_tagger.core.note_operations.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from mcp.server.fastmcp import Context

from vault_tagger.server import mcp
from vault_tagger.config import get_configuration
from vault_tagger.session import resolve_vault
from vault_tagger.errors import UserCancelled
from vault_tagger.models import (
    GenerateNoteTagsInput,
    ApplyNoteTagsInput,
    ReadNoteTagsInput,
    CreateNoteForFileInput,
    TagFolderInput,
    ManualTagsPrompt,
)
from vault_tagger.core.note_operations import (
    ManualTagPrompt,
    apply_manual_tags,
    create_note_for_file as create_note_for_file_operation,
    parse_manual_tags,
    read_note_tags as read_note_tags_operation,
    tag_folder as tag_folder_operation,
    tag_note,
)
from vault_tagger.core.tag_generation import StatusCallback
from vault_tagger.providers import create_provider, is_provider_configured

logger = logging.getLogger(__name__)


# ==============================================================================
# CLIENT INTERACTION
# ==============================================================================

def _status_reporter(ctx: Context | None) -> Optional[StatusCallback]:
    """Forward generation attempts to the client as log notifications."""
    if ctx is None:
        return None

    async def report(attempt: int, total: int) -> None:
        await ctx.info(f"Generating tags... (attempt {attempt}/{total})")

    return report


def _manual_prompt(ctx: Context | None, label: str) -> Optional[ManualTagPrompt]:
    """Ask the client for comma-separated tags through MCP elicitation."""
    if ctx is None:
        return None

    async def prompt() -> list[str]:
        result = await ctx.elicit(
            message=(
                f"Tags could not be generated for '{label}'. "
                "Enter tags separated by commas."
            ),
            schema=ManualTagsPrompt,
        )
        if result.action != "accept":
            raise UserCancelled(f"Manual tag entry for '{label}' ended with '{result.action}'")
        return parse_manual_tags(result.data.tags)

    return prompt


# ==============================================================================
# TAGGING OPERATIONS
# ==============================================================================

@mcp.tool()
async def generate_note_tags(
    input: GenerateNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Generate tags for a note with the configured AI backend and save them.

    The note's body (frontmatter and URLs removed) is sent to the backend.
    Returned tags are checked against the configured word limit; if none
    qualify the request is retried once with stricter instructions. Valid
    tags are formatted, normalized to the preferred spelling, and merged
    into the ``tags`` field of the note's frontmatter.

    Args:
        input (GenerateNoteTagsInput): Validated input containing:
            - title (str): Note identifier (folders separated by /)
            - vault (str, optional): Target vault (omit to use active vault)
            - mode (str, optional): "append" or "replace"

    Returns:
        {
            "vault": str,
            "note": str,
            "path": str,
            "mode": str,
            "status": "updated" | "unchanged" | "no_tags" | "cancelled",
            "tags": list[str],        # Tags obtained for this call
            "note_tags": list[str]    # Tags in the note afterwards
        }

    Examples:
        - Use when: User asks to tag or categorize a note
        - Use mode="replace" when: Existing tags are wrong and should go
        - Don't use: User already named the tags (use apply_note_tags())

    Error Handling:
        - ValidationError: Invalid title format, empty title, or path traversal attempt
        - Note not found → Error with note path
        - No backend configured → Error naming the missing credential
        - Backend failure → Client is asked for tags manually; declining
          returns status "cancelled" and leaves the note untouched
    """
    metadata = resolve_vault(input.vault, ctx)
    settings = get_configuration().settings

    async with create_provider(settings) as provider:
        return await tag_note(
            metadata,
            input.title,
            settings,
            provider,
            mode=input.mode,
            on_status=_status_reporter(ctx),
            manual_prompt=_manual_prompt(ctx, input.title),
        )


@mcp.tool()
async def apply_note_tags(
    input: ApplyNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Merge the given tags into a note's frontmatter without using AI.

    Args:
        input (ApplyNoteTagsInput): Validated input containing:
            - title (str): Note identifier
            - tags (list[str]): Tags to merge
            - vault (str, optional): Target vault
            - mode (str, optional): "append" or "replace"

    Returns:
        {"vault": str, "note": str, "path": str, "mode": str,
         "status": "updated" | "unchanged", "note_tags": list[str]}

    Error Handling:
        - ValidationError: No non-empty tags supplied
        - Note not found → Error with note path
    """
    metadata = resolve_vault(input.vault, ctx)
    settings = get_configuration().settings
    return await apply_manual_tags(metadata, input.title, input.tags, settings, mode=input.mode)


@mcp.tool()
async def read_note_tags(
    input: ReadNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Read the tags and frontmatter of a note without returning its body.

    Returns:
        {
            "vault": str,
            "note": str,
            "path": str,
            "tags": list[str],
            "frontmatter": dict,
            "has_frontmatter": bool,
            "status": "read"
        }

    Error Handling:
        - Note not found → Error with note path
    """
    metadata = resolve_vault(input.vault, ctx)
    return read_note_tags_operation(metadata, input.title)


@mcp.tool()
async def create_note_for_file(
    input: CreateNoteForFileInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Create a tagged note that embeds a non-Markdown file (e.g. a PDF).

    The note is created next to the file with the same name and a ``.md``
    extension. Its tags are generated from the file's extracted text plus the
    file extension. When no AI backend is configured only the extension tag
    is written.

    Args:
        input (CreateNoteForFileInput): Validated input containing:
            - file_path (str): Vault-relative path of the file
            - vault (str, optional): Target vault

    Returns:
        {"vault": str, "note": str, "path": str, "source": str,
         "status": "created" | "cancelled", "tags": list[str]}

    Error Handling:
        - File not found → Error with the file path
        - File type not enabled in configuration → Error listing supported types
        - Note already exists → Error, nothing is overwritten
    """
    metadata = resolve_vault(input.vault, ctx)
    settings = get_configuration().settings
    on_status = _status_reporter(ctx)
    manual_prompt = _manual_prompt(ctx, input.file_path)

    if not is_provider_configured(settings):
        logger.info("No AI backend configured; creating note for '%s' without generated tags", input.file_path)
        return await create_note_for_file_operation(
            metadata, input.file_path, settings, None, on_status, manual_prompt
        )

    async with create_provider(settings) as provider:
        return await create_note_for_file_operation(
            metadata, input.file_path, settings, provider, on_status, manual_prompt
        )


@mcp.tool()
async def tag_folder(
    input: TagFolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Generate tags for every note in a folder that has no frontmatter yet.

    Notes that already start with a frontmatter block are skipped. Subfolders
    are not visited. A backend failure on one note is recorded and the
    remaining notes are still processed; no manual entry is requested.

    Args:
        input (TagFolderInput): Validated input containing:
            - folder (str, optional): Vault-relative folder ('' for the root)
            - vault (str, optional): Target vault

    Returns:
        {
            "vault": str,
            "folder": str,
            "path": str,
            "status": "completed",
            "updated": int,
            "notes": [
                {"note": str, "status": "updated" | "skipped" | "no_text" | "no_tags" | "failed", ...}
            ]
        }

    Examples:
        - Use when: User wants a whole folder of new notes tagged at once
        - Don't use: Notes already have frontmatter (use generate_note_tags() per note)

    Error Handling:
        - Folder not found → Error with folder path
        - No backend configured or credentials rejected → Error, nothing written
    """
    metadata = resolve_vault(input.vault, ctx)
    settings = get_configuration().settings

    async with create_provider(settings) as provider:
        return await tag_folder_operation(
            metadata,
            input.folder,
            settings,
            provider,
            on_status=_status_reporter(ctx),
        )
