"""Pydantic input models for MCP tool validation.

Each model represents the input schema for one tool, with field-level
validation and descriptive error messages.

Architecture:
- base: BaseNoteInput for note identifier and vault validation
- tagging_models: Input models for tag generation and note creation
- vault_models: Input models for vault management operations

Usage:
    from vault_tagger.models import GenerateNoteTagsInput, ApplyNoteTagsInput
    from vault_tagger.models import ListVaultsInput, SetActiveVaultInput
"""

from .base import BaseNoteInput
from .tagging_models import (
    GenerateNoteTagsInput,
    ApplyNoteTagsInput,
    ReadNoteTagsInput,
    CreateNoteForFileInput,
    TagFolderInput,
    ManualTagsPrompt,
)
from .vault_models import (
    ListVaultsInput,
    SetActiveVaultInput,
)

__all__ = [
    # Base models
    "BaseNoteInput",
    # Tagging models
    "GenerateNoteTagsInput",
    "ApplyNoteTagsInput",
    "ReadNoteTagsInput",
    "CreateNoteForFileInput",
    "TagFolderInput",
    "ManualTagsPrompt",
    # Vault models
    "ListVaultsInput",
    "SetActiveVaultInput",
]
