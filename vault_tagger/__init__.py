"""Vault Tagger MCP Server

AI-generated frontmatter tags for Markdown note vaults via Model Context Protocol.
"""

from vault_tagger.config import get_configuration, load_configuration
from vault_tagger.data_models import TaggerConfiguration, TaggerSettings, VaultMetadata
from vault_tagger.core.frontmatter_operations import merge_tags, read_tags
from vault_tagger.core.tag_generation import generate_tags
from vault_tagger.session import resolve_vault, set_active_vault, get_active_vault
from vault_tagger.server import mcp, run_server

# Import tools to register them with the MCP server
from vault_tagger import tools  # noqa: F401

__version__ = "0.1.0"
__all__ = [
    "get_configuration",
    "load_configuration",
    "TaggerConfiguration",
    "TaggerSettings",
    "VaultMetadata",
    "merge_tags",
    "read_tags",
    "generate_tags",
    "resolve_vault",
    "set_active_vault",
    "get_active_vault",
    "mcp",
    "run_server",
]
