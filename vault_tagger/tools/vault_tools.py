"""MCP tools for vault management."""

import logging
from typing import Any
from mcp.server.fastmcp import Context

from vault_tagger.server import mcp
from vault_tagger.models import ListVaultsInput, SetActiveVaultInput
from vault_tagger.config import get_configuration
from vault_tagger.session import (
    set_active_vault as set_active_vault_session,
    get_active_vault,
    get_session_key,
    in_flight_paths,
)

logger = logging.getLogger(__name__)


@mcp.tool()
async def list_vaults(
    input: ListVaultsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List configured vaults, tagging settings, and current session state.

    Returns metadata for all configured vaults, the default and active vault
    for this session, the tagging settings in effect (API keys omitted), and
    the notes currently being tagged.

    The input is validated automatically by Pydantic (though this tool has
    no required parameters, the model maintains API consistency).

    Args:
        input (ListVaultsInput): Validated input (no fields required)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "default": str,    # System default vault name
            "active": str,     # Currently active vault (or None)
            "vaults": [
                {
                    "name": str,
                    "path": str,
                    "description": str,
                    "exists": bool
                }
            ],
            "settings": dict,  # max_tags, case format, provider, ...
            "in_flight": [str] # Paths with a tagging operation running
        }

    Examples:
        - Use when: Starting conversation, need to see available vaults
        - Use when: Checking which AI backend and tag limits are active
        - Don't use: Already know vault name and just need to switch

    Error Handling:
        - Config file missing → Error with expected config path
        - Invalid config format → Error describing expected YAML structure
    """
    active = None
    if ctx is not None:
        try:
            active = get_active_vault(ctx).name
        except ValueError:
            active = None

    configuration = get_configuration()
    return {
        **configuration.as_payload(),
        "active": active,
        "in_flight": in_flight_paths(),
    }


@mcp.tool()
async def set_active_vault(
    input: SetActiveVaultInput,
    ctx: Context,
) -> dict[str, Any]:
    """Choose the vault that tagging tools use when no vault is passed.

    The choice lasts for the lifetime of the MCP session and does not affect
    other sessions.

    Args:
        input (SetActiveVaultInput): Validated input containing:
            - vault (str): Friendly vault name from tagger.yaml
                Examples: "work", "personal"
                Use list_vaults() to discover valid names
        ctx (Context): FastMCP context for session state

    Returns:
        {"vault": str, "path": str, "status": "active"}

    Examples:
        - Use when: User says "tag notes in my work vault"
        - Use when: Tagging several notes in the same vault
        - Don't use: One-off tagging in another vault (pass vault param directly)

    Error Handling:
        - ValidationError: Empty vault name or only whitespace
        - Unknown vault → Error listing available vaults, suggest list_vaults()
    """
    metadata = set_active_vault_session(ctx, input.vault)
    logger.info("Active vault for session %s set to '%s'", get_session_key(ctx), metadata.name)
    return {
        "vault": metadata.name,
        "path": str(metadata.path),
        "status": "active",
    }
