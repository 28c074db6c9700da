"""Session state: active vault selection and in-flight document guards."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Optional

from mcp.server.fastmcp import Context

from vault_tagger.config import get_configuration
from vault_tagger.data_models import VaultMetadata

# Session state storage
_ACTIVE_VAULTS: Dict[int, str] = {}
_DOCUMENT_LOCKS: Dict[str, asyncio.Lock] = {}
_DOCUMENT_USERS: Dict[str, int] = {}


def get_session_key(ctx: Context) -> int:
    """Produce a stable per-session key for active vault tracking.

    Args:
        ctx: The request context supplied by FastMCP.

    Returns:
        An integer derived from the underlying session object identity, stable
        for the lifetime of the MCP session.
    """
    return id(ctx.session)


def set_active_vault(ctx: Context, vault_name: str) -> VaultMetadata:
    """Set the active vault for a client session.

    Raises:
        ValueError: If ``vault_name`` is not present in the configuration.
    """
    metadata = get_configuration().get(vault_name)
    _ACTIVE_VAULTS[get_session_key(ctx)] = metadata.name
    return metadata


def get_active_vault(ctx: Context) -> VaultMetadata:
    """Retrieve the active vault for a session, falling back to the default."""
    configuration = get_configuration()
    vault_name = _ACTIVE_VAULTS.get(get_session_key(ctx), configuration.default_vault)
    return configuration.get(vault_name)


def resolve_vault(vault: Optional[str], ctx: Optional[Context] = None) -> VaultMetadata:
    """Resolve which vault metadata should be used for an operation.

    Args:
        vault: Optional vault name provided directly by the caller.
        ctx: Optional FastMCP context used to infer the active vault when
            ``vault`` is not supplied.

    Raises:
        ValueError: If the supplied ``vault`` name is not recognized.
    """
    if vault:
        return get_configuration().get(vault)

    if ctx is not None:
        return get_active_vault(ctx)

    return get_configuration().get()


@asynccontextmanager
async def document_guard(path: Path) -> AsyncIterator[None]:
    """Serialize read-modify-write operations on one document.

    Operations on the same resolved path wait for each other; operations on
    different paths run concurrently.
    """
    key = str(path.resolve(strict=False))
    lock = _DOCUMENT_LOCKS.setdefault(key, asyncio.Lock())
    _DOCUMENT_USERS[key] = _DOCUMENT_USERS.get(key, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _DOCUMENT_USERS[key] -= 1
        if not _DOCUMENT_USERS[key]:
            del _DOCUMENT_USERS[key]
            del _DOCUMENT_LOCKS[key]


def in_flight_paths() -> list[str]:
    """Return the documents that currently have an operation in progress."""
    return sorted(key for key, lock in _DOCUMENT_LOCKS.items() if lock.locked())
