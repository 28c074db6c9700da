"""Tests for per-document guards and vault resolution."""

import asyncio
from types import SimpleNamespace

import pytest

from vault_tagger import session
from vault_tagger.data_models import TaggerConfiguration, VaultMetadata
from vault_tagger.session import document_guard, in_flight_paths


@pytest.mark.asyncio
async def test_same_document_runs_serially(tmp_path):
    path = tmp_path / "note.md"
    order = []

    async def operation(label):
        async with document_guard(path):
            order.append(f"{label}-start")
            await asyncio.sleep(0.01)
            order.append(f"{label}-end")

    await asyncio.gather(operation("a"), operation("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]
    assert in_flight_paths() == []


@pytest.mark.asyncio
async def test_different_documents_run_concurrently(tmp_path):
    first_entered = asyncio.Event()
    second_entered = asyncio.Event()

    async def first():
        async with document_guard(tmp_path / "a.md"):
            first_entered.set()
            await asyncio.wait_for(second_entered.wait(), timeout=1)

    async def second():
        await first_entered.wait()
        async with document_guard(tmp_path / "b.md"):
            assert len(in_flight_paths()) == 2
            second_entered.set()

    await asyncio.gather(first(), second())


@pytest.mark.asyncio
async def test_guard_released_after_error(tmp_path):
    path = tmp_path / "note.md"
    with pytest.raises(RuntimeError):
        async with document_guard(path):
            raise RuntimeError("boom")

    assert in_flight_paths() == []
    async with document_guard(path):
        assert in_flight_paths() == [str(path.resolve())]


@pytest.fixture
def configuration(tmp_path, monkeypatch):
    vaults = {
        name: VaultMetadata(name=name, path=tmp_path / name, description="", exists=False)
        for name in ("personal", "work")
    }
    config = TaggerConfiguration(default_vault="personal", vaults=vaults)
    monkeypatch.setattr(session, "get_configuration", lambda: config)
    monkeypatch.setattr(session, "_ACTIVE_VAULTS", {})
    return config


def test_resolve_vault_prefers_explicit_name(configuration):
    assert session.resolve_vault("work").name == "work"


def test_resolve_vault_uses_default_without_context(configuration):
    assert session.resolve_vault(None).name == "personal"


def test_active_vault_is_tracked_per_session(configuration):
    ctx_a = SimpleNamespace(session=object())
    ctx_b = SimpleNamespace(session=object())

    session.set_active_vault(ctx_a, "work")

    assert session.resolve_vault(None, ctx_a).name == "work"
    assert session.resolve_vault(None, ctx_b).name == "personal"


def test_unknown_vault(configuration):
    with pytest.raises(ValueError, match="Unknown vault"):
        session.resolve_vault("missing")
