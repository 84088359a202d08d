"""Shared fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import app
from app.quest.engine import QuestEngine
from app.quest.router import get_engine


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

@pytest.fixture()
def engine():
    """Empty engine, no demo goals, default 1000 points per level."""
    return QuestEngine()


@pytest.fixture()
def seeded_engine():
    return QuestEngine(seed_demo_goals=True)


@pytest.fixture()
def save_file(tmp_path):
    """Write the given lines to a save file and return its path."""
    def _write(lines: list[str], name: str = "goals.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture()
def override_engine(seeded_engine, tmp_path, monkeypatch):
    """Swap the process-wide engine for a fresh seeded one saving under tmp_path.

    Caller-supplied save paths resolve under tmp_path and no API key is required.
    """
    monkeypatch.setattr(settings, "save_dir", str(tmp_path))
    monkeypatch.setattr(settings, "api_key", None)
    seeded_engine.default_path = str(tmp_path / "goals.txt")
    app.dependency_overrides[get_engine] = lambda: seeded_engine
    yield seeded_engine
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_engine):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
