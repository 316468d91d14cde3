"""Fixtures for CLI tests against a file-backed SQLite database."""

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

import voter_guide.models  # noqa: F401
from voter_guide.models.base import Base


async def _create_schema(url: str) -> None:
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def database_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the CLI at a fresh SQLite file with the schema created."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'voter_guide.db'}"
    asyncio.run(_create_schema(url))
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("DATABASE_SCHEMA", raising=False)
    return url


@pytest.fixture
def seed_file(tmp_path: Path, seed_document: dict[str, Any]) -> Path:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed_document), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _no_log_sinks():
    """Keep the CLI callback from binding log sinks to the runner's captured streams."""
    with patch("voter_guide.cli.app.setup_logging"):
        yield
