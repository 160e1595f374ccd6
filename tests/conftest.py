"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest
from sqlalchemy.pool import NullPool


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.database import Database  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def database(tmp_path) -> Database:
    """Return a SQLite-backed database with the schema already created.

    ``NullPool`` keeps connections from outliving the event loop that opened
    them, so the same database works from AnyIO tests and ``TestClient``.
    """

    db = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'streamshelf.db'}", poolclass=NullPool
    )
    asyncio.run(db.create_all())
    return db

