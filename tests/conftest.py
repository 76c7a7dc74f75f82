"""Shared fixtures.

Settings are read at import time, so the environment is prepared before any
``app`` module is imported.
"""

import os

os.environ.setdefault("SC_AUTH_PASSWORD", "test-password")
os.environ.setdefault("SC_JWT_SECRET", "test-secret-with-at-least-32-characters!")
os.environ.setdefault("SC_DB_PATH", ":memory:")

import aiosqlite  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from app.auth import CurrentUser  # noqa: E402
from app.database import create_schema  # noqa: E402
from app.stories.models import UserRole  # noqa: E402
from app.stories.repository import StoryRepository  # noqa: E402


@pytest_asyncio.fixture
async def db():
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await create_schema(conn)
    yield conn
    await conn.close()


@pytest.fixture
def repo(db):
    return StoryRepository(db)


@pytest.fixture
def admin():
    return CurrentUser(id="admin-1", role=UserRole.admin)


@pytest.fixture
def teacher():
    return CurrentUser(id="teacher-1", role=UserRole.teacher)


@pytest.fixture
def student():
    return CurrentUser(id="student-1", role=UserRole.student)

