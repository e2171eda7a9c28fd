"""
Test configuration and fixtures.

The service reads its settings at import time, so the environment is pointed
at a throwaway SQLite file before anything from shortify is imported.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"shortify_test_{os.getpid()}.db"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256-usage"
os.environ["BASE_URL"] = "http://sho.rt"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from shortify.core.security import create_access_token  # noqa: E402
from shortify.db import models  # noqa: E402, F401
from shortify.db.models import Url, Visit  # noqa: E402
from shortify.db.session import async_session_maker  # noqa: E402
from shortify.main import app  # noqa: E402

sync_engine = create_engine(f"sqlite:///{TEST_DB_PATH}")


@pytest.fixture
def database():
    """Fresh schema for every test."""
    SQLModel.metadata.create_all(sync_engine)
    yield
    SQLModel.metadata.drop_all(sync_engine)


@pytest_asyncio.fixture
async def session(database):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def client(database):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(caller_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(caller_id)}"}


async def add_url(session, slug: str, creator_id=None, **fields) -> Url:
    url = Url(slug=slug, long_url=fields.pop("long_url", "https://example.com"),
              creator_id=creator_id, **fields)
    session.add(url)
    await session.commit()
    await session.refresh(url)
    return url


def make_visit(url: Url, **fields) -> Visit:
    values = {
        "url_id": url.id,
        "slug": url.slug,
        "visited_at": datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        "ip_address": "10.0.0.1",
        "referrer": None,
        "user_agent": "UA-test",
        "browser": None,
        "os": None,
        "device_type": "desktop",
    }
    values.update(fields)
    return Visit(**values)


def create_url(client, long_url="https://example.com", caller_id=None, **body) -> dict:
    headers = auth_headers(caller_id) if caller_id else {}
    response = client.post("/api/urls", json={"longUrl": long_url, **body}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def visit(client, slug: str, ip: str = "1.1.1.1", user_agent: str = "UA-X", referrer=None):
    headers = {"X-Forwarded-For": ip, "User-Agent": user_agent}
    if referrer:
        headers["Referer"] = referrer
    return client.get(f"/{slug}", headers=headers, follow_redirects=False)
