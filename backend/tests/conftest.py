import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

TEST_JWT_SECRET = "x" * 32
os.environ.setdefault("JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("DISABLE_RATE_LIMITS", "true")
# CI may point DATABASE_URL at a file or Postgres; local runs use memory.
DEFAULT_DB_URL = os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Importing models registers every table on Base before create_all runs.
from versus_api import db, models  # noqa: F401,E402


@pytest.fixture(scope="session")
def session_loop():
    """Event loop shared by the sync fixtures that touch the database."""

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    yield


def _forget_engine() -> None:
    db.engine = None
    db.AsyncSessionLocal = None


@pytest.fixture(autouse=True, scope="session")
def ensure_database(session_loop):
    """Start from an empty database and dispose the engine at the end."""

    mp = pytest.MonkeyPatch()
    desired_url = os.getenv("DATABASE_URL") or DEFAULT_DB_URL
    mp.setenv("DATABASE_URL", desired_url)

    if desired_url.startswith("sqlite") and ":memory:" not in desired_url:
        path = desired_url.split("///")[-1]
        if os.path.exists(path):
            os.remove(path)

    _forget_engine()
    yield
    if db.engine is not None:
        session_loop.run_until_complete(db.engine.dispose())
    _forget_engine()
    mp.undo()


async def _reset_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.drop_all)
        await conn.run_sync(db.Base.metadata.create_all)


@pytest.fixture(autouse=True)
def reset_schema(request, session_loop):
    """Recreate every Versus table unless the test is marked ``preserve_schema``."""

    if not request.node.get_closest_marker("preserve_schema"):
        session_loop.run_until_complete(_reset_schema(db.get_engine()))
    yield
