# tests/conftest.py
import asyncio
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# --- Make 'orange_market' importable from the repo root ---
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_SECRET = "orange-market-test-secret-0123456789abcdef"
USERS = {1: "alice", 2: "bob"}


def _prepare_test_env() -> str:
    tmp = (ROOT / ".pytest_tmp").absolute()
    tmp.mkdir(exist_ok=True)

    # Throwaway SQLite DB, emptied on every run
    db_file = tmp / "test.sqlite3"
    db_file.unlink(missing_ok=True)
    db_url = f"sqlite+aiosqlite:///{db_file.as_posix()}"
    os.environ["DB_URL"] = db_url

    os.environ["JWT_SECRET"] = TEST_SECRET
    os.environ["JWT_ALG"] = "HS256"
    os.environ["JWT_TTL_SECONDS"] = "3600"
    return db_url


# Settings are built when orange_market is imported: the environment must
# be ready before pytest collects the test modules.
DB_URL = _prepare_test_env()


def _engine(db_url: str):
    # NullPool: every asyncio.run() opens and closes its own connections
    return create_async_engine(db_url, poolclass=NullPool)


async def _seed_users(db_url: str) -> None:
    from orange_market.db.models import User

    engine = _engine(db_url)
    async with async_sessionmaker(engine)() as s:
        s.add_all([User(idx=idx, name=name) for idx, name in USERS.items()])
        await s.commit()
    await engine.dispose()


@pytest.fixture(scope="session")
def client():
    """
    Test client with a throwaway environment:
    - sqlite DB in .pytest_tmp/test.sqlite3 holding the USERS rows
    - test JWT_SECRET
    """
    from orange_market.main import app
    # 'with' runs the lifespan: tables created on startup, engine disposed on shutdown
    with TestClient(app) as c:
        asyncio.run(_seed_users(DB_URL))
        yield c


@pytest.fixture
def codec():
    from orange_market.core.tokens import TokenCodec
    return TokenCodec(secret=TEST_SECRET)


@pytest.fixture
def auth_headers(codec):
    return {"Authorization": f"Bearer {codec.issue(1)}"}


# --- Pipeline against a private DB per test ---
@pytest.fixture
def sessions(tmp_path):
    from orange_market.db.models import Base

    engine = _engine(f"sqlite+aiosqlite:///{(tmp_path / 'pipeline.sqlite3').as_posix()}")

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def pipeline(sessions):
    from orange_market.core.products import ProductPipeline
    return ProductPipeline(sessions)
