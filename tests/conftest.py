import sys
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

sys.path.append(str(Path(__file__).parents[1] / "src"))

from ledger.config import Settings
from ledger.models import Category, Transaction  # noqa: F401  (register tables)
from ledger.models.base import Base

SCENARIO_CSV = (
    "title,type,value,category\n"
    "Bus,outcome,50,Transport\n"
    "Salary,income,5000,Salary\n"
    "Bus,outcome,12,Transport\n"
)


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV text into tmp_path and return its path."""

    def _write(content: str, name: str = "transactions.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        delete_source_after_import=True,
        category_create_attempts=3,
    )


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A file-backed SQLite database per test (shared by all its connections)."""
    return f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
async def test_engine(database_url: str):
    """Create tables for tests that need the database, and dispose after.

    Pure unit tests (e.g. the CSV reader) do not request this fixture.
    """
    engine = create_async_engine(database_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Provide test database session with fresh connection per test."""
    async with session_factory() as session:
        yield session
        await session.rollback()
