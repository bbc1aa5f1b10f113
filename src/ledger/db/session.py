from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ledger.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    # Do not log SQL statement parameters outside development; transaction
    # titles and values end up in them.
    return create_async_engine(
        database_url,
        echo=(settings.db_echo if settings.app_env.lower() == "development" else False),
        future=True,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

