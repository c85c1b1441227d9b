"""Database engine and session utilities.

Functions:
    build_engine(database_url): Create an async engine, creating the SQLite parent directory when needed.
    build_session_factory(engine): Factory for yielding AsyncSession objects.
    init_db(engine): Create database tables.
"""

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

_SQLITE_PREFIX = "sqlite+aiosqlite:///"


def build_engine(database_url: str) -> AsyncEngine:
    if database_url.startswith(_SQLITE_PREFIX) and ":memory:" not in database_url:
        db_path = Path(database_url.replace(_SQLITE_PREFIX, "")).resolve()
        if db_path.parent.name:
            db_path.parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        database_url,
        echo=False,
        connect_args=(
            {"check_same_thread": False}
            if database_url.startswith("sqlite")
            else {}
        ),
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    # Registers the table metadata before create_all.
    from moviecore import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
