import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from moviecore.core.config import Settings
from moviecore.db.session import build_engine, build_session_factory, init_db
from moviecore.schemas import Movie
from moviecore.services.catalog_client import CatalogError


class FakeCatalog:
    """In-memory stand-in for the TMDB client."""

    is_configured = True

    def __init__(
        self,
        pages: Optional[dict[int, list[Movie]]] = None,
        *,
        failing_pages: tuple[int, ...] = (),
        failing_posters: tuple[str, ...] = (),
        search_results: Optional[list[Movie]] = None,
        search_error: Optional[Exception] = None,
    ) -> None:
        self.pages = pages or {}
        self.failing_pages = set(failing_pages)
        self.failing_posters = set(failing_posters)
        self.search_results = search_results or []
        self.search_error = search_error
        self.page_calls: list[int] = []
        self.poster_calls: list[str] = []
        self.search_calls: list[str] = []
        self.page_gate: Optional[asyncio.Event] = None
        self.poster_gate: Optional[asyncio.Event] = None
        self.page_started = asyncio.Event()

    async def search(self, text: str) -> list[Movie]:
        self.search_calls.append(text)
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results)

    async def fetch_page(self, page: int) -> list[Movie]:
        self.page_calls.append(page)
        self.page_started.set()
        if self.page_gate is not None:
            await self.page_gate.wait()
        if page in self.failing_pages:
            raise CatalogError(f"page {page} unavailable")
        return list(self.pages.get(page, []))

    async def fetch_poster(self, path: str) -> bytes:
        self.poster_calls.append(path)
        if self.poster_gate is not None:
            await self.poster_gate.wait()
        if path in self.failing_posters:
            raise CatalogError(f"poster {path} unavailable")
        return f"poster:{path}".encode()


def make_movie(movie_id: int, title: str = "", overview: str = "", poster_path: Optional[str] = None) -> Movie:
    return Movie(id=movie_id, title=title or f"Movie {movie_id}", overview=overview, poster_path=poster_path)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'state.db'}",
        poster_cache_dir=str(tmp_path / "posters"),
        poster_cache_max_entries=50,
        prefetch_on_startup=False,
        tmdb_api_key=None,
    )


@pytest_asyncio.fixture()
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'prefetch.db'}")
    await init_db(engine)
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture()
def catalog_factory():
    return FakeCatalog


@pytest.fixture()
def movie_factory():
    return make_movie
