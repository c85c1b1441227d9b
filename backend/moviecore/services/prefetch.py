"""Rate-limited background prefetch of catalog posters into the asset cache.

Classes:
    PrefetchStateStore: Persists the completion timestamp that gates new runs.
    PosterPrefetcher: Idempotent, cancellable job that walks catalog pages and caches missing posters.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from moviecore.models import PrefetchRunState
from moviecore.schemas import Movie
from moviecore.services.asset_cache import AssetCache
from moviecore.services.catalog_client import CatalogClient

_LOGGER = logging.getLogger(__name__)

POSTER_PREFETCH_JOB = "poster-prefetch"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class PrefetchStateStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        job: str = POSTER_PREFETCH_JOB,
    ) -> None:
        self._session_factory = session_factory
        self._job = job

    async def load(self) -> Optional[datetime]:
        try:
            async with self._session_factory() as session:
                state = await session.get(PrefetchRunState, self._job)
        except Exception:
            _LOGGER.warning("Failed to load prefetch state for %s", self._job, exc_info=True)
            return None
        return _as_utc(state.last_completed_at) if state is not None else None

    async def save(self, completed_at: datetime) -> None:
        stored = completed_at.astimezone(timezone.utc)
        try:
            async with self._session_factory() as session:
                state = await session.get(PrefetchRunState, self._job)
                if state is None:
                    state = PrefetchRunState(job=self._job, last_completed_at=stored)
                else:
                    state.last_completed_at = stored
                session.add(state)
                await session.commit()
        except Exception:
            _LOGGER.warning("Failed to persist prefetch state for %s", self._job, exc_info=True)


class PosterPrefetcher:
    """Walks catalog pages from 1 to ``max_pages`` and caches posters that are not cached yet.

    ``start_if_needed`` never starts a second concurrent run and never starts a run
    inside the cool-down window after the last completed one.
    """

    def __init__(
        self,
        cache: AssetCache,
        catalog: CatalogClient,
        state: PrefetchStateStore,
        *,
        max_pages: int = 50,
        cooldown: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
        drain_timeout: float = 5.0,
    ) -> None:
        self._cache = cache
        self._catalog = catalog
        self._state = state
        self._max_pages = max_pages
        self._cooldown = cooldown
        self._clock = clock
        self._drain_timeout = drain_timeout
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task[None]] = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._last_completed_at: Optional[datetime] = None
        self._state_loaded = False
        self._cancel_requested = False

    @property
    def is_running(self) -> bool:
        return self._task is not None

    @property
    def last_completed_at(self) -> Optional[datetime]:
        return self._last_completed_at

    async def start_if_needed(self) -> None:
        async with self._lock:
            if self._task is not None:
                return
            if not self._state_loaded:
                self._last_completed_at = await self._state.load()
                self._state_loaded = True
            last = self._last_completed_at
            if last is not None and abs(self._clock() - last) < self._cooldown:
                return
            self._cancel_requested = False
            self._task = asyncio.create_task(self._run(), name=POSTER_PREFETCH_JOB)
            _LOGGER.info("Poster prefetch started")

    def request_cancel(self) -> None:
        """Ask the active run to stop before its next page."""

        self._cancel_requested = True

    async def wait(self) -> None:
        task = self._task
        if task is not None:
            with suppress(asyncio.CancelledError):
                await asyncio.shield(task)

    async def stop(self) -> None:
        self.request_cancel()
        task = self._task
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        await self._drain_inflight()

    async def _drain_inflight(self) -> None:
        """Give dispatched poster fetches and state saves a bounded window to finish, then cancel them."""

        inflight = set(self._inflight)
        if not inflight:
            return
        _, still_pending = await asyncio.wait(inflight, timeout=self._drain_timeout)
        for leftover in still_pending:
            leftover.cancel()
        if still_pending:
            _LOGGER.info("Cancelled %d unfinished poster prefetch tasks", len(still_pending))
            await asyncio.wait(still_pending)

    async def _run(self) -> None:
        try:
            if await self._walk_pages():
                await self._record_completion()
        finally:
            self._task = None

    async def _walk_pages(self) -> bool:
        for page in range(1, self._max_pages + 1):
            if self._cancel_requested:
                _LOGGER.info("Poster prefetch cancelled before page %d", page)
                return False
            try:
                movies = await self._catalog.fetch_page(page)
            except Exception as exc:
                _LOGGER.warning("Poster prefetch page %d failed: %s", page, exc)
                return True
            if self._cancel_requested:
                _LOGGER.info("Poster prefetch cancelled after fetching page %d", page)
                return False
            await self._cache_posters(movies)
        return True

    async def _cache_posters(self, movies: Sequence[Movie]) -> None:
        pending: list[asyncio.Task[None]] = []
        seen: set[str] = set()
        for movie in movies:
            path = movie.poster_path
            if not path or path in seen or self._cache.has(path):
                continue
            seen.add(path)
            task = self._track(self._fetch_and_store(path))
            pending.append(task)
        if pending:
            # asyncio.wait leaves dispatched fetches running if this run is cancelled.
            await asyncio.wait(pending)

    async def _fetch_and_store(self, path: str) -> None:
        try:
            data = await self._catalog.fetch_poster(path)
        except Exception as exc:
            _LOGGER.warning("Poster prefetch failed for %s: %s", path, exc)
            return
        await self._cache.store(path, data)

    def _track(self, coro) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _record_completion(self) -> None:
        completed_at = self._clock()
        # Memory first, and the save survives cancellation of the run.
        self._last_completed_at = completed_at
        await asyncio.shield(self._track(self._state.save(completed_at)))
        _LOGGER.info("Poster prefetch completed at %s", completed_at.isoformat())
