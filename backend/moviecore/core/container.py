"""Explicit construction and ownership of the long-lived services.

Classes:
    ServiceContainer: Builds the matching engine, poster cache, catalog client and prefetcher
        for one application lifetime and tears them down again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncEngine

from moviecore.catalog import BUNDLED_THUMBNAILS, DEMO_MOVIES
from moviecore.core.config import Settings
from moviecore.db.session import build_engine, build_session_factory, init_db
from moviecore.schemas import Movie
from moviecore.services import (
    AssetCache,
    CatalogClient,
    HashingTextEmbedder,
    PosterPrefetcher,
    PrefetchStateStore,
    RecommendationService,
    TMDBClient,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    settings: Settings
    engine: AsyncEngine
    recommendations: RecommendationService
    cache: AssetCache
    catalog: CatalogClient
    prefetcher: PosterPrefetcher
    owns_catalog: bool = True

    @classmethod
    async def create(
        cls,
        settings: Settings,
        *,
        catalog: Optional[CatalogClient] = None,
        movies: Sequence[Movie] = DEMO_MOVIES,
    ) -> "ServiceContainer":
        engine = build_engine(settings.database_url)
        await init_db(engine)

        embedder = HashingTextEmbedder(settings.embedding_dim)
        recommendations = RecommendationService(
            movies,
            embedder,
            remote_threshold=settings.search_remote_threshold,
        )

        cache = AssetCache(settings.poster_cache_dir, settings.poster_cache_max_entries)
        written = await cache.bootstrap(BUNDLED_THUMBNAILS)
        if written:
            _LOGGER.info("Seeded %d bundled thumbnails into %s", written, cache.root)

        owns_catalog = catalog is None
        client: CatalogClient = catalog if catalog is not None else TMDBClient(settings)
        prefetcher = PosterPrefetcher(
            cache,
            client,
            PrefetchStateStore(build_session_factory(engine)),
            max_pages=settings.prefetch_max_pages,
            cooldown=timedelta(days=settings.prefetch_cooldown_days),
        )
        return cls(
            settings=settings,
            engine=engine,
            recommendations=recommendations,
            cache=cache,
            catalog=client,
            prefetcher=prefetcher,
            owns_catalog=owns_catalog,
        )

    @property
    def catalog_configured(self) -> bool:
        return bool(getattr(self.catalog, "is_configured", True))

    async def aclose(self) -> None:
        await self.prefetcher.stop()
        if self.owns_catalog and isinstance(self.catalog, TMDBClient):
            await self.catalog.aclose()
        self.cache.close()
        await self.engine.dispose()
