"""Recommendation and autocomplete facade over the similarity index.

Classes:
    RecommendationService: Profile recommendations, local autocomplete and catalog-backed search.
"""

from __future__ import annotations

import logging
from typing import Hashable, Optional, Sequence

from moviecore.schemas import Movie, UserProfile
from moviecore.services.catalog_client import CatalogClient
from moviecore.services.embedding import TextEmbedder, Vector
from moviecore.services.profile import ProfileProjector
from moviecore.services.similarity import SimilarityIndex
from moviecore.utils.text import unique_by_id

_LOGGER = logging.getLogger(__name__)


class RecommendationService:
    """Side-effect-free matching over a fixed catalog.

    Never touches disk; safe to call concurrently because the index is read-only.
    """

    def __init__(
        self,
        catalog: Sequence[Movie],
        embedder: TextEmbedder,
        *,
        index: Optional[SimilarityIndex] = None,
        projector: Optional[ProfileProjector] = None,
        remote_threshold: int = 4,
    ) -> None:
        self._embedder = embedder
        self._index = index if index is not None else SimilarityIndex.from_catalog(catalog, embedder)
        self._projector = projector or ProfileProjector(embedder)
        self._movies_by_id: dict[Hashable, Movie] = {}
        for movie in catalog:
            self._movies_by_id.setdefault(movie.id, movie)
        self._remote_threshold = remote_threshold

    @property
    def index(self) -> SimilarityIndex:
        return self._index

    def recommend(self, profile: UserProfile, limit: int) -> list[Movie]:
        return self._rank(self._projector.project(profile), limit)

    def autocomplete(self, query: str, limit: int) -> list[Movie]:
        trimmed = query.strip()
        if not trimmed:
            return []
        return self._rank(self._embedder.embed(query), limit)

    async def search(self, query: str, limit: int, catalog: CatalogClient) -> list[Movie]:
        """Local autocomplete topped up with catalog search results when local hits are sparse.

        Catalog failures propagate as ``CatalogError``; an empty list always means "no matches".
        """

        trimmed = query.strip()
        if not trimmed:
            return []
        combined = self.autocomplete(trimmed, limit)
        if len(combined) < self._remote_threshold:
            remote = await catalog.search(trimmed)
            _LOGGER.debug("Catalog search for %r returned %d movies", trimmed, len(remote))
            combined = unique_by_id([*combined, *remote])
        return combined[: max(limit, 0)]

    def _rank(self, query: Vector, limit: int) -> list[Movie]:
        ranked = [self._movies_by_id[movie_id] for movie_id in self._index.top_k(query, limit)]
        return unique_by_id(ranked)
