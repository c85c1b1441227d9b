"""In-memory similarity index over catalog embeddings.

Classes:
    EmbeddingRecord: Immutable (id, vector) pair produced once per catalog item.
    ScoredMatch: A ranked hit returned by ``SimilarityIndex.scored``.
    SimilarityIndex: Read-only cosine-similarity index with a stable, catalog-ordered tie-break.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Sequence

import numpy as np

from moviecore.schemas import Movie
from moviecore.services.embedding import TextEmbedder, Vector, cosine_similarity


@dataclass(frozen=True, slots=True)
class EmbeddingRecord:
    id: Hashable
    vector: Vector


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    id: Hashable
    similarity: float


def index_text(movie: Movie) -> str:
    return f"{movie.title} {movie.overview}"


class SimilarityIndex:
    """Holds one embedding per catalog item in catalog order.

    The index is never mutated after construction, so concurrent readers need no locking.
    """

    def __init__(self, records: Sequence[EmbeddingRecord]) -> None:
        for record in records:
            record.vector.setflags(write=False)
        self._records: tuple[EmbeddingRecord, ...] = tuple(records)

    @classmethod
    def from_catalog(cls, movies: Sequence[Movie], embedder: TextEmbedder) -> "SimilarityIndex":
        return cls([EmbeddingRecord(id=movie.id, vector=embedder.embed(index_text(movie))) for movie in movies])

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[EmbeddingRecord, ...]:
        return self._records

    def scored(self, query: Vector, limit: int) -> list[ScoredMatch]:
        if limit <= 0 or not self._records:
            return []
        query = np.asarray(query, dtype=np.float64)
        scores = [cosine_similarity(query, record.vector) for record in self._records]
        # sorted() is stable: equal scores keep catalog order.
        order = sorted(range(len(scores)), key=lambda position: -scores[position])
        return [ScoredMatch(self._records[position].id, scores[position]) for position in order[:limit]]

    def top_k(self, query: Vector, limit: int) -> list[Hashable]:
        return [match.id for match in self.scored(query, limit)]
