"""Deterministic text embeddings and vector similarity.

Classes:
    TextEmbedder: Capability interface for anything that maps text to a fixed-length vector.
    HashingTextEmbedder: Feature-hashing implementation with term-frequency counts and L2 normalisation.

Functions:
    stable_token_hash(token): Process-independent signed 64-bit hash of a token.
    vectorize(text, dim): Convenience wrapper around HashingTextEmbedder.
    cosine_similarity(lhs, rhs): Cosine similarity that degrades to 0 on zero magnitude or shape mismatch.
"""

from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from moviecore.utils.text import alpha_tokens

DEFAULT_DIM = 64

Vector = NDArray[np.float64]


@runtime_checkable
class TextEmbedder(Protocol):
    @property
    def dim(self) -> int: ...

    def embed(self, text: str) -> Vector: ...


def stable_token_hash(token: str) -> int:
    """Return a signed 64-bit hash of *token* that is stable across processes."""

    digest = hashlib.sha256(token.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class HashingTextEmbedder:
    """Bag-of-words feature hashing into ``dim`` buckets."""

    def __init__(self, dim: int = DEFAULT_DIM) -> None:
        if dim <= 0:
            raise ValueError("dim must be positive")
        self._dim = dim

    @property
    def dim(self) -> int:
        return self._dim

    def embed(self, text: str) -> Vector:
        vector = np.zeros(self._dim, dtype=np.float64)
        for token in alpha_tokens(text):
            vector[abs(stable_token_hash(token)) % self._dim] += 1.0
        return _l2_normalise(vector)


def _l2_normalise(vector: Vector) -> Vector:
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return vector
    return vector / norm


def vectorize(text: str, dim: int = DEFAULT_DIM) -> Vector:
    return HashingTextEmbedder(dim).embed(text)


def cosine_similarity(lhs: Vector, rhs: Vector) -> float:
    if lhs.shape != rhs.shape:
        return 0.0
    lhs_mag = float(np.linalg.norm(lhs))
    rhs_mag = float(np.linalg.norm(rhs))
    if lhs_mag == 0.0 or rhs_mag == 0.0:
        return 0.0
    return float(np.dot(lhs, rhs)) / (lhs_mag * rhs_mag)
