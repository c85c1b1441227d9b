"""Convenience exports for schemas."""

from .api import MovieListResponse, PrefetchStatusResponse, RecommendRequest
from .movie import Gender, Movie, UserProfile

__all__ = [
    "Gender",
    "Movie",
    "MovieListResponse",
    "PrefetchStatusResponse",
    "RecommendRequest",
    "UserProfile",
]
