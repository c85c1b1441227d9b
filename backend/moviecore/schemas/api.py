"""Request and response payloads for the HTTP surface."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .movie import Movie, UserProfile


class RecommendRequest(BaseModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    limit: Optional[int] = Field(default=None, ge=0, le=100)


class MovieListResponse(BaseModel):
    movies: list[Movie]


class PrefetchStatusResponse(BaseModel):
    running: bool
