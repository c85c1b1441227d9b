"""Catalog and profile schemas shared by the matching engine and the HTTP layer.

Classes:
    Movie: A catalog item as returned by the catalog client or the demo catalog.
    Gender: Enumerated profile category.
    UserProfile: Structured user attributes read by the profile projector.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Movie(BaseModel):
    id: int
    title: str
    overview: str = ""
    poster_path: Optional[str] = None
    runtime_minutes: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)

    @property
    def display_runtime(self) -> str:
        if self.runtime_minutes is None:
            return ""
        hours, minutes = divmod(self.runtime_minutes, 60)
        return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"

    @property
    def poster_cache_key(self) -> str:
        return self.poster_path or f"demo-{self.id}"

    def poster_url(self, image_base_url: str) -> Optional[str]:
        if not self.poster_path:
            return None
        return f"{image_base_url.rstrip('/')}{self.poster_path}"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    NON_BINARY = "Non-binary"
    PREFER_NOT_TO_SAY = "Prefer not to say"


class UserProfile(BaseModel):
    location: str = ""
    gender: Optional[Gender] = None
    age: Optional[float] = Field(default=None, ge=0)
    favorite_movies: list[Movie] = Field(default_factory=list)
