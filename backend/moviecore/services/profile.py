"""Projection of a structured user profile into the embedding space."""

from __future__ import annotations

from moviecore.schemas import UserProfile
from moviecore.services.embedding import TextEmbedder, Vector


def profile_descriptor(profile: UserProfile) -> str:
    """Join location, category label, integer age and favourite titles with single spaces.

    Empty fields still contribute their separator.
    """

    category = profile.gender.value if profile.gender is not None else ""
    age = str(int(profile.age)) if profile.age is not None else ""
    favourites = " ".join(movie.title for movie in profile.favorite_movies)
    return " ".join([profile.location, category, age, favourites])


class ProfileProjector:
    def __init__(self, embedder: TextEmbedder) -> None:
        self._embedder = embedder

    def project(self, profile: UserProfile) -> Vector:
        return self._embedder.embed(profile_descriptor(profile))
