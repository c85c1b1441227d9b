"""Built-in demo catalog and the poster thumbnails bundled with it."""

from __future__ import annotations

import base64

from moviecore.schemas import Movie

DEMO_MOVIES: tuple[Movie, ...] = (
    Movie(id=1, title="Inception", overview="A mind-bending heist through dreams.", runtime_minutes=148),
    Movie(id=2, title="Lagaan", overview="Villagers challenge the British to a game of cricket.", runtime_minutes=224),
    Movie(id=3, title="Dangal", overview="A father trains his daughters to become wrestlers.", runtime_minutes=161),
    Movie(id=4, title="Mad Max: Fury Road", overview="A high-octane escape across the wasteland.", runtime_minutes=120),
    Movie(id=5, title="Spirited Away", overview="A young girl becomes trapped in a spirit world bathhouse.", runtime_minutes=125),
    Movie(
        id=6,
        title="The Social Network",
        overview="The founding of Facebook sparks friendship and legal battles.",
        runtime_minutes=120,
    ),
)

# 20x30 solid-colour PNG placeholders, keyed by Movie.poster_cache_key.
_THUMBNAILS_B64: dict[str, str] = {
    "demo-1": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mP4GBXFMAAYAKL3MVdZ3X6NAAAAAElFTkSuQmCC",
    "demo-2": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mP4ezqPYQAwAJ3LQlV4V5RpAAAAAElFTkSuQmCC",
    "demo-3": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mPQO1PIMAAYAPF9KospPMGSAAAAAElFTkSuQmCC",
    "demo-4": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mMwmXGbYQAwAIvDMZPLpNuAAAAAAElFTkSuQmCC",
    "demo-5": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mOYHbmNYQAwALFDMe0PynWrAAAAAElFTkSuQmCC",
    "demo-6": "iVBORw0KGgoAAAANSUhEUgAAABQAAAAeCAIAAACjcKk8AAAAD0lEQVR42mP4dXkCwwBgAKu8RufprcLeAAAAAElFTkSuQmCC",
}

BUNDLED_THUMBNAILS: dict[str, bytes] = {key: base64.b64decode(value) for key, value in _THUMBNAILS_B64.items()}
