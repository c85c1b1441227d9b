"""Poster lookup backed by the on-disk asset cache."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from moviecore.api.deps import get_container
from moviecore.core.container import ServiceContainer

router = APIRouter(prefix="/posters", tags=["posters"])

_LOGGER = logging.getLogger(__name__)

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _media_type(data: bytes) -> str:
    return "image/png" if data.startswith(_PNG_MAGIC) else "image/jpeg"


@router.get("/{key:path}")
async def get_poster(key: str, container: ServiceContainer = Depends(get_container)) -> Response:
    if not key.startswith(("/", "demo-")):
        # Catalog poster paths are absolute, e.g. "/abc123.jpg".
        key = f"/{key}"
    data = container.cache.read(key)
    if data is None:
        if key.startswith("demo-"):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Poster not found")
        try:
            data = await container.catalog.fetch_poster(key)
        except Exception as exc:
            _LOGGER.warning("Poster fetch failed for %s: %s", key, exc)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Poster not found") from exc
        await container.cache.store(key, data)
    return Response(content=data, media_type=_media_type(data))
