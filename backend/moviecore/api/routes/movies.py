"""Recommendation, autocomplete and search endpoints.

Endpoints:
    recommend(payload): Rank the catalog against a projected user profile.
    autocomplete(q, limit): Rank the catalog against free text; blank queries return nothing.
    search(q, limit): Autocomplete topped up with catalog search; catalog failures surface as 502.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from moviecore.api.deps import get_container
from moviecore.core.container import ServiceContainer
from moviecore.schemas import MovieListResponse, RecommendRequest
from moviecore.services import CatalogError

router = APIRouter(tags=["movies"])


@router.post("/recommendations", response_model=MovieListResponse)
async def recommend(
    payload: RecommendRequest,
    container: ServiceContainer = Depends(get_container),
) -> MovieListResponse:
    limit = payload.limit if payload.limit is not None else container.settings.recommend_default_limit
    movies = container.recommendations.recommend(payload.profile, limit)
    return MovieListResponse(movies=movies)


@router.get("/autocomplete", response_model=MovieListResponse)
async def autocomplete(
    q: str = Query(default="", max_length=500),
    limit: Optional[int] = Query(default=None, ge=0, le=100),
    container: ServiceContainer = Depends(get_container),
) -> MovieListResponse:
    resolved = limit if limit is not None else container.settings.autocomplete_default_limit
    return MovieListResponse(movies=container.recommendations.autocomplete(q, resolved))


@router.get("/search", response_model=MovieListResponse)
async def search(
    q: str = Query(default="", max_length=500),
    limit: Optional[int] = Query(default=None, ge=0, le=100),
    container: ServiceContainer = Depends(get_container),
) -> MovieListResponse:
    resolved = limit if limit is not None else container.settings.autocomplete_default_limit
    try:
        movies = await container.recommendations.search(q, resolved, container.catalog)
    except CatalogError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return MovieListResponse(movies=movies)
