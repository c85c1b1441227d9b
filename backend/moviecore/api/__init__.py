"""API router composition for the backend.

The module assembles individual route groups into a single `api_router` that can be mounted on the app.
"""

from fastapi import APIRouter

from moviecore.api.routes import movies_router, posters_router, prefetch_router

api_router = APIRouter()
api_router.include_router(movies_router)
api_router.include_router(posters_router)
api_router.include_router(prefetch_router)

__all__ = ["api_router"]
