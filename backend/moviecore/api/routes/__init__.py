"""Route exports for the API layer."""

from .movies import router as movies_router
from .posters import router as posters_router
from .prefetch import router as prefetch_router

__all__ = ["movies_router", "posters_router", "prefetch_router"]
