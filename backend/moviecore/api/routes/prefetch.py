"""Manual trigger for the background poster prefetch."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from moviecore.api.deps import get_container
from moviecore.core.container import ServiceContainer
from moviecore.schemas import PrefetchStatusResponse

router = APIRouter(prefix="/prefetch", tags=["prefetch"])


@router.post("", response_model=PrefetchStatusResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_prefetch(container: ServiceContainer = Depends(get_container)) -> PrefetchStatusResponse:
    # An unconfigured catalog would fail page 1 and start the cool-down.
    if container.catalog_configured:
        await container.prefetcher.start_if_needed()
    return PrefetchStatusResponse(running=container.prefetcher.is_running)
