"""Async client for the external movie catalog (TMDB) and its poster CDN.

Classes:
    CatalogError: Raised when a catalog or poster request cannot be completed.
    CatalogClient: Protocol consumed by the recommendation service and the prefetcher.
    TMDBClient: httpx-backed implementation with tenacity retry semantics.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from moviecore.core.config import Settings, get_settings
from moviecore.schemas import Movie

_LOGGER = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """The catalog could not be reached or returned an unusable response."""


class _TransientCatalogError(CatalogError):
    pass


class CatalogClient(Protocol):
    async def search(self, text: str) -> list[Movie]: ...

    async def fetch_page(self, page: int) -> list[Movie]: ...

    async def fetch_poster(self, path: str) -> bytes: ...


class TMDBClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        retry_attempts: int = 3,
    ) -> None:
        self._settings = settings or get_settings()
        self._owns_client = client is None
        self._http = client or httpx.AsyncClient(timeout=self._settings.http_timeout_seconds)
        self._retry_attempts = max(retry_attempts, 1)
        api_key = self._settings.tmdb_api_key
        self._api_key = api_key.get_secret_value() if api_key else None

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def search(self, text: str) -> list[Movie]:
        if not text:
            return []
        payload = await self._get_json(
            "search/movie",
            {"query": text, "include_adult": "false"},
        )
        return _parse_results(payload)

    async def fetch_page(self, page: int) -> list[Movie]:
        payload = await self._get_json("movie/popular", {"page": str(page)})
        return _parse_results(payload)

    async def fetch_poster(self, path: str) -> bytes:
        url = f"{self._settings.tmdb_image_base_url.rstrip('/')}/{path.lstrip('/')}"
        response = await self._send(url, params=None)
        return response.content

    async def _get_json(self, endpoint: str, params: dict[str, str]) -> Any:
        if self._api_key is None:
            raise CatalogError("TMDB client not configured. Set TMDB_API_KEY.")
        url = f"{self._settings.tmdb_base_url.rstrip('/')}/{endpoint}"
        response = await self._send(url, params={"api_key": self._api_key, **params})
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError(f"Undecodable response from {endpoint}") from exc

    async def _send(self, url: str, params: Optional[dict[str, str]]) -> httpx.Response:
        retrying = AsyncRetrying(
            wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
            stop=stop_after_attempt(self._retry_attempts),
            retry=retry_if_exception_type(_TransientCatalogError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send_once(url, params)
        raise CatalogError(f"No attempt made for {url}")  # pragma: no cover

    async def _send_once(self, url: str, params: Optional[dict[str, str]]) -> httpx.Response:
        try:
            response = await self._http.get(url, params=params)
        except httpx.TransportError as exc:
            raise _TransientCatalogError(f"Request to {url} failed: {exc}") from exc
        if response.status_code >= 500:
            raise _TransientCatalogError(f"{url} returned {response.status_code}")
        if response.status_code >= 400:
            raise CatalogError(f"{url} returned {response.status_code}")
        return response


def _parse_results(payload: Any) -> list[Movie]:
    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise CatalogError("Catalog response is missing a results list")
    movies: list[Movie] = []
    for item in payload["results"]:
        try:
            movies.append(
                Movie(
                    id=item["id"],
                    title=item.get("title") or "",
                    overview=item.get("overview") or "",
                    poster_path=item.get("poster_path"),
                )
            )
        except (AttributeError, KeyError, TypeError, ValidationError):
            _LOGGER.warning("Skipping malformed catalog item: %r", item)
    return movies
