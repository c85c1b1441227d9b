"""Service layer exports."""

from .asset_cache import AssetCache
from .catalog_client import CatalogClient, CatalogError, TMDBClient
from .embedding import HashingTextEmbedder, TextEmbedder
from .prefetch import PosterPrefetcher, PrefetchStateStore
from .recommendations import RecommendationService
from .similarity import SimilarityIndex

__all__ = [
    "AssetCache",
    "CatalogClient",
    "CatalogError",
    "HashingTextEmbedder",
    "PosterPrefetcher",
    "PrefetchStateStore",
    "RecommendationService",
    "SimilarityIndex",
    "TMDBClient",
    "TextEmbedder",
]
