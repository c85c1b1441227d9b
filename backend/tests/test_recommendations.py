import pytest

from moviecore.catalog import DEMO_MOVIES
from moviecore.schemas import Gender, UserProfile
from moviecore.services.catalog_client import CatalogError
from moviecore.services.embedding import HashingTextEmbedder
from moviecore.services.recommendations import RecommendationService
from moviecore.services.similarity import SimilarityIndex, index_text


class SpyIndex(SimilarityIndex):
    def __init__(self, records) -> None:
        super().__init__(records)
        self.calls = 0

    def scored(self, query, limit):
        self.calls += 1
        return super().scored(query, limit)


@pytest.fixture()
def embedder():
    return HashingTextEmbedder()


@pytest.fixture()
def service(embedder):
    return RecommendationService(DEMO_MOVIES, embedder)


def test_empty_profile_returns_catalog_order(service):
    assert [movie.id for movie in service.recommend(UserProfile(), 6)] == [1, 2, 3, 4, 5, 6]
    assert [movie.id for movie in service.recommend(UserProfile(), 4)] == [1, 2, 3, 4]


def test_recommend_returns_each_catalog_item_once(service):
    profile = UserProfile(location="", gender=Gender.PREFER_NOT_TO_SAY, favorite_movies=[DEMO_MOVIES[4]])
    results = service.recommend(profile, 6)
    assert len(results) == 6
    assert {movie.id for movie in results} == {1, 2, 3, 4, 5, 6}


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_autocomplete_skips_the_index(embedder, query):
    spy = SpyIndex(SimilarityIndex.from_catalog(DEMO_MOVIES, embedder).records)
    service = RecommendationService(DEMO_MOVIES, embedder, index=spy)
    assert service.autocomplete(query, 12) == []
    assert spy.calls == 0


def test_autocomplete_ranks_exact_text_first(service):
    dangal = DEMO_MOVIES[2]
    results = service.autocomplete(index_text(dangal), 3)
    assert results[0].id == dangal.id
    assert len(results) == 3


def test_results_are_unique_by_id_keeping_first(embedder, movie_factory):
    catalog = [
        movie_factory(1, "Alpha", "first cut"),
        movie_factory(1, "Alpha", "director's cut"),
        movie_factory(2, "Beta"),
    ]
    service = RecommendationService(catalog, embedder)
    results = service.recommend(UserProfile(), 3)
    assert [movie.id for movie in results] == [1, 2]
    assert results[0].overview == "first cut"


@pytest.mark.asyncio
async def test_search_tops_up_sparse_local_results(embedder, catalog_factory, movie_factory):
    local = [movie_factory(1, "Alpha"), movie_factory(2, "Beta")]
    remote = [movie_factory(2, "Beta remote"), movie_factory(99, "Gamma")]
    catalog = catalog_factory(search_results=remote)
    service = RecommendationService(local, embedder, remote_threshold=4)

    results = await service.search("  gamma  ", 12, catalog)

    assert catalog.search_calls == ["gamma"]
    assert [movie.id for movie in results][-1] == 99
    assert sorted(movie.id for movie in results) == [1, 2, 99]
    assert next(movie for movie in results if movie.id == 2).title == "Beta"


@pytest.mark.asyncio
async def test_search_truncates_to_limit(embedder, catalog_factory, movie_factory):
    remote = [movie_factory(movie_id) for movie_id in range(10, 20)]
    catalog = catalog_factory(search_results=remote)
    service = RecommendationService([movie_factory(1, "Alpha")], embedder, remote_threshold=4)
    results = await service.search("alpha", 5, catalog)
    assert len(results) == 5
    assert results[0].id == 1


@pytest.mark.asyncio
async def test_search_skips_catalog_when_local_results_suffice(service, catalog_factory):
    catalog = catalog_factory()
    results = await service.search("cricket", 12, catalog)
    assert len(results) == 6
    assert catalog.search_calls == []


@pytest.mark.asyncio
async def test_search_surfaces_catalog_failures(embedder, catalog_factory, movie_factory):
    catalog = catalog_factory(search_error=CatalogError("offline"))
    service = RecommendationService([movie_factory(1, "Alpha")], embedder, remote_threshold=4)
    with pytest.raises(CatalogError):
        await service.search("alpha", 12, catalog)


@pytest.mark.asyncio
async def test_blank_search_returns_nothing_without_calls(service, catalog_factory):
    catalog = catalog_factory(search_error=CatalogError("should not be called"))
    assert await service.search("   ", 12, catalog) == []
    assert catalog.search_calls == []
