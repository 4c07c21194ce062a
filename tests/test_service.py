import pytest

from recipe_match.catalog.repository import InMemoryCatalog
from recipe_match.config import Settings
from recipe_match.schema import FilterCriteria
from recipe_match.service import RecipeService
from recipe_match.vision.captioning import CaptionError


class RecordingCatalog(InMemoryCatalog):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.searches = []

    def search_recipes(self, query, limit, offset=0):
        self.searches.append((query, limit, offset))
        return super().search_recipes(query, limit, offset)


class FakeCaptioner:
    provider = "fake"
    model_id = "fake-model"

    def __init__(self, caption):
        self._caption = caption
        self.calls = 0

    def caption(self, image_bytes, filename=""):
        self.calls += 1
        return self._caption


def _ids(rows):
    return [r.id for r in rows]


def test_search_and_filter_fetches_from_offset_zero_then_slices(recipes):
    catalog = RecordingCatalog(recipes)
    service = RecipeService(catalog)

    page = service.search_and_filter("", FilterCriteria(diet="vegetarian"), limit=2, offset=1)

    assert _ids(page) == [4, 5]
    assert catalog.searches == [("", 200, 0)]


def test_filter_runs_over_bounded_fetch_only(recipes):
    catalog = RecordingCatalog(recipes)
    service = RecipeService(catalog, settings=Settings(search_fetch_min=2, search_fetch_max=3))

    # only recipes 1 and 2 are fetched, so 4 and 5 are never seen
    assert _ids(service.search_and_filter("", FilterCriteria(diet="vegetarian"), limit=2)) == [1]

    service.search_and_filter("", None, limit=5, offset=5)
    assert catalog.searches[-1] == ("", 3, 0)


def test_search_and_filter_non_positive_limit(recipes):
    catalog = RecordingCatalog(recipes)
    assert RecipeService(catalog).search_and_filter("", None, limit=0) == []
    assert catalog.searches == []


def test_match_recipes_scores_one_page(recipes):
    service = RecipeService(InMemoryCatalog(recipes))
    out = service.match_recipes(["tomato"], limit=2)
    assert [(s.id, s.score) for s in out] == [(1, 1), (2, 0)]


def test_match_text_uses_canonical_ingredients(recipes):
    service = RecipeService(InMemoryCatalog(recipes))
    out = service.match_text("tomatoes and pasta", limit=10)

    assert [(s.id, s.score) for s in out[:2]] == [(1, 3), (6, 1)]
    assert len(out) == 6
    assert all(s.score == 0 for s in out[2:])


def test_match_with_filters(recipes):
    service = RecipeService(InMemoryCatalog(recipes))
    out = service.match_with_filters(["pasta"], FilterCriteria(cuisine="italian"))
    assert [(s.id, s.score) for s in out] == [(1, 2), (4, 0)]


def test_suggestions_from_favorite_tags(recipes):
    catalog = RecordingCatalog(recipes, favorites={7: [1]})
    service = RecipeService(catalog)

    out = service.get_suggestions(7, limit=10)

    assert [(s.id, s.score) for s in out] == [(1, 2), (4, 1), (5, 1), (6, 1)]
    assert catalog.searches == [("", 100, 0)]


def test_suggestion_pool_grows_with_limit(recipes):
    catalog = RecordingCatalog(recipes, favorites={7: [1]})
    RecipeService(catalog).get_suggestions(7, limit=30)
    assert catalog.searches == [("", 150, 0)]


def test_no_favorites_no_suggestions(recipes):
    catalog = RecordingCatalog(recipes, favorites={7: []})
    assert RecipeService(catalog).get_suggestions(7) == []
    assert catalog.searches == []


def test_detect_and_match(recipes):
    captioner = FakeCaptioner("a plate of chicken with bell peppers")
    service = RecipeService(InMemoryCatalog(recipes), captioner=captioner)

    out = service.detect_and_match(b"\x89PNG", "dinner.png")

    assert out.detection.ingredients == ["chicken", "bell pepper", "pepper"]
    assert out.detection.confidence == 0.85
    assert out.detection.provider == "fake"
    assert out.detection.metadata["filename"] == "dinner.png"
    assert out.detection.metadata["image_size"] == 4
    assert out.matches[0].id == 2
    assert out.matches[0].score == 1


def test_detect_without_captioner(recipes):
    with pytest.raises(RuntimeError):
        RecipeService(InMemoryCatalog(recipes)).detect(b"img")


def test_detect_rejects_oversized_and_empty_images(recipes):
    captioner = FakeCaptioner("tomatoes")
    service = RecipeService(
        InMemoryCatalog(recipes),
        settings=Settings(max_image_size_mb=0),
        captioner=captioner,
    )
    with pytest.raises(CaptionError):
        service.detect(b"img")
    with pytest.raises(CaptionError):
        service.detect(b"")
    assert captioner.calls == 0
