"""
service.py

Business workflows over the catalog, built from the pure core:

  match_recipes        page of catalog -> overlap score -> sort
  search_and_filter    bounded fetch from offset 0 -> filter -> slice
  match_with_filters   search_and_filter("") -> overlap score -> sort
  get_suggestions      favorites -> tag weights -> broad fetch -> rank
  detect_and_match     image -> caption -> ingredients -> match_with_filters

Filter-then-paginate: search_and_filter filters a bounded fetch
(max(limit+offset, search_fetch_min), capped at search_fetch_max) and then
slices it. A filter can therefore return fewer rows than a page even when
more matches exist deeper in the catalog.

Storage errors from the repository propagate to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from recipe_match.catalog.repository import CatalogRepository
from recipe_match.config import Settings
from recipe_match.ingredients.caption_parser import CaptionParser
from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.logging_utils import get_logger
from recipe_match.recommendation.filters import filter_recipes
from recipe_match.recommendation.preferences import build_weights
from recipe_match.recommendation.recommender import rank
from recipe_match.recommendation.scoring import score_overlap, sort_by_score
from recipe_match.schema import FilterCriteria, Recipe, ScoredRecipe
from recipe_match.vision.captioning import Captioner, DetectionResult, detect_ingredients

logger = get_logger("service")


@dataclass
class DetectionMatch:
    detection: DetectionResult
    matches: List[ScoredRecipe]


class RecipeService:
    def __init__(
        self,
        catalog: CatalogRepository,
        settings: Optional[Settings] = None,
        parser: Optional[CaptionParser] = None,
        captioner: Optional[Captioner] = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings if settings is not None else Settings()
        self.parser = parser if parser is not None else CaptionParser()
        self.captioner = captioner

    @property
    def normalizer(self) -> IngredientNormalizer:
        return self.parser.normalizer

    # ------------------------------------------------------------------
    # Ingredient matching
    # ------------------------------------------------------------------
    def match_recipes(self, detected: Iterable[str], limit: int = 20, offset: int = 0) -> List[ScoredRecipe]:
        """Score one catalog page against the detected ingredients."""
        page = self.catalog.list_recipes(limit, offset)
        return sort_by_score(score_overlap(detected, page, normalizer=self.normalizer))

    def search_and_filter(
        self,
        query: str = "",
        criteria: Optional[FilterCriteria] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Recipe]:
        if limit <= 0:
            return []
        offset = max(offset, 0)

        fetch_limit = max(limit + offset, self.settings.search_fetch_min)
        fetch_limit = min(fetch_limit, self.settings.search_fetch_max)

        fetched = self.catalog.search_recipes(query, fetch_limit, 0)
        filtered = filter_recipes(fetched, criteria)

        logger.info(
            "Filtered %d of %d fetched recipes (query=%r, criteria=%s)",
            len(filtered),
            len(fetched),
            query,
            criteria,
            extra={
                "invoking_func": "search_and_filter",
                "invoking_purpose": "Filter a bounded catalog fetch, then paginate",
                "next_step": f"Slice [{offset}:{offset + limit}]",
                "resolution": "",
            },
        )
        return filtered[offset : offset + limit]

    def match_with_filters(
        self,
        ingredients: Iterable[str],
        criteria: Optional[FilterCriteria] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[ScoredRecipe]:
        """Filter, then score by ingredient overlap; zero scores are kept."""
        candidates = self.search_and_filter("", criteria, limit, offset)
        return sort_by_score(score_overlap(ingredients, candidates, normalizer=self.normalizer))

    def match_text(
        self,
        text: str,
        criteria: Optional[FilterCriteria] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[ScoredRecipe]:
        """Free text ("tomatoes, basil and pasta") -> canonical ingredients -> matches."""
        return self.match_with_filters(self.parser.extract_ingredients(text), criteria, limit, offset)

    # ------------------------------------------------------------------
    # Personalised suggestions
    # ------------------------------------------------------------------
    def get_suggestions(self, user_id: Any, limit: int = 10) -> List[ScoredRecipe]:
        if limit <= 0:
            return []

        favorites = self.catalog.list_favorite_recipes(user_id)
        weights = build_weights(favorites)
        if not weights:
            logger.info(
                "No favorite tags for user %s; nothing to suggest",
                user_id,
                extra={
                    "invoking_func": "get_suggestions",
                    "invoking_purpose": "Personalised suggestions from favorite tags",
                    "next_step": "Return empty list",
                    "resolution": "User needs at least one tagged favorite",
                },
            )
            return []

        pool = max(limit * 5, self.settings.suggestion_pool_min)
        candidates = self.search_and_filter("", None, pool, 0)
        suggestions = rank(weights, candidates, limit)

        logger.info(
            "Built %d suggestions for user %s from %d favorites",
            len(suggestions),
            user_id,
            len(favorites),
            extra={
                "invoking_func": "get_suggestions",
                "invoking_purpose": "Personalised suggestions from favorite tags",
                "next_step": "Return suggestions to caller",
                "resolution": "",
            },
        )
        return suggestions

    # ------------------------------------------------------------------
    # Image detection
    # ------------------------------------------------------------------
    def detect(self, image_bytes: bytes, filename: str = "") -> DetectionResult:
        if self.captioner is None:
            raise RuntimeError("RecipeService was built without a captioner")
        return detect_ingredients(
            self.captioner,
            self.parser,
            image_bytes,
            filename,
            max_bytes=self.settings.max_image_bytes,
        )

    def detect_and_match(
        self,
        image_bytes: bytes,
        filename: str = "",
        criteria: Optional[FilterCriteria] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> DetectionMatch:
        detection = self.detect(image_bytes, filename)
        matches = self.match_with_filters(detection.ingredients, criteria, limit, offset)
        return DetectionMatch(detection=detection, matches=matches)
