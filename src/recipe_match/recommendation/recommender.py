"""
recommender.py

Preference-weighted ranking plus a small facade that wires the pure
pieces together for callers that already hold catalog snapshots.

Two scoring paths:
  - match(): ingredient overlap, zero-score recipes kept
  - recommend() / rank(): sum of favorite-tag weights, zero-score
    recipes dropped, truncated to `limit`

Ties: sort is by descending score only. Python's sort is stable, so
recipes with equal scores stay in candidate order (catalog order by id
when the candidates come from a repository).
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.logging_utils import get_logger
from recipe_match.recommendation.filters import filter_recipes
from recipe_match.recommendation.preferences import build_weights
from recipe_match.recommendation.scoring import score_overlap, sort_by_score
from recipe_match.schema import FilterCriteria, PreferenceWeights, Recipe, ScoredRecipe

logger = get_logger(__name__)


def _lower_weights(weights: Optional[PreferenceWeights]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for tag, w in (weights or {}).items():
        key = (tag or "").strip().lower()
        if key:
            out[key] = out.get(key, 0) + int(w)
    return out


def _build_reasons(recipe: Recipe, weights: Dict[str, int]) -> Tuple[str, ...]:
    overlaps: List[Tuple[int, str]] = []
    seen = set()
    for tag in recipe.tags or ():
        key = (tag or "").strip().lower()
        if key in seen:
            continue
        seen.add(key)
        if weights.get(key, 0) > 0:
            overlaps.append((weights[key], key))
    overlaps.sort(key=lambda x: x[0], reverse=True)
    top = overlaps[:3]
    if not top:
        return ()
    return ("Matches your preferences: " + ", ".join(t for _, t in top),)


def rank(weights: PreferenceWeights, candidates: Sequence[Recipe], limit: int) -> List[ScoredRecipe]:
    """
    Score candidates by summed tag weights, drop zero scores, sort
    descending and keep at most `limit`.
    """
    if limit <= 0 or not candidates:
        return []
    w = _lower_weights(weights)
    if not w:
        return []

    scored: List[ScoredRecipe] = []
    for recipe in candidates:
        score = 0
        for tag in recipe.tags or ():
            score += w.get((tag or "").strip().lower(), 0)
        if score > 0:
            scored.append(ScoredRecipe(recipe=recipe, score=score, reasons=_build_reasons(recipe, w)))

    return sort_by_score(scored)[:limit]


class RecipeRecommender:
    def __init__(self, normalizer: Optional[IngredientNormalizer] = None) -> None:
        self.normalizer = normalizer if normalizer is not None else IngredientNormalizer()

    # ------------------------------------------------------------------
    # Public APIs
    # ------------------------------------------------------------------
    def match(
        self,
        ingredients: Iterable[str],
        candidates: Sequence[Recipe],
        criteria: Optional[FilterCriteria] = None,
    ) -> List[ScoredRecipe]:
        """Filter, score by ingredient overlap and sort (zero scores kept)."""
        survivors = filter_recipes(candidates, criteria)
        scored = sort_by_score(score_overlap(ingredients, survivors, normalizer=self.normalizer))
        logger.debug(
            "Scored %d of %d candidates",
            len(scored),
            len(candidates or ()),
            extra={
                "invoking_func": "match",
                "invoking_purpose": "Rank recipes by ingredient overlap",
                "next_step": "Return scored list to caller",
                "resolution": "",
            },
        )
        return scored

    def recommend(
        self,
        favorites: Sequence[Recipe],
        candidates: Sequence[Recipe],
        limit: int = 10,
    ) -> List[ScoredRecipe]:
        """Rank candidates by the tag profile of `favorites`."""
        weights = build_weights(favorites)
        out = rank(weights, candidates, limit)
        logger.debug(
            "Ranked %d suggestions from %d favorites / %d candidates",
            len(out),
            len(favorites or ()),
            len(candidates or ()),
            extra={
                "invoking_func": "recommend",
                "invoking_purpose": "Personalised suggestions from favorite tags",
                "next_step": "Return suggestions to caller",
                "resolution": "Add favorites if the list is empty" if not weights else "",
            },
        )
        return out
