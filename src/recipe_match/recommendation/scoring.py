from __future__ import annotations

"""
scoring.py

Ingredient overlap scoring.

    score = (# recipe tags whose normalised form is in the ingredient set)
          + (# ingredients that appear as a substring of the lowercased title)

Plain membership / substring tests, no fuzzy matching. Zero-score recipes
stay in the output; callers decide whether to drop them. Output order
follows the input; use sort_by_score() for the descending order.
"""

from typing import Iterable, List, Optional, Sequence

from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.schema import Recipe, ScoredRecipe, to_ingredient_set


def _tag_form(tag: str, normalizer: Optional[IngredientNormalizer]) -> str:
    if normalizer is not None:
        return normalizer.normalize(tag)
    return (tag or "").strip().lower()


def score_overlap(
    ingredients: Iterable[str],
    candidates: Sequence[Recipe],
    normalizer: Optional[IngredientNormalizer] = None,
) -> List[ScoredRecipe]:
    """
    Score every candidate against the ingredient set.

    `normalizer`, when given, resolves each tag through the synonym table
    first ("tomatoes" tag matches "tomato"); otherwise tags are only
    lowercased and trimmed.
    """
    wanted = to_ingredient_set(ingredients)
    out: List[ScoredRecipe] = []

    for recipe in candidates or ():
        tag_hits: List[str] = []
        for tag in recipe.tags or ():
            form = _tag_form(tag, normalizer)
            if form in wanted:
                tag_hits.append(form)

        title = (recipe.title or "").lower()
        title_hits = sorted(i for i in wanted if i in title)

        score = len(tag_hits) + len(title_hits)
        reasons = []
        used = sorted(set(tag_hits) | set(title_hits))
        if used:
            reasons.append("Uses: " + ", ".join(used))

        out.append(ScoredRecipe(recipe=recipe, score=score, reasons=tuple(reasons)))

    return out


def sort_by_score(scored: Iterable[ScoredRecipe]) -> List[ScoredRecipe]:
    """Descending score; equal scores keep their input order."""
    return sorted(scored, key=lambda s: s.score, reverse=True)
