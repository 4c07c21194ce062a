from __future__ import annotations

"""
filters.py

Hard filters over a candidate list. Every set field of FilterCriteria must
pass (AND); unset fields are no-ops, so empty criteria return the input
unchanged. Survivors keep their relative order.

  - difficulty / cuisine: field present and case-insensitively equal
  - max_time_minutes: cook time present and <= bound
  - diet: one of the recipe's tags equals the diet (diet is just a tag)
"""

from typing import List, Optional, Sequence

from recipe_match.schema import FilterCriteria, Recipe


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _matches(recipe: Recipe, diet: str, difficulty: str, cuisine: str, max_time: Optional[int]) -> bool:
    if difficulty and _norm(recipe.difficulty) != difficulty:
        return False
    if cuisine and _norm(recipe.cuisine) != cuisine:
        return False
    if max_time is not None:
        if recipe.cook_time_minutes is None or recipe.cook_time_minutes > max_time:
            return False
    if diet and not any(_norm(t) == diet for t in recipe.tags or ()):
        return False
    return True


def filter_recipes(candidates: Sequence[Recipe], criteria: Optional[FilterCriteria] = None) -> List[Recipe]:
    if not candidates:
        return []
    if criteria is None or criteria.is_empty():
        return list(candidates)

    diet = _norm(criteria.diet)
    difficulty = _norm(criteria.difficulty)
    cuisine = _norm(criteria.cuisine)
    max_time = criteria.max_time_minutes

    return [r for r in candidates if _matches(r, diet, difficulty, cuisine, max_time)]
