from __future__ import annotations

"""
schema.py

Purpose:
    Shared dataclasses for the ingredient-based retrieval and ranking engine.

    These are the "internal contracts" between:
      - catalog collaborators (Supabase, CSV, in-memory),
      - the core (normaliser, parser, filter, scorer, profiler, ranker),
      - outer layers (CLI, HTTP) that display ScoredRecipe rows.

    Nothing in this module talks to Supabase directly. All objects are
    request-scoped snapshots; the core never mutates them.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

# tag -> frequency among a user's favorites
PreferenceWeights = Dict[str, int]

# lowercase, trimmed ingredient names
IngredientSet = FrozenSet[str]


@dataclass(frozen=True)
class Recipe:
    """Immutable catalog entry as read into the core."""

    id: Any
    title: str
    tags: Tuple[str, ...] = ()
    difficulty: Optional[str] = None
    cuisine: Optional[str] = None
    cook_time_minutes: Optional[int] = None

    # Display-only fields carried through from storage
    description: Optional[str] = None
    diet_type: Optional[str] = None
    servings: Optional[int] = None
    prep_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None


@dataclass(frozen=True)
class FilterCriteria:
    """Optional structured constraints; None (or blank) means no constraint."""

    diet: Optional[str] = None
    difficulty: Optional[str] = None
    cuisine: Optional[str] = None
    max_time_minutes: Optional[int] = None

    def is_empty(self) -> bool:
        return (
            not _blank_to_none(self.diet)
            and not _blank_to_none(self.difficulty)
            and not _blank_to_none(self.cuisine)
            and self.max_time_minutes is None
        )

    def merge(self, other: "FilterCriteria") -> "FilterCriteria":
        """Combine two criteria; fields set on `other` win."""
        return FilterCriteria(
            diet=_blank_to_none(other.diet) or self.diet,
            difficulty=_blank_to_none(other.difficulty) or self.difficulty,
            cuisine=_blank_to_none(other.cuisine) or self.cuisine,
            max_time_minutes=(
                other.max_time_minutes
                if other.max_time_minutes is not None
                else self.max_time_minutes
            ),
        )


@dataclass(frozen=True)
class ScoredRecipe:
    recipe: Recipe
    score: int = 0
    # Short human-readable explanations ("Uses: tomato, basil")
    reasons: Tuple[str, ...] = ()

    @property
    def id(self) -> Any:
        return self.recipe.id

    @property
    def title(self) -> str:
        return self.recipe.title

    def to_dict(self) -> Dict[str, Any]:
        r = self.recipe
        return {
            "id": r.id,
            "title": r.title,
            "score": self.score,
            "reasons": list(self.reasons),
            "tags": list(r.tags),
            "difficulty": r.difficulty,
            "cuisine": r.cuisine,
            "cook_time_minutes": r.cook_time_minutes,
            "description": r.description,
            "diet_type": r.diet_type,
            "servings": r.servings,
            "prep_time_minutes": r.prep_time_minutes,
            "total_time_minutes": r.total_time_minutes,
        }


# ----------------------------------------------------------------------
# Ingest helpers (nullable storage values -> Optional fields)
# ----------------------------------------------------------------------
def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    # pandas hands us float('nan') for empty cells
    return isinstance(value, float) and math.isnan(value)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def clean_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return _blank_to_none(str(value))


def clean_minutes(value: Any) -> Optional[int]:
    """Parse a non-negative integer; anything else becomes None."""
    if _is_missing(value) or isinstance(value, bool):
        return None
    try:
        s = str(value).strip().lower()
        for token in ("minutes", "minute", "mins", "min"):
            s = s.replace(token, "")
        n = int(float(s.strip()))
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n >= 0 else None


_TAG_SPLIT_RE = re.compile(r"[,;|]")


def parse_tags(value: Any) -> Tuple[str, ...]:
    """
    Normalise a tags value into lowercase, trimmed, de-duplicated tags.

    Accepts a list/tuple/set, a Postgres array literal ("{a,b}"), a list
    literal ("['a', 'b']") or a plain delimited string ("a, b").
    Order of first occurrence is kept.
    """
    if _is_missing(value):
        return ()

    if isinstance(value, (list, tuple, set, frozenset)):
        raw_items = [str(v) for v in value if not _is_missing(v)]
    else:
        text = str(value).strip().strip("{}[]")
        raw_items = _TAG_SPLIT_RE.split(text)

    seen = set()
    out = []
    for item in raw_items:
        tag = item.strip().strip("'\"").strip().lower()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        out.append(tag)
    return tuple(out)


def recipe_from_row(row: Mapping[str, Any]) -> Recipe:
    """
    Build a Recipe from a storage row (Supabase dict, CSV record, seed data).

    Nullable columns (None / NaN / blank) become None; tags are
    normalised with parse_tags().
    """
    return Recipe(
        id=row.get("id"),
        title=clean_text(row.get("title")) or "",
        tags=parse_tags(row.get("tags")),
        difficulty=clean_text(row.get("difficulty")),
        cuisine=clean_text(row.get("cuisine")),
        cook_time_minutes=clean_minutes(row.get("cook_time_minutes")),
        description=clean_text(row.get("description")),
        diet_type=clean_text(row.get("diet_type")),
        servings=clean_minutes(row.get("servings")),
        prep_time_minutes=clean_minutes(row.get("prep_time_minutes")),
        total_time_minutes=clean_minutes(row.get("total_time_minutes")),
    )


def to_ingredient_set(names: Optional[Iterable[Any]]) -> IngredientSet:
    """Lowercase, trim and de-duplicate ingredient names; blanks are dropped."""
    if not names:
        return frozenset()
    if isinstance(names, str):
        names = [names]
    out = set()
    for name in names:
        if _is_missing(name):
            continue
        s = str(name).strip().lower()
        if s:
            out.add(s)
    return frozenset(out)
