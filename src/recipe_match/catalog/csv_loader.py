# catalog/csv_loader.py

"""
What this does:
1. Reads a recipe catalog CSV (seed file, Kaggle-style export) with pandas.
2. Handles different column names by using synonym sets (e.g. cook_time,
   cooking_time, cook_time_minutes are all treated as cook time).
3. Produces Recipe snapshots through schema.recipe_from_row(), so tags,
   nullable numbers and blanks are normalised the same way as Supabase rows.

If a file has no id column, ids are 1-based row numbers.
If it has no cook time column but has a total time column, total time is
used as the cook time.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd

from recipe_match.logging_utils import get_logger
from recipe_match.schema import Recipe, recipe_from_row

logger = get_logger("csv_loader")


def _normalize_col_name(col: str) -> str:
    """
    Normalize column names so we can match them across different CSV exports.
    Examples:
      "Recipe Name" -> "recipe_name"
      "Cook-Time(min)" -> "cook_time_min"
    """
    c = str(col).strip().lower()
    for ch in [" ", "-", ".", "(", ")", "[", "]"]:
        c = c.replace(ch, "_")
    while "__" in c:
        c = c.replace("__", "_")
    return c.strip("_")


# Canonical field synonym sets (normalized)
ID_COLS = ["id", "recipe_id", "external_id"]
TITLE_COLS = ["title", "name", "recipe_name", "dish_name"]
TAGS_COLS = ["tags", "tag", "keywords", "labels"]
DIFFICULTY_COLS = ["difficulty", "level", "difficulty_level"]
CUISINE_COLS = ["cuisine", "recipe_cuisine", "cuisine_region", "region"]
DIET_COLS = ["diet_type", "diet", "dietary_preference"]
DESCRIPTION_COLS = ["description", "summary"]
SERVINGS_COLS = ["servings", "serves", "yield"]
PREP_TIME_COLS = [
    "prep_time_minutes",
    "prep_time",
    "preparation_time",
    "prep_time_min",
    "prep_time_mins",
]
COOK_TIME_COLS = [
    "cook_time_minutes",
    "cook_time",
    "cooking_time",
    "cook_time_min",
    "cook_time_mins",
    "cooking_time_min",
    "cooking_time_mins",
]
TOTAL_TIME_COLS = [
    "total_time_minutes",
    "total_time",
    "total_time_min",
    "total_time_mins",
    "ready_in_min",
    "ready_in_mins",
]

FIELD_COLS: Dict[str, List[str]] = {
    "id": ID_COLS,
    "title": TITLE_COLS,
    "tags": TAGS_COLS,
    "difficulty": DIFFICULTY_COLS,
    "cuisine": CUISINE_COLS,
    "diet_type": DIET_COLS,
    "description": DESCRIPTION_COLS,
    "servings": SERVINGS_COLS,
    "prep_time_minutes": PREP_TIME_COLS,
    "cook_time_minutes": COOK_TIME_COLS,
    "total_time_minutes": TOTAL_TIME_COLS,
}


def _find_col(norm_to_orig: Dict[str, str], candidates: List[str]) -> Optional[str]:
    """
    Given a mapping of normalized -> original column names, return the original
    name for the first candidate that exists.
    """
    for cand in candidates:
        if cand in norm_to_orig:
            return norm_to_orig[cand]
    return None


def _clean_id(value, pos: int):
    if value is None or pd.isna(value):
        return pos
    # numpy scalars -> plain Python values
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return int(value)
    return value


def recipes_from_frame(df: pd.DataFrame) -> List[Recipe]:
    norm_to_orig: Dict[str, str] = {}
    for orig in df.columns:
        norm_to_orig.setdefault(_normalize_col_name(orig), orig)

    columns = {field: _find_col(norm_to_orig, cands) for field, cands in FIELD_COLS.items()}

    recipes: List[Recipe] = []
    for pos, (_, row) in enumerate(df.iterrows(), start=1):
        record = {field: (row[col] if col else None) for field, col in columns.items()}
        record["id"] = _clean_id(record["id"], pos)
        if columns["cook_time_minutes"] is None:
            record["cook_time_minutes"] = record["total_time_minutes"]
        recipes.append(recipe_from_row(record))

    return recipes


def load_recipes_csv(path: str) -> List[Recipe]:
    """Load a CSV catalog into Recipe snapshots (file order kept)."""
    df = pd.read_csv(path)
    recipes = recipes_from_frame(df)

    logger.info(
        "Loaded %d recipes from '%s'",
        len(recipes),
        path,
        extra={
            "invoking_func": "load_recipes_csv",
            "invoking_purpose": "Build an in-memory catalog from CSV",
            "next_step": "Wrap recipes in InMemoryCatalog",
            "resolution": "" if recipes else "Check the CSV has a header row and data rows",
        },
    )
    return recipes
