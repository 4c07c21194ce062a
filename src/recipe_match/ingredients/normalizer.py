from __future__ import annotations

"""
normalizer.py

Purpose:
    Resolve a single ingredient token or phrase ("tomatoes", "Olive Oil",
    "coriander") to its canonical ingredient name via an injected
    SynonymTable. Whole-phrase lookups only; never substring matches.

    normalize() never raises: unknown input comes back lowercased and
    trimmed.
"""

from typing import Optional

from recipe_match.ingredients.synonyms import SynonymTable


class IngredientNormalizer:
    def __init__(self, table: Optional[SynonymTable] = None) -> None:
        self.table = table if table is not None else SynonymTable.default()

    def normalize(self, token: Optional[str]) -> str:
        if token is None:
            return ""
        lower = str(token).strip().lower()
        if not lower:
            return ""
        return self.table.get(lower, lower)

    def is_recognized(self, token: Optional[str]) -> bool:
        if token is None:
            return False
        lower = str(token).strip().lower()
        return bool(lower) and lower in self.table

    def lookup(self, phrase: str) -> Optional[str]:
        """Canonical name for an exact phrase hit, else None."""
        return self.table.get(phrase)
