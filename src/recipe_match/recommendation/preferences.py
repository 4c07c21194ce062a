from __future__ import annotations

"""
preferences.py

Tag-frequency profile from a user's favorites: every tag occurrence on
every favorite adds 1. No normalisation by favorite count or tag rarity.
"""

from typing import Sequence

from recipe_match.schema import PreferenceWeights, Recipe


def build_weights(favorites: Sequence[Recipe]) -> PreferenceWeights:
    weights: PreferenceWeights = {}
    for recipe in favorites or ():
        for tag in recipe.tags or ():
            key = (tag or "").strip().lower()
            if not key:
                continue
            weights[key] = weights.get(key, 0) + 1
    return weights
