from __future__ import annotations

"""
caption_parser.py

Purpose:
    Turn free text (an image caption such as "a bowl of fresh chopped
    tomatoes and onions", or whatever the user typed) into an ordered,
    de-duplicated list of canonical ingredient names.

Algorithm:
    1. lowercase
    2. blunt noise removal: every noise string is replaced by a single space
       wherever it occurs, including inside longer words ("pasta " loses its
       "a "). This matches the behaviour recipes were tuned against.
    3. anything that is not [a-z0-9] or whitespace becomes a space; split
    4. at each position try the 1-, 2- then 3-word phrase against the
       synonym table; first occurrence of a canonical name wins
    Unrecognised words are dropped. Empty input gives [].
"""

import re
from typing import List, Optional, Sequence, Tuple

from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.logging_utils import get_logger

logger = get_logger("caption_parser")

# Applied in this order. Trailing spaces are part of each entry.
NOISE_WORDS: Tuple[str, ...] = (
    # articles / conjunctions / prepositions
    "a ", "an ", "the ", "with ", "and ", "or ", "of ", "in ", "on ",
    # preparation
    "fresh ", "dried ", "chopped ", "sliced ", "diced ", "minced ",
    "cooked ", "raw ", "grilled ", "fried ", "baked ", "roasted ",
    # size / portion
    "large ", "small ", "medium ", "whole ", "half ", "piece ",
    # units
    "cup ", "cups ", "tablespoon ", "teaspoon ", "pound ", "ounce ",
    # serving vessels
    "serving ", "plate ", "bowl ", "dish ", "meal ",
)

MAX_PHRASE_WORDS = 3

_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s]")


class CaptionParser:
    def __init__(
        self,
        normalizer: Optional[IngredientNormalizer] = None,
        noise_words: Optional[Sequence[str]] = None,
    ) -> None:
        self.normalizer = normalizer if normalizer is not None else IngredientNormalizer()
        self.noise_words = tuple(noise_words) if noise_words is not None else NOISE_WORDS

    def remove_noise(self, text: str) -> str:
        result = text
        for word in self.noise_words:
            result = result.replace(word, " ")
        return result

    @staticmethod
    def split_words(text: str) -> List[str]:
        return _NON_TOKEN_RE.sub(" ", text).split()

    def extract_ingredients(self, text: Optional[str]) -> List[str]:
        if not text or not text.strip():
            return []

        words = self.split_words(self.remove_noise(text.lower()))

        max_words = min(self.normalizer.table.max_phrase_words, MAX_PHRASE_WORDS)

        seen = set()
        ingredients: List[str] = []
        for i in range(len(words)):
            for size in range(1, max_words + 1):
                if i + size > len(words):
                    break
                phrase = " ".join(words[i : i + size])
                canonical = self.normalizer.lookup(phrase)
                if canonical is None or canonical in seen:
                    continue
                seen.add(canonical)
                ingredients.append(canonical)

        logger.debug(
            "Extracted %d ingredients from %d words",
            len(ingredients),
            len(words),
            extra={
                "invoking_func": "extract_ingredients",
                "invoking_purpose": "Parse caption text into canonical ingredients",
                "next_step": "Return ingredient list to caller",
                "resolution": "",
            },
        )
        return ingredients
