"""
Ingredient vocabulary layer.

  - SynonymTable: injected variant -> canonical lookup
  - IngredientNormalizer: single token/phrase normalisation
  - CaptionParser: free text (e.g. image captions) -> canonical ingredients
"""
from recipe_match.ingredients.synonyms import SynonymTable
from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.ingredients.caption_parser import CaptionParser

__all__ = ["SynonymTable", "IngredientNormalizer", "CaptionParser"]
