"""
recipe_match

Ingredient-based recipe retrieval and ranking:
  - ingredients: synonym table, normaliser, caption parser
  - recommendation: filter, overlap scorer, preference profiler, ranker
  - catalog / vision: collaborators feeding the core
  - service: end-to-end workflows
"""
from recipe_match.schema import FilterCriteria, Recipe, ScoredRecipe

__all__ = ["FilterCriteria", "Recipe", "ScoredRecipe"]

__version__ = "0.1.0"
