"""
Recommendation layer (recipe_match)

Pure, request-scoped functions over in-memory Recipe snapshots:
  - filter_recipes: conjunctive structured filter (diet, difficulty, cuisine, time)
  - score_overlap: ingredient overlap scoring (zero scores kept)
  - build_weights: tag-frequency profile from favorites
  - rank: preference-weighted ranking (zero scores dropped)

None of these touch storage; the service layer feeds them catalog snapshots.
"""
from recipe_match.recommendation.filters import filter_recipes
from recipe_match.recommendation.scoring import score_overlap, sort_by_score
from recipe_match.recommendation.preferences import build_weights
from recipe_match.recommendation.recommender import RecipeRecommender, rank

__all__ = [
    "filter_recipes",
    "score_overlap",
    "sort_by_score",
    "build_weights",
    "rank",
    "RecipeRecommender",
]
