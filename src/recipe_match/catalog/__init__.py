"""
Catalog collaborators: read recipe snapshots and favorites for the core.
"""
from recipe_match.catalog.repository import CatalogRepository, InMemoryCatalog, SupabaseCatalog
from recipe_match.catalog.csv_loader import load_recipes_csv

__all__ = ["CatalogRepository", "InMemoryCatalog", "SupabaseCatalog", "load_recipes_csv"]
