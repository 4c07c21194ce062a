"""
repository.py

Catalog read collaborators. The core never does I/O; these classes fetch
Recipe snapshots (and a user's favorites, already resolved to recipes)
and hand them over.

  - InMemoryCatalog: list-backed, used by the CLI (CSV catalogs) and tests
  - SupabaseCatalog: `recipes` / `favorites` tables through supabase-py

Search semantics match the SQL the catalog was built with:
    title ILIKE '%q%' OR q = ANY(tags), ordered by id, LIMIT/OFFSET.
Storage errors are not caught here; they surface to the caller.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from supabase import Client

from recipe_match.logging_utils import get_logger
from recipe_match.schema import Recipe, recipe_from_row

logger = get_logger(__name__)

RECIPE_COLUMNS = (
    "id,title,description,cuisine,difficulty,diet_type,"
    "prep_time_minutes,cook_time_minutes,total_time_minutes,servings,tags"
)

# Characters that would break a PostgREST or= filter expression
_FILTER_UNSAFE_RE = re.compile(r"[,(){}%*\"\\]")


class CatalogRepository(Protocol):
    def list_recipes(self, limit: int, offset: int = 0) -> List[Recipe]:
        ...

    def search_recipes(self, query: str, limit: int, offset: int = 0) -> List[Recipe]:
        ...

    def get_recipe(self, recipe_id: Any) -> Optional[Recipe]:
        ...

    def list_favorite_recipes(self, user_id: Any) -> List[Recipe]:
        ...


def _page(items: Sequence[Recipe], limit: int, offset: int) -> List[Recipe]:
    if limit <= 0:
        return []
    start = max(offset, 0)
    return list(items[start : start + limit])


def _id_key(recipe: Recipe):
    # numeric ids before others; mirrors ORDER BY id for a homogeneous column
    rid = recipe.id
    if isinstance(rid, (int, float)) and not isinstance(rid, bool):
        return (0, rid, "")
    return (1, 0, str(rid))


def _search_hit(recipe: Recipe, q: str) -> bool:
    if not q:
        return True
    return q in (recipe.title or "").lower() or q in recipe.tags


class InMemoryCatalog:
    """List-backed catalog, kept in id order like the SQL catalog."""

    def __init__(
        self,
        recipes: Iterable[Recipe],
        favorites: Optional[Mapping[Any, Sequence[Any]]] = None,
    ) -> None:
        self._recipes: List[Recipe] = sorted(recipes, key=_id_key)
        self._by_id: Dict[Any, Recipe] = {}
        for r in self._recipes:
            self._by_id.setdefault(r.id, r)
        self._favorites: Dict[Any, List[Any]] = {k: list(v) for k, v in (favorites or {}).items()}

    def __len__(self) -> int:
        return len(self._recipes)

    def list_recipes(self, limit: int, offset: int = 0) -> List[Recipe]:
        return _page(self._recipes, limit, offset)

    def search_recipes(self, query: str, limit: int, offset: int = 0) -> List[Recipe]:
        q = (query or "").strip().lower()
        hits = [r for r in self._recipes if _search_hit(r, q)]
        return _page(hits, limit, offset)

    def get_recipe(self, recipe_id: Any) -> Optional[Recipe]:
        return self._by_id.get(recipe_id)

    def list_favorite_recipes(self, user_id: Any) -> List[Recipe]:
        out: List[Recipe] = []
        for rid in self._favorites.get(user_id, []):
            recipe = self._by_id.get(rid)
            if recipe is not None:
                out.append(recipe)
        return out


class SupabaseCatalog:
    def __init__(self, client: Client) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Public APIs
    # ------------------------------------------------------------------
    def list_recipes(self, limit: int, offset: int = 0) -> List[Recipe]:
        if limit <= 0:
            return []
        res = (
            self.client.table("recipes")
            .select(RECIPE_COLUMNS)
            .order("id")
            .range(offset, offset + limit - 1)
            .execute()
        )
        return self._to_recipes(res.data)

    def search_recipes(self, query: str, limit: int, offset: int = 0) -> List[Recipe]:
        if limit <= 0:
            return []
        q = _FILTER_UNSAFE_RE.sub(" ", (query or "")).strip()
        builder = self.client.table("recipes").select(RECIPE_COLUMNS)
        if q:
            builder = builder.or_(f"title.ilike.*{q}*,tags.cs.{{{q.lower()}}}")
        res = builder.order("id").range(offset, offset + limit - 1).execute()

        recipes = self._to_recipes(res.data)
        logger.info(
            "Fetched %d recipes for query=%r (limit=%d offset=%d)",
            len(recipes),
            q,
            limit,
            offset,
            extra={
                "invoking_func": "search_recipes",
                "invoking_purpose": "Read a bounded catalog page for filtering",
                "next_step": "Hand snapshots to the core",
                "resolution": "",
            },
        )
        return recipes

    def get_recipe(self, recipe_id: Any) -> Optional[Recipe]:
        res = self.client.table("recipes").select(RECIPE_COLUMNS).eq("id", recipe_id).limit(1).execute()
        rows = res.data or []
        if not rows:
            return None
        return recipe_from_row(rows[0])

    def list_favorite_recipes(self, user_id: Any) -> List[Recipe]:
        favs = (
            self.client.table("favorites")
            .select("recipe_id,created_at")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        recipe_ids: List[Any] = []
        seen = set()
        for row in favs.data or []:
            rid = row.get("recipe_id")
            if rid is None or rid in seen:
                continue
            seen.add(rid)
            recipe_ids.append(rid)

        if not recipe_ids:
            logger.info(
                "User %s has no favorites",
                user_id,
                extra={
                    "invoking_func": "list_favorite_recipes",
                    "invoking_purpose": "Resolve favorites to recipes for profiling",
                    "next_step": "Return empty list",
                    "resolution": "",
                },
            )
            return []

        res = self.client.table("recipes").select(RECIPE_COLUMNS).in_("id", recipe_ids).execute()
        by_id = {r.id: r for r in self._to_recipes(res.data)}

        # Keep favorites order (newest first); favorites whose recipe is gone are skipped
        out = [by_id[rid] for rid in recipe_ids if rid in by_id]
        if len(out) < len(recipe_ids):
            logger.warning(
                "%d favorite(s) of user %s point at missing recipes",
                len(recipe_ids) - len(out),
                user_id,
                extra={
                    "invoking_func": "list_favorite_recipes",
                    "invoking_purpose": "Resolve favorites to recipes for profiling",
                    "next_step": "Continue with the recipes that exist",
                    "resolution": "Clean up orphaned favorites rows",
                },
            )
        return out

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _to_recipes(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[Recipe]:
        return [recipe_from_row(row) for row in rows or []]
