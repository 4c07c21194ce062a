from pathlib import Path
from typing import Any, Dict, List

import pytest

from recipe_match.ingredients.synonyms import SynonymTable
from recipe_match.schema import Recipe

SEED_CSV = Path(__file__).resolve().parents[1] / "data" / "seed_recipes.csv"


@pytest.fixture
def seed_csv() -> Path:
    return SEED_CSV


@pytest.fixture
def small_table() -> SynonymTable:
    return SynonymTable(
        {
            "tomatoes": "tomato",
            "spring onions": "scallion",
            "hot chili sauce": "chili sauce",
        }
    )


@pytest.fixture
def recipes() -> List[Recipe]:
    return [
        Recipe(1, "Simple Tomato Pasta", ("vegetarian", "pasta"), "Easy", "Italian", 20),
        Recipe(2, "Chicken Stir Fry", ("meat", "stir-fry"), "Medium", "Asian", 25),
        Recipe(3, "Vegan Chickpea Curry", ("vegan", "curry"), "Medium", "Indian", 40),
        Recipe(4, "Mushroom Risotto", ("vegetarian", "risotto"), "Hard", "Italian", 50),
        Recipe(5, "Mystery Stew", ("Vegetarian", "stew")),
        Recipe(6, "Shrimp Scampi", ("seafood", "pasta"), "Medium", "Seafood", 20),
    ]


# ----------------------------------------------------------------------
# Minimal stand-in for the supabase-py query builder
# ----------------------------------------------------------------------
class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    def __init__(self, table: str, rows: List[Dict[str, Any]]) -> None:
        self.table = table
        self.rows = [dict(r) for r in rows]
        self.calls: List[tuple] = []

    def select(self, columns: str) -> "FakeQuery":
        self.calls.append(("select", columns))
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.calls.append(("eq", column, value))
        self.rows = [r for r in self.rows if r.get(column) == value]
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        self.calls.append(("in_", column, list(values)))
        self.rows = [r for r in self.rows if r.get(column) in values]
        return self

    def or_(self, filters: str) -> "FakeQuery":
        self.calls.append(("or_", filters))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.calls.append(("order", column, desc))
        self.rows.sort(key=lambda r: r.get(column), reverse=desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.calls.append(("range", start, end))
        self.rows = self.rows[start : end + 1]
        return self

    def limit(self, n: int) -> "FakeQuery":
        self.calls.append(("limit", n))
        self.rows = self.rows[:n]
        return self

    def execute(self) -> FakeResponse:
        return FakeResponse(list(self.rows))


class FakeSupabaseClient:
    def __init__(self, tables: Dict[str, List[Dict[str, Any]]]) -> None:
        self.tables = tables
        self.queries: List[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        q = FakeQuery(name, self.tables.get(name, []))
        self.queries.append(q)
        return q


@pytest.fixture
def fake_supabase() -> FakeSupabaseClient:
    return FakeSupabaseClient(
        {
            "recipes": [
                {
                    "id": 1,
                    "title": "Simple Tomato Pasta",
                    "cuisine": "Italian",
                    "difficulty": "Easy",
                    "cook_time_minutes": 20,
                    "servings": 2,
                    "tags": ["vegetarian", "pasta"],
                    "description": None,
                },
                {
                    "id": 2,
                    "title": "Chicken Stir Fry",
                    "cuisine": "Asian",
                    "difficulty": "Medium",
                    "cook_time_minutes": None,
                    "servings": None,
                    "tags": ["Meat", " stir-fry", "meat"],
                },
                {
                    "id": 3,
                    "title": "Lentil Soup",
                    "cuisine": None,
                    "difficulty": None,
                    "cook_time_minutes": 45,
                    "tags": None,
                },
            ],
            "favorites": [
                {"user_id": 7, "recipe_id": 1, "created_at": "2024-01-01T00:00:00Z"},
                {"user_id": 7, "recipe_id": 2, "created_at": "2024-03-01T00:00:00Z"},
                {"user_id": 7, "recipe_id": 99, "created_at": "2024-02-01T00:00:00Z"},
                {"user_id": 8, "recipe_id": 3, "created_at": "2024-02-01T00:00:00Z"},
            ],
        }
    )
