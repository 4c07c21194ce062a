from __future__ import annotations

"""
synonyms.py

Purpose:
    Ingredient synonym table: maps ingredient variants (plurals, alternate
    spellings, regional names, multi-word phrases) to a canonical name.

    The table is an explicit object that callers construct and inject into
    IngredientNormalizer / CaptionParser, so tests can swap in a small
    fixture table and deployments can extend it from a TSV file.

TSV format (one mapping per line, '#' starts a comment line):
    <variant>\t<canonical>
"""

import csv
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union

from recipe_match.logging_utils import get_logger

logger = get_logger("synonyms")

# ----------------------------------------------------------------------
# Built-in vocabulary: canonical name -> variants that resolve to it.
# Every canonical name also resolves to itself.
# ----------------------------------------------------------------------
VEGETABLES: Dict[str, List[str]] = {
    "tomato": ["tomatoes"],
    "onion": ["onions"],
    "garlic": ["garlics"],
    "pepper": ["peppers"],
    "bell pepper": ["bell peppers", "capsicum", "capsicums"],
    "carrot": ["carrots"],
    "potato": ["potatoes"],
    "sweet potato": ["sweet potatoes"],
    "lettuce": [],
    "spinach": [],
    "broccoli": [],
    "cucumber": ["cucumbers"],
    "celery": [],
    "mushroom": ["mushrooms"],
    "zucchini": ["courgette", "courgettes"],
    "eggplant": ["aubergine", "aubergines"],
    "corn": [],
    "peas": [],
    "beans": [],
    "bean": [],
    "cabbage": [],
    "cauliflower": [],
    "asparagus": [],
    "leek": ["leeks"],
    "radish": ["radishes"],
    "beet": ["beets"],
    "squash": [],
    "pumpkin": [],
    "kale": [],
    "arugula": ["rocket"],
    "ginger": [],
}

HERBS: Dict[str, List[str]] = {
    "basil": [],
    "parsley": [],
    "cilantro": ["coriander"],
    "mint": [],
    "thyme": [],
    "rosemary": [],
    "oregano": [],
    "dill": [],
    "chive": ["chives"],
}

PROTEINS: Dict[str, List[str]] = {
    "chicken": ["chicken breast", "chicken thigh", "chicken thighs"],
    "beef": ["ground beef"],
    "pork": [],
    "lamb": [],
    "turkey": [],
    "duck": [],
    "fish": [],
    "salmon": ["salmon fillet"],
    "tuna": [],
    "shrimp": ["shrimps", "prawn", "prawns"],
    "crab": [],
    "lobster": [],
    "egg": ["eggs"],
    "bacon": [],
    "sausage": ["sausages"],
    "ham": [],
    "tofu": [],
}

DAIRY: Dict[str, List[str]] = {
    "cheese": [],
    "milk": [],
    "cream": [],
    "butter": [],
    "yogurt": ["yoghurt"],
    "mozzarella": [],
    "cheddar": [],
    "parmesan": [],
    "feta": [],
    "ricotta": [],
}

GRAINS: Dict[str, List[str]] = {
    "rice": [],
    "pasta": [],
    "noodle": ["noodles"],
    "bread": [],
    "flour": [],
    "oat": ["oats"],
    "quinoa": [],
    "couscous": [],
    "barley": [],
}

FRUITS: Dict[str, List[str]] = {
    "apple": ["apples"],
    "banana": ["bananas"],
    "orange": ["oranges"],
    "lemon": ["lemons"],
    "lime": ["limes"],
    "strawberry": ["strawberries"],
    "blueberry": ["blueberries"],
    "raspberry": ["raspberries"],
    "grape": ["grapes"],
    "mango": ["mangoes"],
    "pineapple": [],
    "watermelon": [],
    "peach": ["peaches"],
    "pear": ["pears"],
    "cherry": ["cherries"],
    "avocado": ["avocados"],
    "coconut": [],
}

LEGUMES_AND_NUTS: Dict[str, List[str]] = {
    "lentil": ["lentils"],
    "chickpea": ["chickpeas", "garbanzo bean", "garbanzo beans"],
    "almond": ["almonds"],
    "walnut": ["walnuts"],
    "peanut": ["peanuts"],
    "cashew": ["cashews"],
    "pistachio": ["pistachios"],
}

CONDIMENTS: Dict[str, List[str]] = {
    "salt": [],
    "sugar": [],
    "oil": [],
    "olive oil": [],
    "vinegar": [],
    "soy sauce": [],
    "honey": [],
    "mustard": [],
    "ketchup": [],
    "mayonnaise": [],
    "hot sauce": ["hot chili sauce", "hot chilli sauce"],
    "chili": ["chilli", "chilies", "chillies"],
    "cumin": [],
    "paprika": [],
    "turmeric": [],
    "cinnamon": [],
    "nutmeg": [],
    "vanilla": [],
}

OTHER: Dict[str, List[str]] = {
    "wine": [],
    "stock": [],
    "broth": [],
    "sauce": [],
    "soup": [],
}

BUILTIN_GROUPS: Dict[str, Dict[str, List[str]]] = {
    "vegetables": VEGETABLES,
    "herbs": HERBS,
    "proteins": PROTEINS,
    "dairy": DAIRY,
    "grains": GRAINS,
    "fruits": FRUITS,
    "legumes_and_nuts": LEGUMES_AND_NUTS,
    "condiments": CONDIMENTS,
    "other": OTHER,
}


def _norm_key(text: str) -> str:
    # Collapse inner whitespace so "olive  oil" and "olive oil" share a key
    return " ".join(str(text).lower().split())


def _resolve_chains(table: Dict[str, str]) -> Dict[str, str]:
    """
    Point every variant at the end of its chain (a -> b -> c becomes
    a -> c, b -> c) and make every canonical name map to itself.
    """
    resolved: Dict[str, str] = {}
    for key, value in table.items():
        seen = {key}
        while value in table and table[value] != value and value not in seen:
            seen.add(value)
            value = table[value]
        resolved[key] = value
    for canonical in set(resolved.values()):
        resolved[canonical] = canonical
    return resolved


class SynonymTable(Mapping[str, str]):
    """
    Read-only variant -> canonical mapping.

    Keys and values are lowercased and whitespace-collapsed on construction.
    Each canonical value is registered as a key mapping to itself, so
    looking up an already-canonical name is always a hit.
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        table: Dict[str, str] = {}
        for variant, canonical in (entries or {}).items():
            key = _norm_key(variant)
            value = _norm_key(canonical)
            if not key or not value:
                continue
            table[key] = value
        self._table = _resolve_chains(table)
        self._max_words = max((len(k.split()) for k in self._table), default=0)

    # Mapping protocol
    def __getitem__(self, key: str) -> str:
        return self._table[_norm_key(key)]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return _norm_key(key) in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"SynonymTable({len(self._table)} entries)"

    @property
    def max_phrase_words(self) -> int:
        """Word count of the longest variant key."""
        return self._max_words

    def merged(self, other: Mapping[str, str]) -> "SynonymTable":
        """Return a new table with `other`'s entries overriding this one's."""
        combined = dict(self._table)
        for variant, canonical in other.items():
            combined[_norm_key(variant)] = _norm_key(canonical)
        return SynonymTable(combined)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_groups(cls, groups: Mapping[str, Mapping[str, List[str]]]) -> "SynonymTable":
        entries: Dict[str, str] = {}
        for group in groups.values():
            for canonical, variants in group.items():
                entries[canonical] = canonical
                for variant in variants:
                    entries[variant] = canonical
        return cls(entries)

    @classmethod
    def default(cls) -> "SynonymTable":
        """A fresh table built from the built-in vocabulary."""
        return cls.from_groups(BUILTIN_GROUPS)

    @classmethod
    def from_tsv(cls, path: Union[str, Path]) -> "SynonymTable":
        """
        Load a two-column variant/canonical TSV.

        Blank rows, '#' comment rows and rows with fewer than two columns
        are skipped.
        """
        tsv_path = Path(path)
        entries: Dict[str, str] = {}
        skipped = 0

        with tsv_path.open("r", encoding="utf-8") as f:
            reader = csv.reader(f, delimiter="\t")
            for raw in reader:
                if not raw or (raw[0] or "").lstrip().startswith("#"):
                    continue
                if len(raw) < 2 or not raw[0].strip() or not raw[1].strip():
                    skipped += 1
                    continue
                entries[raw[0]] = raw[1]

        logger.info(
            "Loaded %d synonym rows from '%s' (skipped=%d)",
            len(entries),
            tsv_path,
            skipped,
            extra={
                "invoking_func": "from_tsv",
                "invoking_purpose": "Load extra ingredient synonyms from TSV",
                "next_step": "Build SynonymTable",
                "resolution": "Check TSV has <variant>\\t<canonical> rows" if skipped else "",
            },
        )
        return cls(entries)


def load_synonym_table(extra_tsv: Optional[Union[str, Path]] = None) -> SynonymTable:
    """Built-in table, optionally extended by a TSV file."""
    table = SynonymTable.default()
    if extra_tsv:
        table = table.merged(SynonymTable.from_tsv(extra_tsv))
    return table
