"""
cli.py

Command line entry point.

Run:
  recipe-match parse "a bowl of fresh chopped tomatoes and onions"
  recipe-match match --catalog data/seed_recipes.csv --ingredients tomato pasta --difficulty easy
  recipe-match match --text "tomatoes, basil and mozzarella"          (Supabase catalog)
  recipe-match suggest --catalog data/seed_recipes.csv --favorite-ids 1 8
  recipe-match suggest --user-id 42                                   (Supabase favorites)
  recipe-match detect photo.jpg --max-time 30

Without --catalog the Supabase catalog is used, which requires
  SUPABASE_URL
  SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY)
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence

from recipe_match.catalog.csv_loader import load_recipes_csv
from recipe_match.catalog.repository import CatalogRepository, InMemoryCatalog, SupabaseCatalog
from recipe_match.config import get_supabase_client, load_settings
from recipe_match.ingredients.caption_parser import CaptionParser
from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.ingredients.synonyms import load_synonym_table
from recipe_match.logging_utils import get_logger
from recipe_match.schema import FilterCriteria, ScoredRecipe
from recipe_match.service import RecipeService
from recipe_match.vision.captioning import CaptionError, build_captioner

logger = get_logger("cli")

CLI_USER = "cli"


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--diet", help="tag that must be present, e.g. vegetarian")
    p.add_argument("--difficulty", help="easy / medium / hard")
    p.add_argument("--cuisine")
    p.add_argument("--max-time", type=int, dest="max_time", help="max cook time in minutes")
    p.add_argument("--limit", type=int, default=20)
    p.add_argument("--offset", type=int, default=0)


def _add_catalog_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--catalog", help="CSV catalog; default is the Supabase catalog")
    p.add_argument("--json", action="store_true", help="print JSON instead of a table")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="recipe-match")
    ap.add_argument("--synonyms", help="extra variant<TAB>canonical TSV file")
    sub = ap.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="extract canonical ingredients from text")
    p_parse.add_argument("text")

    p_match = sub.add_parser("match", help="rank recipes by ingredient overlap")
    src = p_match.add_mutually_exclusive_group(required=True)
    src.add_argument("--ingredients", nargs="+")
    src.add_argument("--text")
    _add_catalog_args(p_match)
    _add_filter_args(p_match)

    p_suggest = sub.add_parser("suggest", help="suggest recipes from favorites")
    p_suggest.add_argument("--user-id", dest="user_id")
    p_suggest.add_argument("--favorite-ids", dest="favorite_ids", nargs="+", type=int)
    p_suggest.add_argument("--limit", type=int, default=10)
    _add_catalog_args(p_suggest)

    p_detect = sub.add_parser("detect", help="caption an image and match its ingredients")
    p_detect.add_argument("image")
    _add_catalog_args(p_detect)
    _add_filter_args(p_detect)

    return ap


def _criteria(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        diet=args.diet,
        difficulty=args.difficulty,
        cuisine=args.cuisine,
        max_time_minutes=args.max_time,
    )


def _catalog(args: argparse.Namespace) -> CatalogRepository:
    if args.catalog:
        favorites = {CLI_USER: list(getattr(args, "favorite_ids", None) or [])}
        return InMemoryCatalog(load_recipes_csv(args.catalog), favorites=favorites)
    return SupabaseCatalog(get_supabase_client())


def _print_scored(rows: List[ScoredRecipe], as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in rows], indent=2, default=str))
        return
    if not rows:
        print("No recipes found.")
        return
    for i, r in enumerate(rows, start=1):
        print(f"{i:02d}. {r.title}  score={r.score}")
        for reason in r.reasons:
            print("    -", reason)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()

    table = load_synonym_table(args.synonyms or settings.synonyms_tsv)
    parser = CaptionParser(IngredientNormalizer(table))

    if args.command == "parse":
        print(json.dumps(parser.extract_ingredients(args.text)))
        return 0

    if args.command == "suggest" and not (args.catalog or args.user_id):
        print("suggest needs --user-id (Supabase) or --catalog with --favorite-ids", file=sys.stderr)
        return 2

    catalog = _catalog(args)

    if args.command == "match":
        service = RecipeService(catalog, settings=settings, parser=parser)
        if args.text is not None:
            rows = service.match_text(args.text, _criteria(args), args.limit, args.offset)
        else:
            rows = service.match_with_filters(args.ingredients, _criteria(args), args.limit, args.offset)
        _print_scored(rows, args.json)
        return 0

    if args.command == "suggest":
        user_id = CLI_USER if args.catalog else args.user_id
        service = RecipeService(catalog, settings=settings, parser=parser)
        _print_scored(service.get_suggestions(user_id, args.limit), args.json)
        return 0

    if args.command == "detect":
        image_path = Path(args.image)
        try:
            image_bytes = image_path.read_bytes()
        except OSError as exc:
            logger.error(
                "Cannot read image '%s': %s",
                image_path,
                exc,
                extra={
                    "invoking_func": "main",
                    "invoking_purpose": "Detect ingredients in an image and match recipes",
                    "next_step": "Exit with status 1",
                    "resolution": "Check the image path and permissions",
                },
            )
            return 1

        with build_captioner(settings) as captioner:
            service = RecipeService(catalog, settings=settings, parser=parser, captioner=captioner)
            try:
                out = service.detect_and_match(
                    image_bytes,
                    image_path.name,
                    _criteria(args),
                    args.limit,
                    args.offset,
                )
            except CaptionError as exc:
                logger.error(
                    "Caption detection failed: %s",
                    exc,
                    extra={
                        "invoking_func": "main",
                        "invoking_purpose": "Detect ingredients in an image and match recipes",
                        "next_step": "Exit with status 1",
                        "resolution": "Check HUGGINGFACE_API_KEY / CAPTION_PROVIDER and retry",
                    },
                )
                return 1

        if args.json:
            payload = {"detection": asdict(out.detection), "matches": [r.to_dict() for r in out.matches]}
            print(json.dumps(payload, indent=2, default=str))
            return 0
        print(f"Caption: {out.detection.raw_response}")
        print(
            f"Ingredients: {', '.join(out.detection.ingredients) or '-'} "
            f"(confidence={out.detection.confidence:.2f})"
        )
        _print_scored(out.matches, False)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
