"""Command line tool: photo in, scored and sorted recipe suggestions out.

Usage:
    fridgefeast fridge.jpg
    fridgefeast fridge.jpg --filter vegan --filter quick --sort time --more 1
    fridgefeast fridge.jpg --images --prefs ~/.fridgefeast.json

Providers are chosen the same way the web app chooses them (mock mode when
no API key is configured). Without ``--prefs`` nothing is remembered
between runs.
"""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Optional, Sequence

from flask import Flask

from fridgefeast_backend import create_app
from fridgefeast_backend.config import FILTER_CONSTRAINTS
from fridgefeast_backend.models import Filters
from fridgefeast_backend.services.preferences import (
    JsonFileKeyValueStore,
    KeyValueStore,
    NullKeyValueStore,
    PreferenceStore,
)
from fridgefeast_backend.services.ranking import SORT_KEYS
from fridgefeast_backend.services.session import LOAD_MORE_COUNT, RecipeSession
from fridgefeast_backend.services.uploads import build_data_uri

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fridgefeast",
        description="Suggest recipes for the ingredients visible in a photo.",
    )
    parser.add_argument("photo", type=Path, help="Path to a kitchen or fridge photo")
    parser.add_argument(
        "--count",
        type=int,
        default=LOAD_MORE_COUNT,
        help="Recipes in the first batch (1-10, default: %(default)s)",
    )
    parser.add_argument(
        "--more",
        type=int,
        default=0,
        help="Extra batches to load after the first one",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        choices=sorted(FILTER_CONSTRAINTS),
        default=[],
        help="Dietary or style filter; repeat for several",
    )
    parser.add_argument(
        "--sort",
        choices=SORT_KEYS,
        help="Sort key (default: the profile's default sort, else match)",
    )
    parser.add_argument(
        "--images",
        action="store_true",
        help="Fetch an illustration for every recipe",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        help="JSON file to remember filters and profile between runs",
    )
    return parser


def _encode_photo(path: Path) -> str:
    mime_type = mimetypes.guess_type(path.name)[0]
    if mime_type and not mime_type.startswith("image/"):
        raise ValueError(f"unsupported content type {mime_type!r}")
    image_bytes = path.read_bytes()
    if not image_bytes:
        raise ValueError(f"{path} is empty")
    return build_data_uri(image_bytes, mime_type)


def main(argv: Optional[Sequence[str]] = None, *, app: Optional[Flask] = None) -> int:
    args = _build_parser().parse_args(argv)
    app = app or create_app()

    try:
        image_data_uri = _encode_photo(args.photo)
    except (OSError, ValueError) as exc:
        print(f"fridgefeast: {exc}", file=sys.stderr)
        return 2

    backend: KeyValueStore = (
        JsonFileKeyValueStore(args.prefs) if args.prefs else NullKeyValueStore()
    )
    session = RecipeSession(
        vision=app.extensions["vision_classifier"],
        recipes=app.extensions["recipe_service"],
        illustrator=app.extensions["illustrator"],
        preferences=PreferenceStore(backend),
    )
    if args.filters:
        session.set_filters(Filters(**{name: True for name in args.filters}))
    if args.sort:
        session.sort_by = args.sort

    if not session.analyze_image(image_data_uri):
        print(f"fridgefeast: {session.error}", file=sys.stderr)
        return 1
    if not session.ingredients:
        print("fridgefeast: no ingredients detected", file=sys.stderr)
        return 1

    if not session.generate_recipes(args.count):
        print(f"fridgefeast: {session.error}", file=sys.stderr)
        return 1
    for _ in range(args.more):
        if not session.load_more():
            logger.warning("load more failed: %s", session.error)
            break

    recipes = session.sorted_recipes()
    if args.images:
        recipes = [session.expand_recipe(recipe.id) for recipe in recipes]

    output = {
        "ingredients": [
            ingredient.model_dump(exclude_none=True)
            for ingredient in session.ingredients
        ],
        "sortBy": session.sort_by,
        "recipes": [
            recipe.model_dump(mode="json", exclude_none=True) for recipe in recipes
        ],
    }
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
