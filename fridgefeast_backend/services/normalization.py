"""Utilities for normalizing ingredient names returned by the vision model."""

from __future__ import annotations

import re
from typing import Iterable, cast

import inflect
from inflect import Word

from fridgefeast_backend.models import Ingredient

_COLLAPSE_SPACES = re.compile(r"\s+")
_INFLECT_ENGINE = inflect.engine()


def normalize_ingredient_name(raw_name: str) -> str:
    """Lowercase a name and collapse its whitespace.

    Punctuation and accents are kept so the name still compares equal to the
    lower-cased recipe text it is scored against ("sun-dried tomatoes",
    "jalapeño"). Plurals are kept as written; use :func:`singular_key` when
    two spellings need to compare equal.
    """

    return _COLLAPSE_SPACES.sub(" ", raw_name.lower()).strip()


def singular_key(name: str) -> str:
    """Return ``name`` with its last word singularized."""

    if not name:
        return name
    parts = name.split(" ")
    last_word = cast(Word, parts[-1])
    parts[-1] = str(_INFLECT_ENGINE.singular_noun(last_word) or last_word)
    return " ".join(parts)


def normalize_ingredients(ingredients: Iterable[Ingredient]) -> list[Ingredient]:
    """Canonicalize names and collapse plural variants of the same item.

    The first spelling seen wins; the merged entry keeps the highest
    confidence. Entries whose name is only whitespace are dropped.
    """

    merged: dict[str, Ingredient] = {}
    for ingredient in ingredients:
        name = normalize_ingredient_name(ingredient.name)
        if not name:
            continue
        key = singular_key(name)
        current = merged.get(key)
        if current is None:
            merged[key] = ingredient.model_copy(update={"name": name})
        elif ingredient.confidence > current.confidence:
            merged[key] = current.model_copy(
                update={"confidence": ingredient.confidence}
            )
    return list(merged.values())
