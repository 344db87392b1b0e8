"""Ordering and batch-merging helpers for recipe lists."""

from __future__ import annotations

from typing import Iterable, Sequence

from fridgefeast_backend.models import Recipe, SortKey

SORT_KEYS: tuple[SortKey, ...] = ("match", "health", "time")
DEFAULT_SORT: SortKey = "match"


def sort_recipes(recipes: Iterable[Recipe], sort_by: SortKey) -> list[Recipe]:
    """Return a new list ordered by ``sort_by``; ties keep their prior order."""

    if sort_by == "health":
        return sorted(recipes, key=lambda recipe: -recipe.health_score)
    if sort_by == "match":
        return sorted(recipes, key=lambda recipe: -recipe.match_score)
    if sort_by == "time":
        return sorted(recipes, key=lambda recipe: recipe.prep_time_minutes)
    raise ValueError(f"unknown sort key: {sort_by!r}")


def merge_recipe_batch(
    existing: Sequence[Recipe], batch: Iterable[Recipe]
) -> list[Recipe]:
    """Return the recipes from ``batch`` whose names are not already shown.

    Names are compared case-insensitively, also within the batch itself.
    """

    seen = {recipe.name.lower() for recipe in existing}
    new_recipes: list[Recipe] = []
    for recipe in batch:
        key = recipe.name.lower()
        if key in seen:
            continue
        seen.add(key)
        new_recipes.append(recipe)
    return new_recipes
