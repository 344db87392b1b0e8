"""Weighted ingredient-overlap score between a recipe and the user's fridge."""

from __future__ import annotations

import math
from typing import AbstractSet, Iterable

# Ubiquitous pantry items that should not drive the ranking on their own.
STAPLE_INGREDIENTS = frozenset(
    {
        "salt",
        "pepper",
        "oil",
        "water",
        "flour",
        "sugar",
        "butter",
        "vinegar",
        "soy sauce",
    }
)
STAPLE_WEIGHT = 0.25
STANDARD_WEIGHT = 1.0
MIN_MATCH_SCORE = 1
MAX_MATCH_SCORE = 10


def ingredient_weight(name: str) -> float:
    return STAPLE_WEIGHT if name in STAPLE_INGREDIENTS else STANDARD_WEIGHT


def compute_match_score(
    detected: AbstractSet[str], recipe_ingredients: Iterable[str]
) -> int:
    """Return how well a recipe uses what the user has, as an int in [1, 10].

    ``detected`` must already be lower-cased; recipe ingredient names are
    lower-cased here. The raw score is the weighted Jaccard overlap of the two
    sets, mapped onto ``1 + 9 * raw`` so a recipe with no overlap still gets 1.
    """

    recipe_set = {name.lower() for name in recipe_ingredients}
    union = recipe_set | detected

    union_weight = 0.0
    intersection_weight = 0.0
    for name in union:
        weight = ingredient_weight(name)
        union_weight += weight
        if name in detected and name in recipe_set:
            intersection_weight += weight

    raw = intersection_weight / union_weight if union_weight > 0 else 0.0
    # Half-up rounding; round() would send 4.5 to 4.
    score = math.floor(1 + 9 * raw + 0.5)
    return max(MIN_MATCH_SCORE, min(MAX_MATCH_SCORE, score))
