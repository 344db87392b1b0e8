"""Page-level workflow: analyze a photo, generate recipes, track user actions."""

from __future__ import annotations

import logging
import uuid
from typing import Literal, Optional

from pydantic import ValidationError

from fridgefeast_backend.models import (
    Filters,
    HistoryEntry,
    Ingredient,
    IngredientRef,
    Recipe,
    RecipeRequest,
    Sentiment,
    SortKey,
)
from fridgefeast_backend.services.illustration import (
    Illustrator,
    RecipeImageLatch,
)
from fridgefeast_backend.services.preferences import PreferenceStore
from fridgefeast_backend.services.ranking import (
    DEFAULT_SORT,
    merge_recipe_batch,
    sort_recipes,
)
from fridgefeast_backend.services.recipes import (
    RecipeGenerationError,
    RecipeOutputError,
    RecipeService,
)
from fridgefeast_backend.services.vision import (
    VisionAnalysisError,
    VisionClassifier,
    VisionOutputError,
)

logger = logging.getLogger(__name__)

Stage = Literal["idle", "vision", "recipes"]
LOAD_MORE_COUNT = 5


class RecipeSession:
    """State for one user working through photo -> ingredients -> recipes.

    Failures never discard data: they set :attr:`error`, return the stage to
    ``"idle"`` and leave ingredients, recipes and preferences as they were.
    The stage is informational; nothing stops a caller from starting a
    second operation while one is running.
    """

    def __init__(
        self,
        *,
        vision: VisionClassifier,
        recipes: RecipeService,
        illustrator: Illustrator,
        preferences: PreferenceStore,
    ) -> None:
        self._vision = vision
        self._recipe_service = recipes
        self._illustrator = illustrator
        self._preferences = preferences

        self.stage: Stage = "idle"
        self.error: Optional[str] = None
        self.ingredients: list[Ingredient] = []
        self.recipes: list[Recipe] = []
        self.shown_ids: set[uuid.UUID] = set()
        self._latches: dict[uuid.UUID, RecipeImageLatch] = {}

        self.filters: Filters = preferences.get_last_filters()
        self.sort_by: SortKey = preferences.get_profile().default_sort or DEFAULT_SORT

    # -- ingredients -----------------------------------------------------

    def analyze_image(self, image_data_uri: str) -> bool:
        self.error = None
        self.stage = "vision"
        try:
            ingredients = self._vision.classify(image_data_uri)
        except VisionOutputError as exc:
            return self._fail(str(exc))
        except (VisionAnalysisError, ValueError):
            logger.exception("vision stage failed")
            return self._fail("Failed to analyze image")

        self.ingredients = ingredients
        self.stage = "idle"
        return True

    def remove_ingredient(self, name: str) -> None:
        key = name.lower()
        self.ingredients = [
            ingredient
            for ingredient in self.ingredients
            if ingredient.name.lower() != key
        ]

    def detected_set(self) -> set[str]:
        return {ingredient.name.lower() for ingredient in self.ingredients}

    # -- recipes ---------------------------------------------------------

    def set_filters(self, filters: Filters) -> None:
        self.filters = filters
        self._preferences.set_last_filters(filters)

    def generate_recipes(self, count: int = LOAD_MORE_COUNT) -> bool:
        if not self.ingredients:
            return False

        self.error = None
        self.stage = "recipes"
        try:
            request = RecipeRequest(
                ingredients=[
                    IngredientRef(name=ingredient.name)
                    for ingredient in self.ingredients
                ],
                filters=self.filters,
                exclude_ids=sorted(self.shown_ids, key=str),
                exclude_names=[recipe.name for recipe in self.recipes],
                count=count,
            )
            batch = self._recipe_service.generate(request)
        except ValidationError:
            return self._fail("Invalid recipe request")
        except RecipeOutputError as exc:
            return self._fail(str(exc))
        except RecipeGenerationError:
            logger.exception("recipe stage failed")
            return self._fail("Failed to generate recipes")

        new_recipes = merge_recipe_batch(self.recipes, batch)
        self.recipes = [*self.recipes, *new_recipes]
        self.shown_ids.update(recipe.id for recipe in new_recipes)
        self.stage = "idle"
        return True

    def load_more(self) -> bool:
        return self.generate_recipes(LOAD_MORE_COUNT)

    def sorted_recipes(self) -> list[Recipe]:
        return sort_recipes(self.recipes, self.sort_by)

    def _find_recipe(self, recipe_id: uuid.UUID) -> Recipe:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        raise KeyError(recipe_id)

    def expand_recipe(self, recipe_id: uuid.UUID) -> Recipe:
        """Open a recipe's detail view, fetching its image the first time."""

        recipe = self._find_recipe(recipe_id)
        latch = self._latches.setdefault(recipe_id, RecipeImageLatch())
        image_url = latch.request(
            lambda: self._illustrator.illustrate(
                recipe.name, recipe.ingredients
            ).image_url
        )
        if not image_url or recipe.image_url is not None:
            return recipe

        try:
            illustrated = Recipe.model_validate(
                {**recipe.model_dump(), "image_url": image_url}
            )
        except ValidationError:
            logger.warning(
                "ignoring invalid recipe image url",
                extra={"recipe_id": str(recipe_id)},
            )
            return recipe
        self.recipes = [
            illustrated if existing.id == recipe_id else existing
            for existing in self.recipes
        ]
        return illustrated

    # -- user actions ----------------------------------------------------

    def is_saved(self, recipe_id: uuid.UUID) -> bool:
        key = str(recipe_id)
        return any(entry.id == key for entry in self._preferences.get_saved())

    def toggle_save(self, recipe: Recipe) -> list[HistoryEntry]:
        key = str(recipe.id)
        saved = self._preferences.get_saved()
        if any(entry.id == key for entry in saved):
            updated = [entry for entry in saved if entry.id != key]
        else:
            updated = [
                *saved,
                HistoryEntry(id=key, name=recipe.name, at=self._preferences.now()),
            ]
        return self._preferences.set_saved(updated)

    def mark_cooked(self, recipe: Recipe) -> list[HistoryEntry]:
        cooked = self._preferences.get_cooked()
        cooked.append(
            HistoryEntry(
                id=str(recipe.id), name=recipe.name, at=self._preferences.now()
            )
        )
        return self._preferences.set_cooked(cooked)

    def set_sentiment(self, recipe: Recipe, sentiment: Sentiment) -> dict[str, Sentiment]:
        feedback = {**self._preferences.get_feedback(), str(recipe.id): sentiment}
        self._preferences.set_feedback(feedback)
        return feedback

    def _fail(self, message: str) -> bool:
        self.error = message
        self.stage = "idle"
        return False
