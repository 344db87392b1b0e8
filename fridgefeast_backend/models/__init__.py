"""Pydantic models shared by the Fridge Feast services and API."""

from __future__ import annotations

import uuid
from typing import Annotated, Literal, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
SortKey = Literal["match", "health", "time"]
Sentiment = Literal["like", "dislike"]


class Ingredient(BaseModel):
    """A single ingredient detected in a kitchen photo."""

    name: NonEmptyStr
    category: Optional[str] = None
    confidence: float = Field(ge=0, le=1)
    quantity: Optional[str] = None


class Filters(BaseModel):
    """Dietary and style preferences used to shape recipe generation.

    Attributes are snake_case; the JSON payloads use the camelCase keys the
    client sends (``glutenFree``, ``highProtein``...). Unset keys stay unset.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vegetarian: Optional[bool] = None
    vegan: Optional[bool] = None
    gluten_free: Optional[bool] = None
    dairy_free: Optional[bool] = None
    nut_free: Optional[bool] = None
    shellfish_free: Optional[bool] = None
    egg_free: Optional[bool] = None
    soy_free: Optional[bool] = None
    quick: Optional[bool] = None
    high_protein: Optional[bool] = None
    low_carb: Optional[bool] = None

    def to_payload(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RecipeDraft(BaseModel):
    """A recipe as produced by a generator, before a match score is attached.

    Unknown keys (including a generator-supplied ``match_score``) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    name: NonEmptyStr
    description: NonEmptyStr
    prep_time_minutes: int = Field(ge=1, le=240)
    ingredients: list[NonEmptyStr] = Field(min_length=2)
    steps: list[NonEmptyStr] = Field(min_length=2)
    tags: list[NonEmptyStr] = Field(default_factory=list)
    health_score: int = Field(ge=1, le=10)


class Recipe(RecipeDraft):
    """A validated recipe with its locally computed match score."""

    match_score: int = Field(ge=1, le=10)
    image_url: Optional[AnyHttpUrl] = None


class IngredientRef(BaseModel):
    name: str


class VisionRequest(BaseModel):
    """Body of ``POST /api/vision``."""

    image_base64: str = Field(alias="imageBase64", min_length=10)


class RecipeRequest(BaseModel):
    """Body of ``POST /api/recipes``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ingredients: list[IngredientRef]
    filters: Filters = Field(default_factory=Filters)
    exclude_ids: list[uuid.UUID] = Field(default_factory=list)
    exclude_names: list[str] = Field(default_factory=list)
    count: int = Field(default=5, ge=1, le=10)
    sort_by: Optional[SortKey] = None

    def ingredient_names(self) -> list[str]:
        return [ingredient.name for ingredient in self.ingredients]

    def detected_set(self) -> set[str]:
        return {name.lower() for name in self.ingredient_names()}


class ImageRequest(BaseModel):
    """Body of ``POST /api/image``."""

    name: NonEmptyStr
    ingredients: list[str] = Field(default_factory=list)


class ProfilePrefs(BaseModel):
    """Dietary defaults and display preferences for the profile."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vegetarian: Optional[bool] = None
    vegan: Optional[bool] = None
    allergens: Optional[list[str]] = None
    disliked_ingredients: Optional[list[str]] = None
    default_sort: Optional[SortKey] = None


class HistoryEntry(BaseModel):
    """Reference to a saved or cooked recipe; ``at`` is epoch milliseconds."""

    id: NonEmptyStr
    name: str
    at: int


__all__ = [
    "Filters",
    "HistoryEntry",
    "ImageRequest",
    "Ingredient",
    "IngredientRef",
    "ProfilePrefs",
    "Recipe",
    "RecipeDraft",
    "RecipeRequest",
    "Sentiment",
    "SortKey",
    "VisionRequest",
]
