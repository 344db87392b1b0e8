"""Recipe generation: prompt building, validation and match scoring."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Literal, Protocol

from pydantic import TypeAdapter, ValidationError

from fridgefeast_backend.config import FILTER_CONSTRAINTS
from fridgefeast_backend.models import Recipe, RecipeDraft, RecipeRequest
from fridgefeast_backend.services.llm import (
    TextLLMClient,
    truncate_raw_llm_output,
)
from fridgefeast_backend.services.scoring import compute_match_score

logger = logging.getLogger(__name__)

_DRAFT_LIST = TypeAdapter(list[RecipeDraft])

MOCK_RECIPE_NAMES = (
    "Quick Veggie Scramble",
    "Cheesy Spinach Quesadilla",
    "Pepper-Tomato Pasta",
    "Tomato Spinach Salad",
    "Sheet-Pan Veggie Bake",
    "Stuffed Bell Peppers",
    "Spinach Omelette",
    "Tomato Rice Bowl",
)
MOCK_RECIPE_INGREDIENTS = (
    "bell pepper",
    "cherry tomato",
    "spinach",
    "eggs",
    "cheddar cheese",
    "olive oil",
    "salt",
    "pepper",
)


class RecipeGenerationError(RuntimeError):
    """Raised when the recipe model cannot be queried."""


class RecipeOutputError(RecipeGenerationError):
    """Raised when the recipe model answers with unusable content."""

    def __init__(self, message: str, *, reason: Literal["parse", "schema"]) -> None:
        super().__init__(message)
        self.reason = reason


class RecipeSource(Protocol):
    """Produces unscored recipe drafts for a request."""

    def draft_recipes(self, request: RecipeRequest) -> list[RecipeDraft]: ...


class MockRecipeGenerator:
    """Deterministic fixture generator used when no model is configured."""

    def draft_recipes(self, request: RecipeRequest) -> list[RecipeDraft]:
        excluded = {name.lower() for name in request.exclude_names}
        drafts: list[RecipeDraft] = []
        for idx, name in enumerate(MOCK_RECIPE_NAMES):
            if name.lower() in excluded:
                continue
            drafts.append(
                RecipeDraft(
                    id=uuid.uuid4(),
                    name=name,
                    description="A simple, tasty dish using your fresh produce.",
                    prep_time_minutes=10 + (idx % 3) * 5,
                    ingredients=list(MOCK_RECIPE_INGREDIENTS[: 5 + (idx % 2)]),
                    steps=["Prep ingredients", "Cook/assemble", "Season and serve"],
                    tags=["Quick", "Vegetarian"],
                    health_score=6 + (idx % 4),
                )
            )
        return drafts


def build_system_prompt(request: RecipeRequest) -> str:
    """Return the chef instructions for one generation request."""

    count = request.count
    exclude_ids = ", ".join(str(recipe_id) for recipe_id in request.exclude_ids)
    exclude_names = ", ".join(request.exclude_names)
    constraints = "\n".join(
        FILTER_CONSTRAINTS[name]
        for name in FILTER_CONSTRAINTS
        if getattr(request.filters, name)
    )
    return (
        "You are a concise creative chef who outputs strict JSON only.\n"
        f"Create {count} distinct recipes as an array of objects with fields:\n"
        "id (uuid v4), name, description (1-2 sentences), prep_time_minutes (int),\n"
        "ingredients (array of strings), steps (array of strings), "
        "tags (array of strings),\n"
        "health_score (1..10), match_score (int placeholder).\n"
        "Avoid duplicate IDs and near-identical names. "
        f"Exclude IDs: {exclude_ids or 'none'}.\n"
        f"Do not suggest recipes named: {exclude_names or 'none'}.\n"
        "Constraints:\n"
        f"{constraints}\n"
        f"Return ONLY JSON array of {count} recipes."
    )


def build_user_prompt(request: RecipeRequest) -> str:
    names = ", ".join(request.ingredient_names())
    return (
        f"Use these available ingredients where possible: {names}.\n"
        "Prefer variety across cuisines and proteins. "
        "Keep steps clear and realistic."
    )


def parse_recipe_payload(payload: Any) -> list[RecipeDraft]:
    """Validate a decoded model payload as a list of recipe drafts."""

    if isinstance(payload, dict) and "recipes" in payload:
        payload = payload["recipes"]
    try:
        return _DRAFT_LIST.validate_python(payload)
    except ValidationError as exc:
        raise RecipeOutputError("Invalid recipe schema", reason="schema") from exc


class LLMRecipeGenerator:
    """Recipe source backed by an OpenAI text model."""

    def __init__(self, llm_client: TextLLMClient) -> None:
        self._llm_client = llm_client

    def draft_recipes(self, request: RecipeRequest) -> list[RecipeDraft]:
        try:
            result = self._llm_client.run_prompt(
                prompt=build_user_prompt(request),
                system_prompt=build_system_prompt(request),
            )
        except ValueError:
            raise
        except Exception as exc:  # pragma: no cover - surfacing dependency failures
            raise RecipeGenerationError("failed to query recipe model") from exc

        if not result.raw_text.strip():
            return []
        if result.parsed_json is None:
            logger.warning(
                "recipe model returned non-JSON output",
                extra={"raw": truncate_raw_llm_output(result.raw_text)},
            )
            raise RecipeOutputError("Recipe JSON parse failed", reason="parse")

        try:
            return parse_recipe_payload(result.parsed_json)
        except RecipeOutputError:
            logger.warning(
                "recipe model output failed validation",
                extra={"raw": truncate_raw_llm_output(result.raw_text)},
            )
            raise


class RecipeService:
    """Generate scored recipes that respect the request's exclusions."""

    def __init__(self, source: RecipeSource) -> None:
        self._source = source

    def generate(self, request: RecipeRequest) -> list[Recipe]:
        drafts = self._source.draft_recipes(request)
        detected = request.detected_set()
        excluded_ids = set(request.exclude_ids)
        excluded_names = {name.lower() for name in request.exclude_names}

        recipes: list[Recipe] = []
        for draft in drafts:
            name_key = draft.name.lower()
            if draft.id in excluded_ids or name_key in excluded_names:
                logger.info(
                    "dropping excluded recipe from batch",
                    extra={"recipe_id": str(draft.id), "recipe_name": draft.name},
                )
                continue
            excluded_ids.add(draft.id)
            excluded_names.add(name_key)
            recipes.append(
                Recipe(
                    **draft.model_dump(),
                    match_score=compute_match_score(detected, draft.ingredients),
                )
            )
            if len(recipes) == request.count:
                break
        return recipes
