"""Endpoint that generates scored recipe suggestions."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from pydantic import ValidationError

from fridgefeast_backend.api.deps import (
    get_json_body,
    get_recipe_service,
    validation_error_response,
)
from fridgefeast_backend.models import RecipeRequest
from fridgefeast_backend.services.ranking import sort_recipes
from fridgefeast_backend.services.recipes import (
    RecipeGenerationError,
    RecipeOutputError,
)

bp = Blueprint("recipes", __name__, url_prefix="/api")


@bp.post("/recipes")
def generate_recipes():
    """Return recipes for the given ingredients, filters and exclusions.

    Recipes come back in generation order unless ``sortBy`` names a key.
    """

    try:
        recipe_request = RecipeRequest.model_validate(get_json_body())
    except ValidationError as exc:
        return validation_error_response(exc)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        service = get_recipe_service()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        recipes = service.generate(recipe_request)
    except RecipeOutputError as exc:
        return jsonify(error=str(exc), reason=exc.reason), 502
    except RecipeGenerationError:
        current_app.logger.exception("recipe model invocation failed")
        return jsonify(error="failed to query recipe model"), 502

    if recipe_request.sort_by is not None:
        recipes = sort_recipes(recipes, recipe_request.sort_by)

    current_app.logger.info(
        "generated recipes",
        extra={
            "requested": recipe_request.count,
            "returned": len(recipes),
            "excluded_ids": len(recipe_request.exclude_ids),
            "excluded_names": len(recipe_request.exclude_names),
        },
    )
    return jsonify(
        recipes=[
            recipe.model_dump(mode="json", exclude_none=True) for recipe in recipes
        ]
    )
