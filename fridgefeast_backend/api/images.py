"""Dish illustration endpoint."""

from flask import Blueprint, current_app, jsonify
from pydantic import ValidationError

from fridgefeast_backend.api.deps import (
    get_illustrator,
    get_json_body,
    validation_error_response,
)
from fridgefeast_backend.models import ImageRequest

bp = Blueprint("images", __name__, url_prefix="/api")


@bp.post("/image")
def illustrate_recipe():
    """Return an image for a recipe, or ``null`` when there is none."""
    try:
        body = ImageRequest.model_validate(get_json_body())
    except ValidationError as exc:
        return validation_error_response(exc)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        illustrator = get_illustrator()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        illustration = illustrator.illustrate(body.name, body.ingredients)
    except Exception:  # pragma: no cover - surface upstream errors
        current_app.logger.exception("recipe illustration failed")
        return jsonify(status="failed", imageUrl=None), 500

    return jsonify(status=illustration.status, imageUrl=illustration.image_url)
