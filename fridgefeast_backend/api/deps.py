"""Shared API dependencies and helpers."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, request
from pydantic import ValidationError

from fridgefeast_backend.services.illustration import Illustrator
from fridgefeast_backend.services.recipes import RecipeService
from fridgefeast_backend.services.vision import VisionClassifier


def _get_extension(name: str, label: str) -> Any:
    extension = current_app.extensions.get(name)
    if extension is None:
        raise RuntimeError(f"{label} is not configured")
    return extension


def get_vision_classifier() -> VisionClassifier:
    """Return the vision classifier selected at startup."""

    return _get_extension("vision_classifier", "vision classifier")


def get_recipe_service() -> RecipeService:
    """Return the recipe service selected at startup."""

    return _get_extension("recipe_service", "recipe generator")


def get_illustrator() -> Illustrator:
    return _get_extension("illustrator", "image illustrator")


def get_json_body() -> Any:
    """Return the decoded JSON body or raise ``ValueError``."""

    payload = request.get_json(silent=True)
    if payload is None:
        raise ValueError("request body must be JSON")
    return payload


def validation_error_response(exc: ValidationError):
    """Build the 400 response for a request body that failed validation."""

    details = [
        {
            "loc": ".".join(str(part) for part in error["loc"]),
            "msg": error["msg"],
        }
        for error in exc.errors()
    ]
    return jsonify(error="invalid request body", details=details), 400
