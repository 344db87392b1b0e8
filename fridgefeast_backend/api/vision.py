"""Endpoint that turns a kitchen photo into detected ingredients."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from fridgefeast_backend.api.deps import (
    get_json_body,
    get_vision_classifier,
    validation_error_response,
)
from fridgefeast_backend.models import VisionRequest
from fridgefeast_backend.services.uploads import (
    coerce_data_uri,
    encode_image_upload,
)
from fridgefeast_backend.services.vision import (
    VisionAnalysisError,
    VisionOutputError,
)

bp = Blueprint("vision", __name__, url_prefix="/api")


def _read_image_data_uri() -> str:
    """Return the request's photo as a data URI.

    Multipart uploads use the ``image`` file part; JSON bodies carry
    ``imageBase64``.
    """

    if "image" in request.files:
        return encode_image_upload(request.files["image"]).data_uri

    body = VisionRequest.model_validate(get_json_body())
    return coerce_data_uri(body.image_base64)


@bp.post("/vision")
def analyze_photo():
    """Detect visible ingredients in the uploaded photo."""

    try:
        image_data_uri = _read_image_data_uri()
    except ValidationError as exc:
        return validation_error_response(exc)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    try:
        classifier = get_vision_classifier()
    except RuntimeError as exc:
        return jsonify(error=str(exc)), 503

    try:
        ingredients = classifier.classify(image_data_uri)
    except VisionOutputError as exc:
        return jsonify(error=str(exc), reason=exc.reason), 502
    except VisionAnalysisError:
        current_app.logger.exception("vision model invocation failed")
        return jsonify(error="failed to query vision model"), 502
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    current_app.logger.info(
        "detected ingredients", extra={"count": len(ingredients)}
    )
    return jsonify(
        ingredients=[
            ingredient.model_dump(mode="json", exclude_none=True)
            for ingredient in ingredients
        ]
    )
