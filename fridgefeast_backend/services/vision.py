"""Turn a kitchen photo into a list of ingredients."""

from __future__ import annotations

import logging
from typing import Any, Literal, Protocol

from pydantic import TypeAdapter, ValidationError

from fridgefeast_backend.config import VISION_USER_PROMPT
from fridgefeast_backend.models import Ingredient
from fridgefeast_backend.services.llm import (
    VisionLLMClient,
    truncate_raw_llm_output,
)
from fridgefeast_backend.services.normalization import normalize_ingredients

logger = logging.getLogger(__name__)

_INGREDIENT_LIST = TypeAdapter(list[Ingredient])

MOCK_INGREDIENTS = (
    {"name": "bell pepper", "confidence": 0.92, "category": "produce"},
    {"name": "cherry tomato", "confidence": 0.9, "category": "produce"},
    {"name": "eggs", "confidence": 0.88, "category": "protein"},
    {"name": "spinach", "confidence": 0.86, "category": "produce"},
    {"name": "cheddar cheese", "confidence": 0.8, "category": "dairy"},
)


class VisionAnalysisError(RuntimeError):
    """Raised when the vision model cannot be queried."""


class VisionOutputError(VisionAnalysisError):
    """Raised when the vision model answers with unusable content."""

    def __init__(self, message: str, *, reason: Literal["parse", "schema"]) -> None:
        super().__init__(message)
        self.reason = reason


class VisionClassifier(Protocol):
    def classify(self, image_data_uri: str) -> list[Ingredient]: ...


class MockVisionClassifier:
    """Fixture classifier used when no model is configured."""

    def classify(self, image_data_uri: str) -> list[Ingredient]:
        return [Ingredient(**entry) for entry in MOCK_INGREDIENTS]


def parse_ingredient_payload(payload: Any) -> list[Ingredient]:
    """Validate a decoded model payload as a list of ingredients.

    A bare list is expected; an object wrapping the list under
    ``"ingredients"`` is tolerated.
    """

    if isinstance(payload, dict) and "ingredients" in payload:
        payload = payload["ingredients"]
    try:
        ingredients = _INGREDIENT_LIST.validate_python(payload)
    except ValidationError as exc:
        raise VisionOutputError(
            "Invalid ingredient schema", reason="schema"
        ) from exc
    return normalize_ingredients(ingredients)


class LLMVisionClassifier:
    """Classifier backed by an OpenAI vision model."""

    def __init__(
        self, llm_client: VisionLLMClient, *, prompt: str = VISION_USER_PROMPT
    ) -> None:
        self._llm_client = llm_client
        self._prompt = prompt

    def classify(self, image_data_uri: str) -> list[Ingredient]:
        try:
            result = self._llm_client.analyze_image(
                image_url=image_data_uri, prompt=self._prompt
            )
        except ValueError:
            raise
        except Exception as exc:  # pragma: no cover - surfacing dependency failures
            raise VisionAnalysisError("failed to query vision model") from exc

        if not result.raw_text.strip():
            return []
        if result.parsed_json is None:
            logger.warning(
                "vision model returned non-JSON output",
                extra={"raw": truncate_raw_llm_output(result.raw_text)},
            )
            raise VisionOutputError("Vision JSON parse failed", reason="parse")

        try:
            return parse_ingredient_payload(result.parsed_json)
        except VisionOutputError:
            logger.warning(
                "vision model output failed validation",
                extra={"raw": truncate_raw_llm_output(result.raw_text)},
            )
            raise
