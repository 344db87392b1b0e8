"""Client helpers for interacting with OpenAI vision and text models."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from json import JSONDecodeError
from typing import Any, Optional

from httpx import RequestError, TimeoutException
from openai import OpenAI
from openai.types.responses import Response

logger = logging.getLogger(__name__)

_JSON_BRACKETS = {"[": "]", "{": "}"}
MAX_RAW_LLM_OUTPUT_BYTES = 2_000
TRUNCATION_SUFFIX = " [truncated]"


@dataclass
class VisionLLMSettings:
    """Configuration required to talk to the vision model."""

    api_key: str
    model: str = "gpt-4o-mini"
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None


@dataclass(slots=True)
class LLMResult:
    """Container for the raw and parsed outputs from a model call."""

    raw_text: str
    parsed_json: Any | None


@dataclass
class TextLLMSettings:
    """Configuration required to talk to a text-only model."""

    api_key: str
    model: str = "gpt-4o-mini"
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None


def attempt_json_parse(text: str | None) -> Any | None:
    """Try to convert a model's text output into JSON.

    Models like to wrap JSON in prose or code fences, so the outermost
    array or object is cut out before parsing. The earlier opening bracket is
    tried first; if prose such as "[3] recipes: {...}" makes that slice
    invalid, the other bracket kind is tried. Returns ``None`` when nothing
    parseable is found.
    """

    stripped = (text or "").strip()
    if not stripped:
        return None

    starts = sorted(
        idx for idx in (stripped.find("["), stripped.find("{")) if idx != -1
    )
    for start in starts:
        end = stripped.rfind(_JSON_BRACKETS[stripped[start]])
        if end < start:
            continue
        try:
            return json.loads(stripped[start : end + 1])
        except JSONDecodeError:
            logger.debug("LLM output slice was not valid JSON", exc_info=True)
    return None


def _create_response(
    client: OpenAI,
    *,
    model: str,
    content: list[dict[str, Any]],
    temperature: float | None,
) -> Response:
    params: dict[str, Any] = {"model": model, "input": content}
    if temperature is not None:
        params["temperature"] = temperature
    try:
        return client.responses.create(**params)
    except TimeoutException as e:
        logger.error("OpenAI / HTTP timeout: %r", e)
        raise
    except RequestError as e:
        logger.error("OpenAI / HTTP network error: %r", e)
        raise
    except Exception:
        logger.exception("OpenAI response error")
        raise


def _system_message(text: str) -> dict[str, Any]:
    return {
        "role": "system",
        "content": [{"type": "input_text", "text": text}],
    }


class VisionLLMClient:
    """Thin wrapper around the OpenAI Responses API for vision requests."""

    def __init__(self, settings: VisionLLMSettings) -> None:
        self._settings = settings
        self._client = OpenAI(api_key=settings.api_key)

    def analyze_image(self, *, image_url: str, prompt: str) -> LLMResult:
        """Send the given prompt and image (URL or data URI) to the model."""
        if not image_url:
            raise ValueError("image_url is empty")

        user_text = (prompt or "").strip()
        if not user_text:
            raise ValueError("prompt is required")

        content = []
        if self._settings.system_prompt:
            content.append(_system_message(self._settings.system_prompt))

        content.append(
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": user_text},
                    {"type": "input_image", "image_url": image_url},
                ],
            }
        )

        response = _create_response(
            self._client,
            model=self._settings.model,
            content=content,
            temperature=self._settings.temperature,
        )
        output_text = response.output_text
        return LLMResult(
            raw_text=output_text,
            parsed_json=attempt_json_parse(output_text),
        )


class TextLLMClient:
    """Minimal client for JSON-friendly text prompts."""

    def __init__(self, settings: TextLLMSettings) -> None:
        self._settings = settings
        self._client = OpenAI(api_key=settings.api_key)

    def run_prompt(
        self, *, prompt: str, system_prompt: str | None = None
    ) -> LLMResult:
        """Send a text-only prompt to the configured LLM."""

        user_text = (prompt or "").strip()
        if not user_text:
            raise ValueError("prompt is required")

        merged_system_prompt = (system_prompt or self._settings.system_prompt) or ""
        content = []
        if merged_system_prompt:
            content.append(_system_message(merged_system_prompt))

        content.append(
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": user_text},
                ],
            }
        )

        response = _create_response(
            self._client,
            model=self._settings.model,
            content=content,
            temperature=self._settings.temperature,
        )
        output_text = response.output_text
        return LLMResult(
            raw_text=output_text,
            parsed_json=attempt_json_parse(output_text),
        )


def init_vision_llm_client(settings: VisionLLMSettings) -> VisionLLMClient:
    """Create a ``VisionLLMClient`` instance from the provided settings."""

    return VisionLLMClient(settings)


def init_text_llm_client(settings: TextLLMSettings) -> TextLLMClient:
    """Create a ``TextLLMClient`` instance from the provided settings."""

    return TextLLMClient(settings)


def truncate_raw_llm_output(
    raw_text: str | None,
    *,
    limit_bytes: int = MAX_RAW_LLM_OUTPUT_BYTES,
) -> str | None:
    """Trim oversized model output before it is written to the logs."""
    if not raw_text:
        return None
    encoded = raw_text.encode("utf-8")
    if len(encoded) <= limit_bytes:
        return raw_text
    suffix_bytes = TRUNCATION_SUFFIX.encode("utf-8")
    if len(suffix_bytes) >= limit_bytes:
        return TRUNCATION_SUFFIX[:limit_bytes]
    truncated_bytes = encoded[: limit_bytes - len(suffix_bytes)]
    truncated_text = truncated_bytes.decode("utf-8", errors="ignore")
    return f"{truncated_text}{TRUNCATION_SUFFIX}"
