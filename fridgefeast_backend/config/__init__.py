"""Static configuration shipped with the codebase."""

# LLM defaults are in a dedicated module for clarity and reuse.
from .llm import (
    DEFAULT_LLM_MODEL,
    DEFAULT_VISION_SYSTEM_PROMPT,
    FILTER_CONSTRAINTS,
    PLACEHOLDER_IMAGE_URL,
    RECIPE_TEMPERATURE,
    VISION_TEMPERATURE,
    VISION_USER_PROMPT,
)

__all__ = [
    "DEFAULT_LLM_MODEL",
    "DEFAULT_VISION_SYSTEM_PROMPT",
    "FILTER_CONSTRAINTS",
    "PLACEHOLDER_IMAGE_URL",
    "RECIPE_TEMPERATURE",
    "VISION_TEMPERATURE",
    "VISION_USER_PROMPT",
]
