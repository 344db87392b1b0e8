import logging
import os
from typing import Any, Mapping, Optional

from flask import Flask, jsonify

from fridgefeast_backend.api import init_app as init_api
from fridgefeast_backend.config import (
    DEFAULT_LLM_MODEL,
    DEFAULT_VISION_SYSTEM_PROMPT,
    RECIPE_TEMPERATURE,
    VISION_TEMPERATURE,
)
from fridgefeast_backend.services.illustration import PlaceholderIllustrator
from fridgefeast_backend.services.llm import (
    TextLLMSettings,
    VisionLLMSettings,
    init_text_llm_client,
    init_vision_llm_client,
)
from fridgefeast_backend.services.recipes import (
    LLMRecipeGenerator,
    MockRecipeGenerator,
    RecipeService,
)
from fridgefeast_backend.services.vision import (
    LLMVisionClassifier,
    MockVisionClassifier,
)

DEFAULT_MAX_UPLOAD_BYTES = 8 * 1024 * 1024
_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").strip().lower() in _TRUTHY


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Application factory for the Fridge Feast backend."""
    app = Flask(__name__)

    _configure_logging(app)
    _load_config(app, test_config or {})

    @app.get("/healthz")
    def healthcheck():
        return jsonify(status="ok")

    @app.get("/api/healthz")
    def api_healthcheck():
        return jsonify(status="ok", mockMode=app.config["MOCK_MODE"])

    @app.errorhandler(413)
    def payload_too_large(_error):
        return jsonify(error="uploaded image is too large"), 413

    _init_providers(app)
    init_api(app)

    return app


def _configure_logging(app: Flask) -> None:
    """Ensure application and root loggers emit INFO-level logs."""

    logging.basicConfig(level=logging.INFO)
    logging.getLogger().setLevel(logging.INFO)
    app.logger.setLevel(logging.INFO)


def _load_config(app: Flask, overrides: Mapping[str, Any]) -> None:
    """Read settings from the environment, then apply explicit overrides."""

    api_key = os.environ.get("FRIDGEFEAST_LLM_API_KEY") or os.environ.get(
        "OPENAI_API_KEY"
    )
    max_upload_env = os.environ.get("FRIDGEFEAST_MAX_UPLOAD_BYTES")
    try:
        max_upload = int(max_upload_env) if max_upload_env else DEFAULT_MAX_UPLOAD_BYTES
    except ValueError:
        app.logger.warning(
            "invalid FRIDGEFEAST_MAX_UPLOAD_BYTES=%s; using default",
            max_upload_env,
        )
        max_upload = DEFAULT_MAX_UPLOAD_BYTES

    app.config.update(
        LLM_API_KEY=api_key,
        LLM_MODEL=os.environ.get("FRIDGEFEAST_LLM_MODEL", DEFAULT_LLM_MODEL),
        MOCK_MODE=_env_flag("FRIDGEFEAST_MOCK_MODE"),
        IMAGE_GEN_ENABLED=_env_flag("FRIDGEFEAST_IMAGE_GEN_ENABLED"),
        MAX_CONTENT_LENGTH=max_upload,
    )
    app.config.update(overrides)

    if not app.config["LLM_API_KEY"] and not app.config["MOCK_MODE"]:
        app.logger.warning(
            "FRIDGEFEAST_LLM_API_KEY/OPENAI_API_KEY not set; using mock providers"
        )
        app.config["MOCK_MODE"] = True


def _init_providers(app: Flask) -> None:
    """Pick fixture or live model providers once, based on configuration."""

    app.extensions["illustrator"] = PlaceholderIllustrator(
        enabled=bool(app.config["IMAGE_GEN_ENABLED"])
    )

    if app.config["MOCK_MODE"]:
        app.logger.info("mock mode enabled; serving fixture ingredients and recipes")
        app.extensions["vision_classifier"] = MockVisionClassifier()
        app.extensions["recipe_service"] = RecipeService(MockRecipeGenerator())
        return

    api_key = app.config["LLM_API_KEY"]
    model = app.config["LLM_MODEL"]
    app.extensions["vision_classifier"] = LLMVisionClassifier(
        init_vision_llm_client(
            VisionLLMSettings(
                api_key=api_key,
                model=model,
                system_prompt=DEFAULT_VISION_SYSTEM_PROMPT,
                temperature=VISION_TEMPERATURE,
            )
        )
    )
    app.extensions["recipe_service"] = RecipeService(
        LLMRecipeGenerator(
            init_text_llm_client(
                TextLLMSettings(
                    api_key=api_key,
                    model=model,
                    temperature=RECIPE_TEMPERATURE,
                )
            )
        )
    )
    app.logger.info("using live model providers", extra={"model": model})


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8000)
