"""API package wiring for the Fridge Feast backend."""

from flask import Flask

from .images import bp as images_bp
from .prefs import bp as prefs_bp
from .recipes import bp as recipes_bp
from .vision import bp as vision_bp


def init_app(app: Flask) -> None:
    """Register all API blueprints on the given application."""

    app.register_blueprint(vision_bp)
    app.register_blueprint(recipes_bp)
    app.register_blueprint(images_bp)
    app.register_blueprint(prefs_bp)
