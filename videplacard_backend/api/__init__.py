"""API package wiring for the Vide-Placard backend."""

from flask import Flask

from .ingredients import bp as ingredients_bp
from .recipes import bp as recipes_bp
from .saved_recipes import bp as saved_recipes_bp
from .scan import bp as scan_bp


def init_app(app: Flask) -> None:
    """Register all API blueprints on the given application."""

    app.register_blueprint(ingredients_bp)
    app.register_blueprint(recipes_bp)
    app.register_blueprint(saved_recipes_bp)
    app.register_blueprint(scan_bp)
