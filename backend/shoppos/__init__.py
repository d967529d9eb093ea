# backend/shoppos/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate


CORS_HEADERS = {
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,PATCH,OPTIONS",
}


def _blueprints():
    from .routes.auth import auth_bp
    from .routes.items import items_bp
    from .routes.locations import locations_bp
    from .routes.offers import offers_bp
    from .routes.reports import reports_bp
    from .routes.sales import sales_bp
    from .routes.settings import settings_bp
    from .routes.system import system_bp
    from .routes.users import users_bp

    return (
        system_bp, auth_bp, users_bp, locations_bp, items_bp,
        sales_bp, offers_bp, settings_bp, reports_bp,
    )


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    app.config.update(config_overrides or {})

    db.init_app(app)
    migrate.init_app(app, db)

    # Model classes must be imported before Alembic autogenerate reads metadata
    from . import models  # noqa: F401

    for blueprint in _blueprints():
        app.register_blueprint(blueprint)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in (app.config.get("CORS_ALLOWED_ORIGINS") or ()):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers.update(CORS_HEADERS)
        return response

    from .cli import register_commands
    register_commands(app)

    return app
