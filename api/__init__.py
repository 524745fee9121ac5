from __future__ import annotations

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage

# Swagger 2 spec at /swagger.json, UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "VideoTube API",
        "version": "1.0.0",
        "description": "REST API for a video sharing platform: users, videos, comments, likes, "
                       "subscriptions, playlists, tweets and a channel dashboard.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

API_PREFIX = "/api/v1"


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class (tests use it
    to point DATABASE_URL and UPLOAD_FOLDER at a temporary directory).
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    # Cookies carry the tokens, so credentials must be allowed cross-origin
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage.init_app(app)

    from .health import bp as health_bp
    from .users import bp as users_bp
    from .videos import bp as videos_bp
    from .comments import bp as comments_bp
    from .likes import bp as likes_bp
    from .subscriptions import bp as subscriptions_bp
    from .playlists import bp as playlists_bp
    from .tweets import bp as tweets_bp
    from .dashboard import bp as dashboard_bp

    for blueprint in (
        health_bp,
        users_bp,
        videos_bp,
        comments_bp,
        likes_bp,
        subscriptions_bp,
        playlists_bp,
        tweets_bp,
        dashboard_bp,
    ):
        app.register_blueprint(blueprint, url_prefix=f"{API_PREFIX}{blueprint.url_prefix or ''}")

    # scoped_session.remove() at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to VideoTube API",
            "docs": "/apidocs/",
            "health": f"{API_PREFIX}/healthcheck",
        }, 200

    return app
