import logging

import click
from flask import Flask, request
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models.db_storage import DBStorage
from services import build_services
from utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

# flasgger: spec at /swagger.json, UI at /apidocs/
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "POS & Warehouse API",
        "version": "1.0.0",
        "description": "Back-office REST API for banks, branches, colors, phones, users, permissions "
                       "and the other reference data of a point-of-sale and warehouse business.",
    },
    "basePath": "/",  # blueprints are mounted under /api
    "schemes": ["http"],
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
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    The storage and the service registry are built here and kept on
    app.extensions; nothing in the codebase holds a module-level session.
    """
    app = Flask(__name__)

    # config class chosen by name or APP_ENV; .env already loaded by api.config
    app.config.from_object(get_config(config_name))
    configure_logging(app.config["LOG_LEVEL"])

    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config["SQLALCHEMY_ECHO"])
    storage.reload()
    app.extensions["storage"] = storage
    app.extensions["services"] = build_services(storage, app.config)

    # Cross-Origin Resource Sharing: origins from ALLOWED_ORIGINS
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # OpenAPI docs
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    if app.config["RATE_LIMIT_ENABLED"]:
        limiter = RateLimiter(app.config["RATE_LIMIT_MAX_REQUESTS"], app.config["RATE_LIMIT_WINDOW"])
        app.extensions["rate_limiter"] = limiter

        @app.before_request
        def apply_rate_limit():
            if request.path.startswith("/api/"):
                limiter.check(request.remote_addr or "unknown")

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .banks import bp as banks_bp
    from .branches import bp as branches_bp
    from .colors import bp as colors_bp
    from .reimbursement_types import bp as reimbursement_types_bp
    from .cek_giro_fail_statuses import bp as cek_giro_bp
    from .phones import bp as phones_bp
    from .user_permissions import bp as user_permissions_bp

    for bp in (health_bp, auth_bp, users_bp, banks_bp, branches_bp, colors_bp,
               reimbursement_types_bp, cek_giro_bp, phones_bp, user_permissions_bp):
        app.register_blueprint(bp, url_prefix="/api" + (bp.url_prefix or ""))

    # one scoped session per request
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.cli.command("cleanup-tokens")
    def cleanup_tokens():
        """Revoke refresh tokens older than the retention window."""
        count = app.extensions["services"].auth.cleanup_expired_tokens()
        logger.info("Token cleanup completed: revoked=%s", count)
        click.echo(f"Revoked {count} refresh tokens")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to POS & Warehouse API",
            "docs": "/apidocs/",
            "health": "/api/health",
        }, 200

    logger.info("Application created (env=%s)", app.config.get("APP_ENV"))
    return app
