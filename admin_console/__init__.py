import logging
import uuid

from flask import Flask, g, jsonify, request

from . import db
from .config import Config, ImpersonationSettings
from .errors import ConfigurationError
from .routes import api_bp

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "X-Frame-Options": "DENY",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}


def load_impersonation_settings() -> ImpersonationSettings | None:
    """Build settings from the environment once, at startup.

    A missing or weak secret must not keep the console from booting; the
    impersonation endpoint then fails per request with a generic message.
    """
    try:
        return ImpersonationSettings.from_env()
    except ConfigurationError as e:
        log.warning(f"Starter impersonation disabled until configured: {e}")
        return None


def create_app(config: dict | None = None):
    app = Flask(__name__)
    app.secret_key = Config.SECRET_KEY
    app.config["ADMIN_APP_URL"] = Config.ADMIN_APP_URL
    app.config["PLATFORM_STORE"] = None
    if config is None or "IMPERSONATION_SETTINGS" not in config:
        app.config["IMPERSONATION_SETTINGS"] = load_impersonation_settings()
    if config:
        app.config.update(config)

    # Database lifecycle
    db.init_app(app)

    # Request context middleware
    @app.before_request
    def set_request_context():
        g.request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

    @app.after_request
    def add_response_headers(response):
        response.headers["X-Request-ID"] = g.get("request_id", "")
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # Blueprints
    app.register_blueprint(api_bp)  # /api/*

    @app.context_processor
    def inject_context():
        return {"app_name": Config.APP_NAME}

    # Error handlers
    @app.errorhandler(400)
    def bad_request(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "bad request"}), 400
        return "Bad Request", 400

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "not found"}), 404
        return "Not Found", 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "method not allowed"}), 405
        return "Method Not Allowed", 405

    @app.errorhandler(500)
    def internal_error(e):
        log.exception("Internal server error")
        if request.path.startswith("/api/"):
            return jsonify({"error": "internal server error"}), 500
        return "Internal Server Error", 500

    return app
