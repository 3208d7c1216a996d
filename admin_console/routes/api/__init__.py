"""API routes - all prefixed with /api."""

from flask import Blueprint

from . import starter

api_bp = Blueprint("api", __name__, url_prefix="/api")
api_bp.register_blueprint(starter.bp)

__all__ = ["api_bp"]
