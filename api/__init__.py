"""
Chat Relay — API Initialization

Creates Flask application instance.
Registers routes, static assets and the JSON error handler.

Usage:
    from api import create_app
    app = create_app()                # builds the AppContext from config
    app = create_app(context)         # tests inject their own
"""

from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from api.context import AppContext, build_app_context
from core.utils.logging_utils import get_component_logger


logger = get_component_logger("API", component="api")


# ============================================================
# CREATE FLASK APP
# ============================================================

def create_app(context: Optional[AppContext] = None):

    if context is None:
        context = build_app_context()

    api_cfg = context.api_config

    app = Flask(
        __name__,
        static_folder=api_cfg.get("static_dir"),
        static_url_path=""
    )

    # --------------------------------------------------------
    # Enable CORS
    # --------------------------------------------------------
    cors_origins_raw = str(api_cfg.get("cors_origins", "*"))
    cors_origins = (
        [origin.strip() for origin in cors_origins_raw.split(",") if origin.strip()]
        if cors_origins_raw != "*"
        else "*"
    )
    CORS(app, resources={r"/*": {"origins": cors_origins}})

    # --------------------------------------------------------
    # Register Routes
    # --------------------------------------------------------
    from api.routes import register_routes
    register_routes(app, context)

    # --------------------------------------------------------
    # Global Error Handler (JSON-safe)
    # --------------------------------------------------------
    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled Exception:")
        return jsonify({"error": "Internal server error"}), 500

    return app
