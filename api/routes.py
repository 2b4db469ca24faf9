"""
Application API routes.

Includes:
- POST /chat   → retrieval-augmented chat turn
- GET  /health → liveness + history size
- GET  /       → static front-end (public/index.html)
"""

import time
from flask import jsonify, request

from api.context import AppContext
from core.exceptions import CompletionError, ValidationError
from core.utils.logging_utils import get_component_logger


logger = get_component_logger("Routes", component="api")


def register_routes(app, context: AppContext):
    agent = context.agent

    @app.route("/", methods=["GET"])
    def root():
        if app.has_static_folder:
            return app.send_static_file("index.html")
        return jsonify({"service": context.service_name, "status": "running"})

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify(
            {
                "status": "ok",
                "service": context.service_name,
                "history_records": context.store.count(),
                "embedding": context.embedder.get_model_info(),
            }
        )

    @app.route("/chat", methods=["POST"])
    def chat():
        start_time = time.time()
        data = request.get_json(silent=True)

        message = data.get("message") if isinstance(data, dict) else None

        try:
            turn = agent.respond(message)
        except ValidationError as exc:
            return jsonify({"error": str(exc)}), 400
        except CompletionError:
            logger.exception("Error in chat endpoint")
            return jsonify({"error": "Internal server error"}), 500

        total_time = round(time.time() - start_time, 4)
        logger.info(
            f"/chat answered in {total_time}s "
            f"(history={len(turn.history)}, persisted={turn.persisted})"
        )

        return jsonify({"response": turn.reply})
