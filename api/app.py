"""
Chat Relay — Flask API Entry Point

Run:
    python -m api.app

Production:
    gunicorn "api.app:create_app()"
"""

from api import create_app
from api.context import build_app_context
from core.utils.logging_utils import get_component_logger


logger = get_component_logger("Server", component="api")


# ============================================================
# Run Server
# ============================================================

def main():

    try:
        context = build_app_context()
    except Exception:
        logger.exception("Failed to start server")
        raise SystemExit(1)

    app = create_app(context)

    api_cfg = context.api_config
    host = api_cfg.get("host", "0.0.0.0")
    port = int(api_cfg.get("port", 3000))
    debug = bool(api_cfg.get("debug", False))

    logger.info(f"Server is running on port {port} (host={host}, debug={debug})")

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == "__main__":
    main()
