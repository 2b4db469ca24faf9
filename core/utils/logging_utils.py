"""
Chat Relay — Component Loggers

Each component writes to its own rotating file under CHATRELAY_LOG_DIR
and echoes to stderr. Unknown components share ``relay.log``.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_DIR = Path(os.getenv("CHATRELAY_LOG_DIR", "logs"))

_COMPONENT_FILES = {
    "api": "api.log",
    "retrieval": "retrieval.log",
    "completion": "completion.log",
}
_SHARED_FILE = "relay.log"

_FORMAT = logging.Formatter("%(asctime)s | %(levelname)-7s | %(name)s | %(message)s")


def log_path_for(component: str) -> Path:
    return LOG_DIR / _COMPONENT_FILES.get(component, _SHARED_FILE)


def get_component_logger(name: str, component: str = "api") -> logging.Logger:
    logger = logging.getLogger(f"chatrelay.{component}.{name}")

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    console = logging.StreamHandler()
    console.setFormatter(_FORMAT)
    logger.addHandler(console)

    path = log_path_for(component)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        to_file = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        logger.warning(f"File logging disabled, cannot open {path}")
    else:
        to_file.setFormatter(_FORMAT)
        logger.addHandler(to_file)

    return logger
