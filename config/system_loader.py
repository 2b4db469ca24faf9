"""
Chat Relay — YAML Configuration Loader

Loads:
- db.yaml
- models.yaml
- settings.yaml

Environment variables (and a local .env file) override the YAML values
for anything deployment specific: API key, vector store address, port.

Usage:
    from config.system_loader import load_config
    config = load_config()
"""

import os
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv

from core.exceptions import ConfigError


# -------------------------------------------------
# Base Config Path
# -------------------------------------------------

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BASE_DIR)

SUPPORTED_PROVIDERS = ("groq", "ollama")


def _load_yaml(filename: str):
    path = os.path.join(BASE_DIR, filename)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# -------------------------------------------------
# Public Config Getters
# -------------------------------------------------

def get_database_config():
    return _load_yaml("db.yaml")


def get_model_config():
    return _load_yaml("models.yaml")


def get_system_config():
    return _load_yaml("settings.yaml")


# -------------------------------------------------
# Environment Helpers
# -------------------------------------------------

def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_number(name: str, value, cast):
    try:
        return cast(value)
    except (TypeError, ValueError):
        kind = "an integer" if cast is int else "a number"
        raise ConfigError(f"{name} must be {kind}, got {value!r}")


def _env_int(name: str, value: str) -> int:
    return _as_number(name, value, int)


def parse_chroma_url(url: str) -> Tuple[str, int, bool]:
    """
    Split a vector store address such as ``https://chroma.example.com``
    into ``(host, port, ssl)``.
    """

    parsed = urlparse(url if "://" in url else f"http://{url}")

    if not parsed.hostname:
        raise ConfigError(f"Invalid CHROMA_URL: {url!r}")

    ssl = parsed.scheme == "https"
    port = parsed.port or (443 if ssl else 8000)
    return parsed.hostname, port, ssl


# -------------------------------------------------
# Validation
# -------------------------------------------------

def _validate_completion(completion: Dict) -> None:

    provider = completion.get("provider")
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Unsupported completion provider {provider!r} "
            f"(expected one of {', '.join(SUPPORTED_PROVIDERS)})"
        )

    recognized = (completion.get("recognized_models") or {}).get(provider) or []
    if completion.get("model") not in recognized:
        raise ConfigError(
            f"Model {completion.get('model')!r} is not recognized for "
            f"provider {provider!r}: {recognized}"
        )

    temperature = _as_number("temperature", completion.get("temperature", 0.7), float)
    if not 0.0 <= temperature <= 2.0:
        raise ConfigError(f"temperature must be within [0, 2], got {temperature}")
    completion["temperature"] = temperature

    max_tokens = _as_number("max_tokens", completion.get("max_tokens", 1024), int)
    if max_tokens < 1:
        raise ConfigError(f"max_tokens must be >= 1, got {max_tokens}")
    completion["max_tokens"] = max_tokens

    if provider == "groq" and not completion.get("api_key"):
        raise ConfigError("GROQ_API_KEY must be set to use the groq provider.")


# -------------------------------------------------
# Merged Runtime Config
# -------------------------------------------------

def load_config(env: Optional[Dict[str, str]] = None) -> Dict:
    """
    Merge the YAML files with environment overrides and validate.

    ``env`` defaults to ``os.environ`` (after loading ``.env``).
    Returns a dict with ``project``, ``api``, ``embedding``,
    ``completion`` and ``vector_db`` sections.
    """

    if env is None:
        load_dotenv()
        env = dict(os.environ)

    model_cfg = get_model_config()
    db_cfg = get_database_config()
    system_cfg = get_system_config()

    embedding = dict(model_cfg.get("embedding", {}))
    completion = dict(model_cfg.get("completion", {}))
    vector_db = dict(db_cfg.get("vector_db", {}))
    api = dict(system_cfg.get("api", {}))
    project = dict(system_cfg.get("project", {}))

    # -- Embedding --
    if env.get("EMBEDDING_MODEL"):
        embedding["model"] = env["EMBEDDING_MODEL"]

    # -- Completion --
    if env.get("COMPLETION_PROVIDER"):
        completion["provider"] = env["COMPLETION_PROVIDER"].strip().lower()
    if env.get("COMPLETION_MODEL"):
        completion["model"] = env["COMPLETION_MODEL"]
    if env.get("OLLAMA_BASE_URL"):
        completion["ollama_base_url"] = env["OLLAMA_BASE_URL"]
    completion["api_key"] = env.get("GROQ_API_KEY") or None

    _validate_completion(completion)

    # -- Vector DB --
    if env.get("CHROMA_URL"):
        vector_db["host"], vector_db["port"], vector_db["ssl"] = parse_chroma_url(
            env["CHROMA_URL"]
        )
    else:
        if env.get("CHROMA_HOST"):
            vector_db["host"] = env["CHROMA_HOST"]
        if env.get("CHROMA_PORT"):
            vector_db["port"] = _env_int("CHROMA_PORT", env["CHROMA_PORT"])
        if env.get("CHROMA_SSL"):
            vector_db["ssl"] = _env_bool(env["CHROMA_SSL"])

    vector_db["port"] = _as_number("port", vector_db.get("port", 8000), int)
    vector_db["ssl"] = bool(vector_db.get("ssl", False))

    vector_db["history_limit"] = _as_number(
        "history_limit", vector_db.get("history_limit", 5), int
    )
    if vector_db["history_limit"] < 1:
        raise ConfigError("history_limit must be >= 1")

    # -- API --
    if env.get("API_HOST"):
        api["host"] = env["API_HOST"]
    if env.get("PORT"):
        api["port"] = _env_int("PORT", env["PORT"])
    if env.get("API_DEBUG"):
        api["debug"] = _env_bool(env["API_DEBUG"])
    if env.get("CORS_ORIGINS"):
        api["cors_origins"] = env["CORS_ORIGINS"]

    static_dir = api.get("static_dir", "public")
    if not os.path.isabs(static_dir):
        static_dir = os.path.join(PROJECT_ROOT, static_dir)
    api["static_dir"] = static_dir

    return {
        "project": project,
        "api": api,
        "embedding": embedding,
        "completion": completion,
        "vector_db": vector_db,
    }
