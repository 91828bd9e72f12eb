"""Environment-driven settings shared by the HTTP server and the CLI."""

from __future__ import annotations

import logging
import os


def env_int(name: str, fallback: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def env_str(name: str, fallback: str) -> str:
    return os.environ.get(name, "").strip() or fallback


TOKEN = os.environ.get("SGR_TOKEN", "").strip()
MAX_INPUT = env_int("SGR_MAX_INPUT", 1_000_000)
HOST = env_str("SGR_HOST", "127.0.0.1")
PORT = env_int("SGR_PORT", 8788)
LOG_LEVEL = env_str("SGR_LOG_LEVEL", "WARNING").upper()


def configure_logging(level: str | None = None) -> None:
    """Attach a stderr handler to the root logger unless one is present."""
    name = (level or LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format="%(levelname)s %(name)s: %(message)s")
