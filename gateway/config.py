"""Configuration settings for the gateway server."""

import os
from typing import Optional, Tuple

from common.constants import CHUNK_SIZE_BYTES, DEFAULT_CHUNK_STORAGE_PATH, DEFAULT_GATEWAY_PORT


GATEWAY_HOST = os.environ.get("GATEWAY_HOST", "0.0.0.0")

GATEWAY_PORT = int(os.environ.get("PORT", str(DEFAULT_GATEWAY_PORT)))

AUTH = os.environ.get("AUTH", "")

CDN_ENABLED = os.environ.get("CDN", "").strip().lower() not in ("", "0", "false", "no", "off")

STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "local")

CHUNK_STORAGE_PATH = os.environ.get("CHUNK_STORAGE_PATH", DEFAULT_CHUNK_STORAGE_PATH)

GATEWAY_CHUNK_SIZE_BYTES = int(os.environ.get("CHUNK_SIZE_BYTES", str(CHUNK_SIZE_BYTES)))


def parse_auth(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Split an ``user:password`` string into its parts.

    Args:
        value: Raw AUTH setting

    Returns:
        (username, password) when both parts are non-empty, otherwise None
    """
    if not value or ":" not in value:
        return None
    username, password = value.split(":", 1)
    if not username or not password:
        return None
    return username, password
