"""Utility helper functions for the gateway."""

import base64
import json
import re
import uuid

_WHITESPACE = re.compile(r"\s")


def generate_request_id() -> str:
    """
    Generate a new UUID4 string for request tracing.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def normalize_object_name(raw_name: str) -> str:
    """
    Replace every whitespace character in an upload name with '_'.

    Args:
        raw_name: Name as requested in the URL path (already percent-decoded)

    Returns:
        Normalized name used as the catalog key
    """
    return _WHITESPACE.sub("_", raw_name)


def encode_base64_json(payload) -> str:
    """
    Serialize payload as compact JSON and base64-encode it.

    Args:
        payload: JSON-serializable object

    Returns:
        ASCII base64 string
    """
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_base64_json(encoded: str):
    """Inverse of encode_base64_json."""
    return json.loads(base64.b64decode(encoded).decode("utf-8"))
