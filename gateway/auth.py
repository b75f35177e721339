"""HTTP Basic authentication for the gateway."""

import base64
import binascii
import hashlib
import secrets
from typing import Optional, Tuple

import bcrypt


def _prehash(password: str) -> bytes:
    """
    Reduce a password of any length to a 44-byte bcrypt input.

    bcrypt only looks at the first 72 bytes, so the SHA-256 digest is
    hashed instead of the raw password.
    """
    digest = hashlib.sha256(password.encode('utf-8')).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash (any length)

    Returns:
        Bcrypt hash of the password
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_prehash(password), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    hash_bytes = password_hash.encode('utf-8')
    try:
        return bcrypt.checkpw(_prehash(password), hash_bytes)
    except ValueError:
        # malformed stored hash
        return False


def parse_basic_authorization(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extract credentials from an Authorization header.

    Args:
        header: Authorization header value (format: "Basic <base64 user:pass>")

    Returns:
        (username, password) or None if the header is missing or malformed
    """
    if not header or not header.startswith("Basic "):
        return None

    encoded = header[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return None

    if ":" not in decoded:
        return None
    username, password = decoded.split(":", 1)
    return username, password


class BasicAuthenticator:
    """
    Checks request credentials against the single configured operator.

    The password is only kept as a bcrypt hash.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self._password_hash = hash_password(password)

    def verify(self, authorization: Optional[str]) -> bool:
        credentials = parse_basic_authorization(authorization)
        if credentials is None:
            return False

        username, password = credentials
        if not secrets.compare_digest(username.encode('utf-8'), self.username.encode('utf-8')):
            return False
        return verify_password(password, self._password_hash)
