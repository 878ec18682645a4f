"""
Utility functions for the auth module.
"""

import base64
import hashlib
import hmac
import os
import secrets
from typing import Optional, Tuple

from .config import PBKDF2_ALGORITHM, PBKDF2_ITERATIONS, SALT_BYTES, TOKEN_BYTES


def hash_password(password: str, salt: Optional[bytes] = None) -> Tuple[str, str]:
    """
    Derive a PBKDF2-HMAC-SHA256 hash of `password`.

    Args:
        password (str): Plain-text password.
        salt (Optional[bytes]): Reuse an existing salt; a fresh random one otherwise.

    Returns:
        Tuple[str, str]: (hash, salt), both base64-encoded.
    """
    salt_bytes = salt if salt is not None else os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(PBKDF2_ALGORITHM, password.encode("utf-8"), salt_bytes, PBKDF2_ITERATIONS)
    return base64.b64encode(digest).decode("ascii"), base64.b64encode(salt_bytes).decode("ascii")


def verify_password(password: str, stored_hash: str, stored_salt: str) -> bool:
    """Constant-time check of `password` against a stored hash and salt."""
    candidate, _ = hash_password(password, base64.b64decode(stored_salt))
    return hmac.compare_digest(candidate, stored_hash)


def generate_token() -> str:
    """Return a URL-safe session token (32 random bytes, no padding)."""
    return secrets.token_urlsafe(TOKEN_BYTES).rstrip("=")
