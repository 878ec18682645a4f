"""
Core authentication logic.

This module handles admin setup, login, logout and password changes. The
credential and sessions live in the same key-value store as links:

    __admin__           {"hash", "salt"}   (absent = not set up yet)
    __session__:<token> "1" with a TTL     (expiry enforced by the store)
"""

import logging
from typing import Optional

from relink_platform.errors import InvalidInput, Unauthorized
from relink_platform.records.admin import ADMIN_KEY, AdminCredential, session_key
from relink_platform.storage.base import BaseStorage

from .config import MIN_PASSWORD_LENGTH, SESSION_TTL_SECONDS
from .utils import generate_token, hash_password, verify_password

log = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        storage: BaseStorage,
        no_token: bool = False,
        session_ttl: int = SESSION_TTL_SECONDS,
        min_password_length: int = MIN_PASSWORD_LENGTH,
    ):
        """
        Args:
            storage (BaseStorage): Store holding the credential and sessions.
            no_token (bool): Treat every request as authenticated.
            session_ttl (int): Session lifetime in seconds.
            min_password_length (int): Minimum accepted password length.
        """
        self.storage = storage
        self.no_token = no_token
        self.session_ttl = session_ttl
        self.min_password_length = min_password_length

    def _credential(self) -> Optional[AdminCredential]:
        raw = self.storage.get(ADMIN_KEY)
        return AdminCredential.decode(raw) if raw is not None else None

    def _store_password(self, password: str) -> None:
        digest, salt = hash_password(password)
        self.storage.put(ADMIN_KEY, AdminCredential(hash=digest, salt=salt).encode())

    def is_setup(self) -> bool:
        return self.no_token or self.storage.get(ADMIN_KEY) is not None

    def status(self) -> dict:
        return {"setup": self.is_setup(), "noTokenCheck": self.no_token}

    def setup(self, password: Optional[str]) -> None:
        """
        Set the admin password for the first time.

        Raises:
            InvalidInput: Already set up, or the password is too short.
        """
        if self.storage.get(ADMIN_KEY) is not None:
            raise InvalidInput("Already set up")
        if not password or len(password) < self.min_password_length:
            raise InvalidInput(f"Password must be at least {self.min_password_length} characters")
        self._store_password(password)
        log.info("admin password configured")

    def login(self, password: Optional[str]) -> str:
        """
        Exchange the admin password for a session token.

        Raises:
            InvalidInput: No admin password has been set up.
            Unauthorized: Wrong password.
        """
        credential = self._credential()
        if credential is None:
            raise InvalidInput("Not configured")
        if not password or not verify_password(password, credential.hash, credential.salt):
            log.warning("failed admin login")
            raise Unauthorized("Invalid password")
        token = generate_token()
        self.storage.put(session_key(token), "1", ttl=self.session_ttl)
        return token

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.storage.delete(session_key(token))

    def is_authenticated(self, token: Optional[str]) -> bool:
        if self.no_token:
            return True
        if not token:
            return False
        return self.storage.get(session_key(token)) is not None

    def change_password(self, current: Optional[str], new: Optional[str]) -> None:
        """
        Replace the admin password (existing sessions stay valid).

        Raises:
            InvalidInput: Not configured, or the new password is too short.
            Unauthorized: `current` does not match.
        """
        credential = self._credential()
        if credential is None:
            raise InvalidInput("Not configured")
        if not current or not verify_password(current, credential.hash, credential.salt):
            raise Unauthorized("Current password is incorrect")
        if not new or len(new) < self.min_password_length:
            raise InvalidInput(f"New password must be at least {self.min_password_length} characters")
        self._store_password(new)
        log.info("admin password changed")
