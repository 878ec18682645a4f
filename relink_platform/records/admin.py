"""
Admin credential record (`__admin__`): base64 PBKDF2 hash plus its salt.
Its absence means the instance has not been set up yet.
"""

import json
from dataclasses import dataclass

from ..errors import StorageError

ADMIN_KEY = "__admin__"
SESSION_PREFIX = "__session__:"


def session_key(token: str) -> str:
    return f"{SESSION_PREFIX}{token}"


@dataclass(frozen=True)
class AdminCredential:
    hash: str
    salt: str

    def encode(self) -> str:
        return json.dumps({"hash": self.hash, "salt": self.salt})

    @classmethod
    def decode(cls, raw: str) -> "AdminCredential":
        try:
            data = json.loads(raw)
            return cls(hash=data["hash"], salt=data["salt"])
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Corrupt record under {ADMIN_KEY!r}") from exc
