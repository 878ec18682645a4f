"""
Error taxonomy for Relink.

Every failure the core can report is one of the classes below. The HTTP layer
maps them onto status codes through `status_code`, so business logic never
imports FastAPI.

- InvalidInput  (400): malformed URL, bad ID charset/length, missing field
- Unauthorized  (401): missing, invalid or expired session
- NotFound      (404): unresolved ID, missing primary for alias operations
- Conflict      (409): ID already taken
- StorageError  (503): the key-value backend failed (never reported as 404)
"""


class RelinkError(Exception):
    """Base class for all errors surfaced to callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(RelinkError, ValueError):
    status_code = 400


class Unauthorized(RelinkError):
    status_code = 401


class NotFound(RelinkError):
    status_code = 404


class Conflict(RelinkError):
    status_code = 409


class StorageError(RelinkError):
    status_code = 503
