"""
Pydantic schemas for request/response models in the auth module.
"""

from typing import Optional

from pydantic import BaseModel


class PasswordIn(BaseModel):
    """Setup and login payload."""
    password: Optional[str] = None


class PasswordChangeIn(BaseModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None


class TokenOut(BaseModel):
    token: str


class StatusOut(BaseModel):
    setup: bool
    noTokenCheck: bool


class OkOut(BaseModel):
    ok: bool = True
