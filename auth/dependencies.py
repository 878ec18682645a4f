"""
FastAPI dependency functions for authentication.

These can be used in routes with Depends() to protect endpoints.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from relink_platform.errors import Unauthorized

from .service import AuthService

# Bearer scheme; errors are raised by require_admin so they share the
# app-wide {"error": ...} body.
security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    return credentials.credentials if credentials else None


def require_admin(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> None:
    """
    Dependency that rejects requests without a live admin session.

    Raises:
        Unauthorized: Missing, unknown or expired token.
    """
    if not auth.is_authenticated(token):
        raise Unauthorized("Unauthorized")
