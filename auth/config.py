"""
Configuration for the auth module.

Hashing parameters are fixed constants so stored credentials stay verifiable
across deployments; session lifetime and password policy come from
`relink_platform.config.settings`.
"""

from relink_platform.config import settings

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
TOKEN_BYTES = 32

SESSION_TTL_SECONDS: int = settings.SESSION_TTL
MIN_PASSWORD_LENGTH: int = settings.MIN_PASSWORD_LENGTH
