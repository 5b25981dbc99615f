"""Access token verification.

Tokens are issued by the main backend's auth service; this service only
verifies them with the shared secret.
"""

from typing import Any

from jose import JWTError, jwt

from src.sparkhub.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT token. Returns None on any error."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
