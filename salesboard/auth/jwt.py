"""
JWT token management.

Tokens are stored in httpOnly cookies for security.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from salesboard.config import settings

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "access"
ADMIN_ROLE = "admin"
COOKIE_NAME = "access_token"


def create_access_token(
    admin_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token for an admin.

    Args:
        admin_id: Admin's database ID
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.jwt_expire_hours))

    payload = {
        "sub": str(admin_id),
        "role": ADMIN_ROLE,
        "exp": expire,
        "type": TOKEN_TYPE,
        "iat": now,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.

    Returns:
        Dict with 'admin_id' and 'role', or None if the token is
        invalid, expired or not an admin access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    admin_id = payload.get("sub")
    role = payload.get("role")
    if not admin_id or role != ADMIN_ROLE:
        return None

    return {
        "admin_id": int(admin_id),
        "role": role,
    }


def get_token_from_cookie(request) -> Optional[str]:
    """Extract JWT token from httpOnly cookie."""
    return request.cookies.get(COOKIE_NAME)
