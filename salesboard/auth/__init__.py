"""Authentication module."""

from salesboard.auth.dependencies import get_current_admin_optional, require_admin
from salesboard.auth.jwt import create_access_token, verify_token

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_admin_optional",
    "require_admin",
]
