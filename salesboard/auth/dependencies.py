"""
FastAPI dependencies for authentication.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.auth.jwt import get_token_from_cookie, verify_token
from salesboard.db import get_db
from salesboard.models import Admin


async def get_current_admin_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[Admin]:
    """
    Get current admin from JWT cookie if present.

    Returns None if no valid token found (doesn't raise error).
    """
    token = get_token_from_cookie(request)
    if not token:
        return None

    payload = verify_token(token)
    if not payload:
        return None

    admin = await db.get(Admin, payload["admin_id"])
    if not admin or not admin.is_active:
        return None

    return admin


async def require_admin(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Admin:
    """
    Require an authenticated, active admin.

    Raises 401 if not authenticated, 403 if the account is disabled.
    """
    token = get_token_from_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    admin = await db.get(Admin, payload["admin_id"])

    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found",
        )

    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin account is disabled",
        )

    return admin
