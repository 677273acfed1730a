"""
Authentication API endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.auth.dependencies import get_current_admin_optional, require_admin
from salesboard.auth.jwt import COOKIE_NAME, create_access_token
from salesboard.config import settings
from salesboard.db import get_db
from salesboard.models import Admin, AuditAction
from salesboard.schemas.auth import AdminResponse, LoginRequest, LoginResponse
from salesboard.utils.audit import get_client_ip, log_action
from salesboard.utils.password import verify_password

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate an admin and set the JWT cookie."""
    result = await db.execute(
        select(Admin).where(Admin.username == credentials.username)
    )
    admin = result.scalar_one_or_none()

    if not admin or not verify_password(credentials.password, admin.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    token = create_access_token(admin.id)

    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expire_hours * 3600,
    )

    admin.last_active_at = datetime.now(timezone.utc)

    await log_action(
        db=db,
        admin_id=admin.id,
        action=AuditAction.LOGIN,
        ip_address=get_client_ip(request),
    )

    return LoginResponse(
        success=True,
        message="Login successful",
        username=admin.username,
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin_optional),
):
    """Clear the JWT cookie."""
    if current_admin:
        await log_action(
            db=db,
            admin_id=current_admin.id,
            action=AuditAction.LOGOUT,
            ip_address=get_client_ip(request),
        )

    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=AdminResponse)
async def me(current_admin: Admin = Depends(require_admin)):
    """Return the logged-in admin."""
    return current_admin
