"""
Authentication middleware for admin-only API routes.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from salesboard.auth.jwt import get_token_from_cookie, verify_token

logger = logging.getLogger(__name__)

# Route prefixes that require an admin token. Everything else
# (leaderboard, health, login, uploaded avatars, docs) is public.
PROTECTED_PREFIXES = (
    "/api/participants",
    "/api/upload",
)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Reject unauthenticated calls to admin API routes early.

    Route dependencies (require_admin) still check the admin account
    itself; this only short-circuits requests without a valid token.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if not path.startswith(PROTECTED_PREFIXES):
            return await call_next(request)

        token = get_token_from_cookie(request)
        payload = verify_token(token) if token else None

        if not payload:
            logger.debug(f"Rejected unauthenticated request to {path}")
            return Response(
                content='{"detail": "Not authenticated"}',
                status_code=401,
                media_type="application/json",
            )

        return await call_next(request)
