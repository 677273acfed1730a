"""API router aggregation."""

from fastapi import APIRouter

from salesboard.api.auth import router as auth_router
from salesboard.api.health import router as health_router
from salesboard.api.leaderboard import router as leaderboard_router
from salesboard.api.participants import router as participants_router
from salesboard.api.uploads import router as uploads_router

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(leaderboard_router)
api_router.include_router(participants_router)
api_router.include_router(uploads_router)

__all__ = ["api_router"]
