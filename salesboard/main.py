"""
Salesboard - Sales Incentive Leaderboard

Main FastAPI application with:
- Admin authentication (JWT cookie)
- Participant metrics, deal ledger and score history
- Public leaderboard
- Avatar uploads
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select

from salesboard.api import api_router
from salesboard.auth.middleware import AuthMiddleware
from salesboard.config import settings
from salesboard.db import dispose_engine, get_db_context
from salesboard.models import Admin
from salesboard.services.avatars import UPLOAD_URL_PREFIX
from salesboard.utils.password import hash_password

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def ensure_admin_account(db) -> Admin:
    """Create the configured admin account if no admin exists yet."""
    result = await db.execute(select(Admin).limit(1))
    admin = result.scalar_one_or_none()

    if not admin:
        logger.info("Creating admin account...")
        admin = Admin(
            username=settings.admin_username,
            password_hash=hash_password(settings.admin_password),
            is_active=True,
        )
        db.add(admin)
        logger.info(f"Admin account created: {settings.admin_username}")

    return admin


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Creates the admin account if none exists

    Shutdown:
    - Disposes the database engine
    """
    logger.info("Starting Salesboard...")

    async with get_db_context() as db:
        await ensure_admin_account(db)

    logger.info("Salesboard started successfully!")

    yield

    logger.info("Shutting down Salesboard...")
    await dispose_engine()


app = FastAPI(
    title="Salesboard",
    description="Sales incentive leaderboard",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(AuthMiddleware)

# Uploaded avatars; the directory is created on first upload
app.mount(
    UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "salesboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
