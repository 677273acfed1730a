"""
Shared API dependencies and error mapping.
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.db import get_db
from salesboard.exceptions import (
    DealNotFoundError,
    InvalidInputError,
    ParticipantNotFoundError,
    SalesboardError,
    StorageError,
)
from salesboard.services.metrics_engine import MetricsEngine
from salesboard.store import SqlParticipantStore


async def get_metrics_engine(
    db: AsyncSession = Depends(get_db),
) -> MetricsEngine:
    """Metrics engine bound to the request's database session."""
    return MetricsEngine(SqlParticipantStore(db))


def to_http_exception(error: SalesboardError) -> HTTPException:
    """Map a domain error to the HTTP status the client should see."""
    if isinstance(error, (ParticipantNotFoundError, DealNotFoundError)):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(error),
        )
    if isinstance(error, InvalidInputError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(error),
        )
    if isinstance(error, StorageError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable, please retry later",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(error),
    )
