"""Pydantic schemas for request/response validation."""

from salesboard.schemas.auth import AdminResponse, LoginRequest, LoginResponse
from salesboard.schemas.participant import (
    DealBulkRemove,
    DealBulkUpdate,
    DealCreate,
    DealRecord,
    GoalProgress,
    GoalsUpdate,
    HistoryEntry,
    LeaderboardEntry,
    MetricsPatchRequest,
    MetricsUpdate,
    ParticipantCreate,
    ParticipantRecord,
    ParticipantResponse,
    ProfileUpdate,
    UploadResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "AdminResponse",
    # Participant
    "ParticipantCreate",
    "ParticipantRecord",
    "ParticipantResponse",
    "ProfileUpdate",
    "MetricsUpdate",
    "GoalsUpdate",
    "MetricsPatchRequest",
    "GoalProgress",
    "HistoryEntry",
    "LeaderboardEntry",
    # Deal
    "DealCreate",
    "DealRecord",
    "DealBulkRemove",
    "DealBulkUpdate",
    # Uploads
    "UploadResponse",
]
