"""
Database models for Salesboard.

All models are exported here for convenient imports:
    from salesboard.models import Participant, ParticipantDeal, Admin, etc.
"""

from salesboard.models.admin import Admin
from salesboard.models.audit import AuditAction, AuditLog
from salesboard.models.base import Base, TimestampMixin
from salesboard.models.participant import (
    DealType,
    Participant,
    ParticipantDeal,
    ScoreHistory,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Admin
    "Admin",
    # Participant
    "Participant",
    "ParticipantDeal",
    "ScoreHistory",
    "DealType",
    # Audit
    "AuditLog",
    "AuditAction",
]
