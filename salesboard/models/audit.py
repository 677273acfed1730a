"""
AuditLog model for tracking admin actions.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesboard.models.base import Base

if TYPE_CHECKING:
    from salesboard.models.admin import Admin


class AuditAction(str, Enum):
    """Types of auditable actions."""
    LOGIN = "login"
    LOGOUT = "logout"
    CREATE_PARTICIPANT = "create_participant"
    UPDATE_PROFILE = "update_profile"
    UPDATE_METRICS = "update_metrics"
    DELETE_PARTICIPANT = "delete_participant"
    ADD_DEAL = "add_deal"
    REMOVE_DEAL = "remove_deal"
    REMOVE_DEALS = "remove_deals"
    UPDATE_DEALS = "update_deals"
    UPLOAD_AVATAR = "upload_avatar"


class AuditLog(Base):
    """
    Audit log of admin actions.

    Scores are edited by hand, so every change is recorded together
    with who made it.
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    admin_id: Mapped[int] = mapped_column(
        ForeignKey("admins.id"),
        nullable=False,
        index=True,
    )
    action: Mapped[AuditAction] = mapped_column(
        SQLAlchemyEnum(
            AuditAction,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        index=True,
    )
    target_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Type of entity affected (participant, deal, avatar)",
    )
    target_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="ID of the affected entity",
    )
    action_metadata: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
        comment="Additional context about the action",
    )
    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),
        nullable=True,
        comment="IPv4 or IPv6 address",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    admin: Mapped["Admin"] = relationship(
        "Admin",
        back_populates="audit_logs",
    )

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, admin_id={self.admin_id}, action={self.action})>"
