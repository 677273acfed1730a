"""
Admin account model.

Admins are the only accounts in the system; they gate every mutation.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesboard.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from salesboard.models.audit import AuditLog


class Admin(Base, TimestampMixin):
    """Administrator credentials."""

    __tablename__ = "admins"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_active_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    audit_logs: Mapped[List["AuditLog"]] = relationship(
        "AuditLog",
        back_populates="admin",
    )

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, username='{self.username}')>"
