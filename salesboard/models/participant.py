"""
Participant, deal ledger and score history models.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesboard.models.base import Base, TimestampMixin


class DealType(str, Enum):
    """Which metric a deal feeds."""
    BOARD = "BOARD"    # board revenue, 1 point per unit
    MSP = "MSP"        # managed-services revenue, 2 points per unit
    VOICE = "VOICE"    # voice seats, whole seats only


class Participant(Base, TimestampMixin):
    """
    A salesperson tracked on the leaderboard.

    Metric columns feed the score; goal columns only drive progress
    display. ``score`` is always derived by the metrics engine and is
    stored so the leaderboard can be ordered in SQL.
    """

    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Profile
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    role: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    department: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Metrics
    board_revenue: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    msp_revenue: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    voice_seats: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    total_deals: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)

    # Goals
    board_revenue_goal: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    msp_revenue_goal: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    voice_seats_goal: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    total_deals_goal: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)

    score: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        server_default="0",
        nullable=False,
        index=True,
        comment="Derived from metrics, never written by callers",
    )

    # Relationships
    deals: Mapped[List["ParticipantDeal"]] = relationship(
        "ParticipantDeal",
        back_populates="participant",
        cascade="all, delete-orphan",
        order_by="ParticipantDeal.id",
    )
    history: Mapped[List["ScoreHistory"]] = relationship(
        "ScoreHistory",
        back_populates="participant",
        cascade="all, delete-orphan",
        order_by="ScoreHistory.id",
    )

    def __repr__(self) -> str:
        return f"<Participant(id={self.id}, name='{self.name}', score={self.score})>"


class ParticipantDeal(Base):
    """
    A closed deal in a participant's ledger.

    Rows are ordered by ``id`` which preserves insertion order.
    ``deal_id`` is the public token exposed through the API.
    """

    __tablename__ = "participant_deals"

    id: Mapped[int] = mapped_column(primary_key=True)
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    deal_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    type: Mapped[DealType] = mapped_column(
        SQLAlchemyEnum(
            DealType,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    participant: Mapped["Participant"] = relationship(
        "Participant",
        back_populates="deals",
    )

    def __repr__(self) -> str:
        return f"<ParticipantDeal(deal_id='{self.deal_id}', type={self.type}, amount={self.amount})>"


class ScoreHistory(Base):
    """Append-only score snapshot written on every metric change."""

    __tablename__ = "score_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    score: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    participant: Mapped["Participant"] = relationship(
        "Participant",
        back_populates="history",
    )

    def __repr__(self) -> str:
        return f"<ScoreHistory(participant_id={self.participant_id}, score={self.score})>"
