"""
Participant, deal and metric schemas.

``ParticipantRecord`` is the shape exchanged between the record store and
the metrics engine. The request models use ``extra="forbid"`` so that a
caller can never smuggle ``score`` or ``deal_id`` into an update.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from salesboard.models.participant import DealType
from salesboard.services.scoring import MAX_METRIC_VALUE, goal_progress


# ── Requests ─────────────────────────────────────────────


class ParticipantCreate(BaseModel):
    """Create a participant. Metrics and goals default to zero."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)

    board_revenue: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    msp_revenue: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    voice_seats: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    total_deals: int = Field(0, ge=0, le=MAX_METRIC_VALUE)

    board_revenue_goal: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    msp_revenue_goal: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    voice_seats_goal: int = Field(0, ge=0, le=MAX_METRIC_VALUE)
    total_deals_goal: int = Field(0, ge=0, le=MAX_METRIC_VALUE)


class ProfileUpdate(BaseModel):
    """Partial profile update. Only fields that are sent are applied."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be cleared")
        return v


class MetricsUpdate(BaseModel):
    """Metric patch. Missing or null fields keep their current value."""

    model_config = ConfigDict(extra="forbid")

    board_revenue: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    msp_revenue: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    voice_seats: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    total_deals: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)


class GoalsUpdate(BaseModel):
    """Goal patch. Goals never affect the score."""

    model_config = ConfigDict(extra="forbid")

    board_revenue_goal: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    msp_revenue_goal: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    voice_seats_goal: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)
    total_deals_goal: Optional[int] = Field(None, ge=0, le=MAX_METRIC_VALUE)


class MetricsPatchRequest(BaseModel):
    """Body of PATCH /participants/{id}/metrics."""

    model_config = ConfigDict(extra="forbid")

    metrics: MetricsUpdate = Field(default_factory=MetricsUpdate)
    goals: GoalsUpdate = Field(default_factory=GoalsUpdate)


class DealCreate(BaseModel):
    """A new deal. The deal id is always generated server-side."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    type: DealType
    date: Optional[datetime] = None


class DealBulkRemove(BaseModel):
    """Remove several deals with a single history entry."""

    deal_ids: List[str] = Field(..., min_length=1)


class DealBulkUpdate(BaseModel):
    """Rename several deals. Metrics are untouched."""

    deal_ids: List[str] = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)


# ── Records ──────────────────────────────────────────────


class DealRecord(BaseModel):
    """A deal in a participant's ledger."""

    deal_id: str
    title: str
    amount: Decimal
    type: DealType
    date: datetime

    model_config = {"from_attributes": True}


class HistoryEntry(BaseModel):
    """One score snapshot. ``id`` stays None until the store has written it."""

    id: Optional[int] = None
    timestamp: datetime
    score: int
    description: str

    model_config = {"from_attributes": True}


class ParticipantRecord(BaseModel):
    """Full participant state as held by the record store."""

    id: int
    name: str
    role: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None

    # Metrics
    board_revenue: int = 0
    msp_revenue: int = 0
    voice_seats: int = 0
    total_deals: int = 0

    # Goals
    board_revenue_goal: int = 0
    msp_revenue_goal: int = 0
    voice_seats_goal: int = 0
    total_deals_goal: int = 0

    score: int = 0
    deals: List[DealRecord] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    def find_deal(self, deal_id: str) -> Optional[DealRecord]:
        return next((d for d in self.deals if d.deal_id == deal_id), None)


# ── Responses ────────────────────────────────────────────


class GoalProgress(BaseModel):
    """Percent of each goal reached, clamped to 0..100."""

    board_revenue: float
    msp_revenue: float
    voice_seats: float
    total_deals: float

    @classmethod
    def for_participant(cls, participant) -> "GoalProgress":
        return cls(
            board_revenue=goal_progress(participant.board_revenue, participant.board_revenue_goal),
            msp_revenue=goal_progress(participant.msp_revenue, participant.msp_revenue_goal),
            voice_seats=goal_progress(participant.voice_seats, participant.voice_seats_goal),
            total_deals=goal_progress(participant.total_deals, participant.total_deals_goal),
        )


class ParticipantResponse(ParticipantRecord):
    """Participant with goal progress for the admin views."""

    @computed_field
    @property
    def progress(self) -> GoalProgress:
        return GoalProgress.for_participant(self)


class LeaderboardEntry(BaseModel):
    """Public leaderboard row. No ledger or history."""

    rank: int
    id: int
    name: str
    role: Optional[str]
    department: Optional[str]
    avatar_url: Optional[str]
    score: int

    board_revenue: int
    msp_revenue: int
    voice_seats: int
    total_deals: int

    progress: GoalProgress

    @classmethod
    def from_record(cls, rank: int, record: ParticipantRecord) -> "LeaderboardEntry":
        return cls(
            rank=rank,
            id=record.id,
            name=record.name,
            role=record.role,
            department=record.department,
            avatar_url=record.avatar_url,
            score=record.score,
            board_revenue=record.board_revenue,
            msp_revenue=record.msp_revenue,
            voice_seats=record.voice_seats,
            total_deals=record.total_deals,
            progress=GoalProgress.for_participant(record),
        )


class UploadResponse(BaseModel):
    """Stored avatar location."""

    url: str
