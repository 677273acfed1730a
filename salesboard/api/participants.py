"""Admin participant and deal endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.api.deps import get_metrics_engine, to_http_exception
from salesboard.auth.dependencies import require_admin
from salesboard.db import get_db
from salesboard.exceptions import SalesboardError
from salesboard.models import Admin, AuditAction
from salesboard.schemas.participant import (
    DealBulkRemove,
    DealBulkUpdate,
    DealCreate,
    MetricsPatchRequest,
    ParticipantCreate,
    ParticipantRecord,
    ParticipantResponse,
    ProfileUpdate,
)
from salesboard.services.metrics_engine import MetricsEngine
from salesboard.utils.audit import audit_participant

router = APIRouter(prefix="/participants", tags=["Participants"])


def _response(record: ParticipantRecord) -> ParticipantResponse:
    return ParticipantResponse(**record.model_dump())


@router.get("")
async def list_participants(
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """All participants, highest score first."""
    try:
        participants = await engine.list_participants_by_score()
    except SalesboardError as e:
        raise to_http_exception(e) from e

    return {"items": [_response(p) for p in participants]}


@router.post("", response_model=ParticipantResponse, status_code=status.HTTP_201_CREATED)
async def create_participant(
    request: Request,
    data: ParticipantCreate,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Create a participant. Score is derived from the initial metrics."""
    try:
        participant = await engine.create_participant(data)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.CREATE_PARTICIPANT, participant.id,
        name=participant.name,
    )
    return _response(participant)


@router.get("/{participant_id}", response_model=ParticipantResponse)
async def get_participant(
    participant_id: int,
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Participant details with ledger and score history."""
    try:
        participant = await engine.get_participant(participant_id)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    return _response(participant)


@router.patch("/{participant_id}/profile", response_model=ParticipantResponse)
async def update_profile(
    request: Request,
    participant_id: int,
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Update name, role, department or avatar. Never touches the score."""
    try:
        await engine.update_participant_profile(participant_id, data)
        participant = await engine.get_participant(participant_id)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.UPDATE_PROFILE, participant_id,
        **data.model_dump(exclude_unset=True),
    )
    return _response(participant)


@router.patch("/{participant_id}/metrics", response_model=ParticipantResponse)
async def update_metrics(
    request: Request,
    participant_id: int,
    data: MetricsPatchRequest,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Patch metrics and/or goals; omitted fields keep their value."""
    try:
        participant = await engine.update_metrics(participant_id, data.metrics, data.goals)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.UPDATE_METRICS, participant_id,
        **data.metrics.model_dump(exclude_none=True),
        **data.goals.model_dump(exclude_none=True),
        score=participant.score,
    )
    return _response(participant)


@router.delete("/{participant_id}")
async def delete_participant(
    request: Request,
    participant_id: int,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Delete a participant with its ledger and history. Idempotent."""
    try:
        await engine.delete_participant(participant_id)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.DELETE_PARTICIPANT, participant_id
    )
    return {"success": True}


# ── Deals ────────────────────────────────────────────────


@router.post(
    "/{participant_id}/deals",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_deal(
    request: Request,
    participant_id: int,
    data: DealCreate,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Record a closed deal and fold it into the metrics."""
    try:
        participant = await engine.add_deal(participant_id, data)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    deal = participant.deals[-1]
    await audit_participant(
        db, request, current_admin.id, AuditAction.ADD_DEAL, participant_id,
        deal_id=deal.deal_id,
        type=deal.type.value,
        amount=str(deal.amount),
    )
    return _response(participant)


@router.post("/{participant_id}/deals/bulk-delete", response_model=ParticipantResponse)
async def remove_many_deals(
    request: Request,
    participant_id: int,
    data: DealBulkRemove,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Remove several deals with a single score history entry."""
    try:
        participant = await engine.remove_many_deals(participant_id, data.deal_ids)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.REMOVE_DEALS, participant_id,
        deal_ids=data.deal_ids,
    )
    return _response(participant)


@router.patch("/{participant_id}/deals", response_model=ParticipantResponse)
async def update_many_deals(
    request: Request,
    participant_id: int,
    data: DealBulkUpdate,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Rename deals. Metrics and score are unchanged."""
    try:
        participant = await engine.update_many_deals(participant_id, data.deal_ids, data)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.UPDATE_DEALS, participant_id,
        deal_ids=data.deal_ids,
        title=data.title,
    )
    return _response(participant)


@router.delete("/{participant_id}/deals/{deal_id}", response_model=ParticipantResponse)
async def remove_deal(
    request: Request,
    participant_id: int,
    deal_id: str,
    db: AsyncSession = Depends(get_db),
    engine: MetricsEngine = Depends(get_metrics_engine),
    current_admin: Admin = Depends(require_admin),
):
    """Remove one deal and reverse its effect on the metrics."""
    try:
        participant = await engine.remove_deal(participant_id, deal_id)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await audit_participant(
        db, request, current_admin.id, AuditAction.REMOVE_DEAL, participant_id,
        deal_id=deal_id,
    )
    return _response(participant)
