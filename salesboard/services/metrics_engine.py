"""
Metrics engine: the only code that changes scoring fields.

Every operation re-reads the participant, mutates a detached copy and
writes it back with one ``store.save`` call, so a failure at any step
leaves the stored record untouched. Concurrent edits of the same
participant are last-write-wins.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from salesboard.exceptions import (
    DealNotFoundError,
    InvalidInputError,
    ParticipantNotFoundError,
)
from salesboard.schemas.participant import (
    DealBulkUpdate,
    DealCreate,
    DealRecord,
    GoalsUpdate,
    HistoryEntry,
    MetricsUpdate,
    ParticipantCreate,
    ParticipantRecord,
    ProfileUpdate,
)
from salesboard.services.scoring import (
    GOAL_FIELDS,
    METRIC_FIELDS,
    deal_contribution,
    describe_changes,
    score_for,
)
from salesboard.store.base import ParticipantStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def generate_deal_id() -> str:
    """Generate a random public deal id."""
    return secrets.token_hex(8)


def _coerce(model: Type[ModelT], value: Union[ModelT, dict, None]) -> ModelT:
    """Accept either a schema instance or a plain dict."""
    if value is None:
        return model()
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidInputError(str(e)) from e


def _unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class MetricsEngine:
    """
    Participant operations exposed to the HTTP layer.

    Profile calls pass straight through to the store. Metric and deal
    calls recompute the score and append one history entry per call.
    """

    def __init__(self, store: ParticipantStore) -> None:
        self.store = store

    # ── Participants ─────────────────────────────────────

    async def create_participant(
        self, data: Union[ParticipantCreate, dict]
    ) -> ParticipantRecord:
        data = _coerce(ParticipantCreate, data)
        record = await self.store.create(data, score=score_for(data))
        logger.info(f"Participant {record.id} created: {record.name}")
        return record

    async def get_participant(self, participant_id: int) -> ParticipantRecord:
        return await self._require(participant_id)

    async def list_participants_by_score(self) -> List[ParticipantRecord]:
        return await self.store.list_by_score()

    async def update_participant_profile(
        self, participant_id: int, data: Union[ProfileUpdate, dict]
    ) -> None:
        data = _coerce(ProfileUpdate, data)
        if not await self.store.update_profile(participant_id, data):
            logger.warning(f"Profile update for unknown participant {participant_id}")
            raise ParticipantNotFoundError(participant_id)
        logger.info(f"Participant {participant_id} profile updated")

    async def delete_participant(self, participant_id: int) -> None:
        """Delete a participant. Unknown ids are ignored."""
        await self.store.delete(participant_id)
        logger.info(f"Participant {participant_id} deleted")

    # ── Metrics ──────────────────────────────────────────

    async def update_metrics(
        self,
        participant_id: int,
        metrics: Union[MetricsUpdate, dict, None] = None,
        goals: Union[GoalsUpdate, dict, None] = None,
    ) -> ParticipantRecord:
        """
        Merge a metric/goal patch and recompute the score.

        Fields that are absent (or null) keep their current value.
        """
        metrics = _coerce(MetricsUpdate, metrics)
        goals = _coerce(GoalsUpdate, goals)

        record = await self._require(participant_id)
        self._apply(
            record,
            metrics.model_dump(exclude_none=True),
            goals.model_dump(exclude_none=True),
        )
        saved = await self.store.save(record)
        logger.info(f"Participant {participant_id} metrics updated, score={saved.score}")
        return saved

    # ── Deals ────────────────────────────────────────────

    async def add_deal(
        self, participant_id: int, data: Union[DealCreate, dict]
    ) -> ParticipantRecord:
        """Append a deal to the ledger and fold it into the metrics."""
        data = _coerce(DealCreate, data)
        record = await self._require(participant_id)

        deal = DealRecord(
            deal_id=generate_deal_id(),
            title=data.title,
            amount=data.amount,
            type=data.type,
            date=data.date or datetime.now(timezone.utc),
        )

        changes = {}
        for field, delta in deal_contribution(deal.type, deal.amount).items():
            changes[field] = getattr(record, field) + delta

        record.deals.append(deal)
        self._apply(
            record,
            changes,
            {},
            reason=f"Deal added: {deal.title} ({deal.type.value} {deal.amount})",
        )
        saved = await self.store.save(record)
        logger.info(
            f"Deal {deal.deal_id} ({deal.type.value} {deal.amount}) added "
            f"to participant {participant_id}, score={saved.score}"
        )
        return saved

    async def remove_deal(self, participant_id: int, deal_id: str) -> ParticipantRecord:
        """Remove one deal and reverse exactly what it added."""
        return await self.remove_many_deals(participant_id, [deal_id])

    async def remove_many_deals(
        self, participant_id: int, deal_ids: Iterable[str]
    ) -> ParticipantRecord:
        """
        Remove several deals in one step.

        Reversals are summed first, so the whole batch produces a single
        history entry. Any unknown id rejects the batch.
        """
        deal_ids = _unique(deal_ids)
        if not deal_ids:
            raise InvalidInputError("deal_ids must not be empty")

        record = await self._require(participant_id)
        removed = self._pick_deals(record, deal_ids)

        changes: dict[str, Any] = {}
        for deal in removed:
            for field, delta in deal_contribution(deal.type, deal.amount).items():
                current = changes.get(field, getattr(record, field))
                changes[field] = current - delta

        # Metrics may have been lowered by hand after the deal was added
        changes = {field: max(value, 0) for field, value in changes.items()}

        dropped = set(deal_ids)
        record.deals = [d for d in record.deals if d.deal_id not in dropped]

        if len(removed) == 1:
            reason = f"Deal removed: {removed[0].title}"
        else:
            reason = f"{len(removed)} deals removed"
        self._apply(record, changes, {}, reason=reason)

        saved = await self.store.save(record)
        logger.info(
            f"Removed {len(removed)} deal(s) from participant {participant_id}, "
            f"score={saved.score}"
        )
        return saved

    async def update_many_deals(
        self,
        participant_id: int,
        deal_ids: Iterable[str],
        data: Union[DealBulkUpdate, dict],
    ) -> ParticipantRecord:
        """Rename deals. Metrics, score and history stay as they are."""
        deal_ids = _unique(deal_ids)
        if not deal_ids:
            raise InvalidInputError("deal_ids must not be empty")
        if isinstance(data, dict):
            data = {**data, "deal_ids": deal_ids}
        data = _coerce(DealBulkUpdate, data)

        record = await self._require(participant_id)
        targets = self._pick_deals(record, deal_ids)
        for deal in targets:
            deal.title = data.title

        saved = await self.store.save(record)
        logger.info(f"Renamed {len(targets)} deal(s) of participant {participant_id}")
        return saved

    # ── Internals ────────────────────────────────────────

    async def _require(self, participant_id: int) -> ParticipantRecord:
        record = await self.store.get(participant_id)
        if record is None:
            logger.warning(f"Participant {participant_id} not found")
            raise ParticipantNotFoundError(participant_id)
        return record

    @staticmethod
    def _pick_deals(record: ParticipantRecord, deal_ids: List[str]) -> List[DealRecord]:
        by_id = {d.deal_id: d for d in record.deals}
        missing = [deal_id for deal_id in deal_ids if deal_id not in by_id]
        if missing:
            raise DealNotFoundError(record.id, missing)
        return [by_id[deal_id] for deal_id in deal_ids]

    @staticmethod
    def _apply(
        record: ParticipantRecord,
        metrics: dict,
        goals: dict,
        reason: Optional[str] = None,
    ) -> None:
        """Merge fields into ``record``, rescore it and append history."""
        before = {field: getattr(record, field) for field in METRIC_FIELDS + GOAL_FIELDS}

        for field, value in metrics.items():
            setattr(record, field, value)
        for field, value in goals.items():
            setattr(record, field, value)

        record.score = score_for(record)

        after = {field: getattr(record, field) for field in METRIC_FIELDS + GOAL_FIELDS}
        description = describe_changes(before, after)
        if reason:
            description = f"{reason}: {description}"

        record.history.append(
            HistoryEntry(
                timestamp=datetime.now(timezone.utc),
                score=record.score,
                description=description,
            )
        )
