"""SQLAlchemy-backed participant store."""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from salesboard.exceptions import ParticipantNotFoundError, StorageError
from salesboard.models import Participant, ParticipantDeal, ScoreHistory
from salesboard.schemas.participant import (
    ParticipantCreate,
    ParticipantRecord,
    ProfileUpdate,
)
from salesboard.services.scoring import GOAL_FIELDS, METRIC_FIELDS

logger = logging.getLogger(__name__)


class SqlParticipantStore:
    """Participant store on top of an async SQLAlchemy session.

    Every write commits on its own, so one ``save`` is one transaction.
    Failures are rolled back and re-raised as StorageError.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _query(self):
        return select(Participant).options(
            selectinload(Participant.deals),
            selectinload(Participant.history),
        )

    async def _load(self, participant_id: int) -> Optional[Participant]:
        result = await self.db.execute(
            self._query()
            .where(Participant.id == participant_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Participant store write failed: {e}")
            raise StorageError(str(e)) from e

    async def get(self, participant_id: int) -> Optional[ParticipantRecord]:
        try:
            row = await self._load(participant_id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if row is None:
            return None
        return ParticipantRecord.model_validate(row)

    async def list_by_score(self) -> List[ParticipantRecord]:
        try:
            result = await self.db.execute(
                self._query()
                .order_by(Participant.score.desc(), Participant.id.asc())
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return [ParticipantRecord.model_validate(row) for row in result.scalars().all()]

    async def create(self, data: ParticipantCreate, score: int = 0) -> ParticipantRecord:
        row = Participant(score=score, **data.model_dump())
        self.db.add(row)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(str(e)) from e
        participant_id = row.id
        await self._commit()

        logger.debug(f"Created participant {participant_id}")
        return await self.get(participant_id)

    async def update_profile(self, participant_id: int, data: ProfileUpdate) -> bool:
        try:
            row = await self.db.get(Participant, participant_id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if row is None:
            return False

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(row, field, value)

        await self._commit()
        return True

    async def save(self, record: ParticipantRecord) -> ParticipantRecord:
        try:
            row = await self._load(record.id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if row is None:
            raise ParticipantNotFoundError(record.id)

        for field in METRIC_FIELDS + GOAL_FIELDS:
            setattr(row, field, getattr(record, field))
        row.score = record.score

        # Ledger: drop removed deals, rename kept ones, append new ones in order
        wanted = {d.deal_id: d for d in record.deals}
        for deal_row in list(row.deals):
            deal = wanted.get(deal_row.deal_id)
            if deal is None:
                row.deals.remove(deal_row)
            elif deal_row.title != deal.title:
                deal_row.title = deal.title

        existing = {d.deal_id for d in row.deals}
        for deal in record.deals:
            if deal.deal_id not in existing:
                row.deals.append(
                    ParticipantDeal(
                        deal_id=deal.deal_id,
                        title=deal.title,
                        amount=deal.amount,
                        type=deal.type,
                        date=deal.date,
                    )
                )

        # History is append-only; entries without an id are the ones this write added
        for entry in record.history:
            if entry.id is not None:
                continue
            row.history.append(
                ScoreHistory(
                    timestamp=entry.timestamp,
                    score=entry.score,
                    description=entry.description,
                )
            )

        await self._commit()

        saved = await self.get(record.id)
        if saved is None:
            raise ParticipantNotFoundError(record.id)
        return saved

    async def delete(self, participant_id: int) -> None:
        # Child rows go first so the delete also works without ON DELETE CASCADE
        try:
            await self.db.execute(
                delete(ParticipantDeal).where(ParticipantDeal.participant_id == participant_id)
            )
            await self.db.execute(
                delete(ScoreHistory).where(ScoreHistory.participant_id == participant_id)
            )
            await self.db.execute(
                delete(Participant).where(Participant.id == participant_id)
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(str(e)) from e
        await self._commit()
