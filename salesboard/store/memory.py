"""In-process participant store."""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from salesboard.exceptions import ParticipantNotFoundError
from salesboard.schemas.participant import (
    ParticipantCreate,
    ParticipantRecord,
    ProfileUpdate,
)
from salesboard.store.base import SAVED_FIELDS

logger = logging.getLogger(__name__)


class InMemoryParticipantStore:
    """Dictionary backed store. Nothing survives a restart.

    Ids are handed out sequentially starting at 1 and never reused.
    """

    def __init__(self) -> None:
        self._records: Dict[int, ParticipantRecord] = {}
        self._next_id = 1
        self._next_history_id = 1

    async def get(self, participant_id: int) -> Optional[ParticipantRecord]:
        record = self._records.get(participant_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    async def list_by_score(self) -> List[ParticipantRecord]:
        records = sorted(self._records.values(), key=lambda r: (-r.score, r.id))
        return [r.model_copy(deep=True) for r in records]

    async def create(self, data: ParticipantCreate, score: int = 0) -> ParticipantRecord:
        participant_id = self._next_id
        self._next_id += 1

        record = ParticipantRecord(
            id=participant_id,
            score=score,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        self._records[participant_id] = record
        logger.debug(f"Created participant {participant_id} in memory")
        return record.model_copy(deep=True)

    async def update_profile(self, participant_id: int, data: ProfileUpdate) -> bool:
        record = self._records.get(participant_id)
        if record is None:
            return False
        self._records[participant_id] = record.model_copy(
            update=data.model_dump(exclude_unset=True),
            deep=True,
        )
        return True

    async def save(self, record: ParticipantRecord) -> ParticipantRecord:
        current = self._records.get(record.id)
        if current is None:
            raise ParticipantNotFoundError(record.id)
        # model_copy does not copy ``update`` values, so detach them first
        source = record.model_copy(deep=True)
        update = {field: getattr(source, field) for field in SAVED_FIELDS}

        # History is append-only; entries without an id are the ones this write added
        history = list(current.history)
        for entry in source.history:
            if entry.id is None:
                entry.id = self._next_history_id
                self._next_history_id += 1
                history.append(entry)
        update["history"] = history

        stored = current.model_copy(update=update, deep=True)
        self._records[record.id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, participant_id: int) -> None:
        self._records.pop(participant_id, None)
