"""
Participant record store interface.

The metrics engine only talks to this protocol, so it can run against the
SQL store in production and the in-memory store in tests.
"""

from typing import List, Optional, Protocol

from salesboard.schemas.participant import (
    ParticipantCreate,
    ParticipantRecord,
    ProfileUpdate,
)
from salesboard.services.scoring import GOAL_FIELDS, METRIC_FIELDS

# Fields written by ``save``; profile fields only change via ``update_profile``
SAVED_FIELDS = METRIC_FIELDS + GOAL_FIELDS + ("score", "deals", "history")


class ParticipantStore(Protocol):
    """Keyed storage for participant records.

    Contract:
    - ``get`` returns None for an unknown id, it never raises for that.
    - Returned records are detached copies; mutating one changes nothing
      until it is passed to ``save``.
    - ``save`` writes metrics, goals, score, ledger and history in one
      atomic step and raises ParticipantNotFoundError if the record was
      deleted in the meantime.
    - History is append-only. ``save`` adds the entries whose ``id`` is
      None and never drops entries written by another caller.
    - ``delete`` of an unknown id is a no-op.
    - Any backend failure surfaces as StorageError.
    """

    async def get(self, participant_id: int) -> Optional[ParticipantRecord]:
        ...

    async def list_by_score(self) -> List[ParticipantRecord]:
        """Score descending, ties broken by id ascending."""
        ...

    async def create(self, data: ParticipantCreate, score: int = 0) -> ParticipantRecord:
        ...

    async def update_profile(self, participant_id: int, data: ProfileUpdate) -> bool:
        """Apply profile fields only. Returns False if the id is unknown."""
        ...

    async def save(self, record: ParticipantRecord) -> ParticipantRecord:
        ...

    async def delete(self, participant_id: int) -> None:
        ...
