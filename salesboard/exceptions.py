"""
Domain errors raised by the record store and the metrics engine.

The HTTP layer maps them to status codes:
- ParticipantNotFoundError, DealNotFoundError -> 404
- InvalidInputError -> 400
- StorageError -> 503
"""

from typing import Iterable


class SalesboardError(Exception):
    """Base class for all domain errors."""


class ParticipantNotFoundError(SalesboardError):
    """The referenced participant id does not exist."""

    def __init__(self, participant_id: int):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found")


class DealNotFoundError(SalesboardError):
    """One or more deal ids are not in the participant's ledger."""

    def __init__(self, participant_id: int, deal_ids: Iterable[str]):
        self.participant_id = participant_id
        self.deal_ids = list(deal_ids)
        super().__init__(
            f"Deal(s) {', '.join(self.deal_ids)} not found for participant {participant_id}"
        )


class InvalidInputError(SalesboardError):
    """Malformed input rejected before any state change."""


class StorageError(SalesboardError):
    """The underlying store failed to read or write. Never retried."""
