"""Participant record store implementations."""

from salesboard.store.base import ParticipantStore
from salesboard.store.memory import InMemoryParticipantStore
from salesboard.store.sql import SqlParticipantStore

__all__ = [
    "ParticipantStore",
    "InMemoryParticipantStore",
    "SqlParticipantStore",
]
