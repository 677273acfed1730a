"""Utility functions."""

from salesboard.utils.audit import audit_participant, get_client_ip, log_action
from salesboard.utils.password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "log_action",
    "get_client_ip",
    "audit_participant",
]
