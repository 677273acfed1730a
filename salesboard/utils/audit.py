"""
Audit trail for admin actions.

Scores are edited by hand, so each mutation is stored with the acting
admin, the affected entity and the client IP. Entries are only added to
the session; the request session (get_db) commits them together with
the rest of the request.
"""

from typing import Any, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.models.audit import AuditAction, AuditLog


def get_client_ip(request: Request) -> Optional[str]:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


async def log_action(
    db: AsyncSession,
    admin_id: int,
    action: AuditAction,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    action_metadata: Optional[dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> AuditLog:
    """
    Add an audit entry to the session.

    Args:
        db: Database session
        admin_id: Acting admin
        action: What was done
        target_type: Kind of entity affected ("participant", "avatar")
        target_id: Id of the affected entity, if it has one
        action_metadata: JSON-serializable details
        ip_address: Client address

    Returns:
        The pending AuditLog row
    """
    entry = AuditLog(
        admin_id=admin_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        action_metadata=action_metadata,
        ip_address=ip_address,
    )
    db.add(entry)
    return entry


async def audit_participant(
    db: AsyncSession,
    request: Request,
    admin_id: int,
    action: AuditAction,
    participant_id: int,
    **details: Any,
) -> AuditLog:
    """Shorthand for actions on a single participant."""
    return await log_action(
        db=db,
        admin_id=admin_id,
        action=action,
        target_type="participant",
        target_id=participant_id,
        action_metadata=details or None,
        ip_address=get_client_ip(request),
    )
