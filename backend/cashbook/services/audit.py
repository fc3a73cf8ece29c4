from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cashbook.models.audit import AuditTrailEntry
from cashbook.models.enums import AuditAction

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


def build_audit_details(
    action: AuditAction,
    rejection_reason: str | None,
    manager_comment: str | None,
) -> dict[str, Any]:
    """Detail payload for a decision: reason and comment for rejections, comment only otherwise."""
    if action == AuditAction.REJECTED:
        return {"rejection_reason": rejection_reason, "manager_comment": manager_comment}
    return {"manager_comment": manager_comment}


async def write_audit_entry(
    session: AsyncSession,
    *,
    request_id: uuid.UUID,
    action: AuditAction,
    performed_by: uuid.UUID,
    details: dict[str, Any] | None = None,
) -> AuditTrailEntry:
    """Append an audit trail entry in its own commit."""
    entry = AuditTrailEntry(
        request_id=request_id,
        action=action.value,
        performed_by=performed_by,
        details=details,
    )
    session.add(entry)
    await session.commit()
    return entry
