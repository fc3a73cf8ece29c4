# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from cashbook.exceptions import ForbiddenError, StoreError, ValidationError
from cashbook.models.base import now_utc
from cashbook.models.enums import (
    ALLOWED_TRANSITIONS,
    AuditAction,
    Capability,
    RequestCategory,
    RequestStatus,
)
from cashbook.models.profile import Profile
from cashbook.models.request import PettyCashRequest
from cashbook.schemas.request import (
    RequesterInfo,
    RequestListResponse,
    RequestResponse,
    ReviewQueueItem,
    ReviewQueueResponse,
)
from cashbook.services.audit import build_audit_details, write_audit_entry
from cashbook.services.capability import has_capability
from cashbook.services.storage import build_receipt_name

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from cashbook.schemas.auth import AuthContext
    from cashbook.schemas.request import ReceiptUpload, StatusUpdatePayload
    from cashbook.services.storage import BlobStore

logger = logging.getLogger(__name__)

DECISION_STATUSES = (RequestStatus.APPROVED, RequestStatus.REJECTED)
UPDATABLE_STATUSES = (RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.DISBURSED)

# Matches the NUMERIC(14, 2) amount column.
AMOUNT_DECIMAL_PLACES = 2
AMOUNT_INTEGER_DIGITS = 12


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def request_fields(request: PettyCashRequest) -> dict[str, Any]:
    """Column values of a request in response form."""
    return {
        "id": request.id,
        "requester_id": request.requester_id,
        "amount": float(request.amount),
        "purpose": request.purpose,
        "category": request.category,
        "receipt_url": request.receipt_url,
        "status": RequestStatus(request.status),
        "manager_id": request.manager_id,
        "rejection_reason": request.rejection_reason,
        "manager_comment": request.manager_comment,
        "created_at": request.created_at,
        "updated_at": request.updated_at,
    }


def _build_request_response(request: PettyCashRequest) -> RequestResponse:
    """Map a request model to its response schema."""
    return RequestResponse(**request_fields(request))


def _clean(value: str | None) -> str | None:
    """Trim free text, mapping blank input to None."""
    if value is None:
        return None
    return value.strip() or None


def _check_amount_precision(amount: Decimal) -> None:
    """Reject amounts the amount column would round or overflow."""
    if amount.adjusted() >= AMOUNT_INTEGER_DIGITS:
        raise ValidationError(f"amount must have at most {AMOUNT_INTEGER_DIGITS} digits before the decimal point")
    exponent = amount.normalize().as_tuple().exponent
    if isinstance(exponent, int) and exponent < -AMOUNT_DECIMAL_PLACES:
        raise ValidationError(f"amount must have at most {AMOUNT_DECIMAL_PLACES} decimal places")


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> PettyCashRequest:
    """Fetch a request by ID. Raises 404 if not found."""
    result = await session.execute(select(PettyCashRequest).where(col(PettyCashRequest.id) == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise StoreError("Request not found", status_code=404)
    return request


async def _commit(session: AsyncSession, action: str) -> None:
    """Commit the unit of work, surfacing store failures as StoreError."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to %s", action)
        raise StoreError(f"Failed to {action}") from exc


async def _list_review_queue(session: AsyncSession, status: RequestStatus) -> ReviewQueueResponse:
    """Requests in ``status`` joined with requester name and role, newest first."""
    result = await session.execute(
        select(PettyCashRequest, Profile.full_name, Profile.role)
        .outerjoin(Profile, col(Profile.id) == col(PettyCashRequest.requester_id))
        .where(col(PettyCashRequest.status) == status.value)
        .order_by(col(PettyCashRequest.created_at).desc())
    )
    items = [
        ReviewQueueItem(
            **request_fields(request),
            requester=RequesterInfo(full_name=full_name, role=role) if role is not None else None,
        )
        for request, full_name, role in result.all()
    ]
    return ReviewQueueResponse(items=items, total=len(items))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_request(
    session: AsyncSession,
    auth: AuthContext,
    blob_store: BlobStore,
    *,
    amount: Decimal | None,
    purpose: str | None,
    category: str | None,
    receipt: ReceiptUpload | None = None,
) -> RequestResponse:
    """Create a pending petty-cash request for the caller.

    Flow:
    1. Validate required fields, amount sign and precision, and category
    2. Check the caller may submit requests
    3. Upload the receipt, if any (failure aborts with no row written)
    4. Insert the request as pending
    """
    purpose = _clean(purpose)
    if not amount or not purpose or not category:
        raise ValidationError("amount, purpose, and category are required")
    if amount <= 0:
        raise ValidationError("amount must be a positive number")
    _check_amount_precision(amount)
    if category not in {c.value for c in RequestCategory}:
        raise ValidationError(f"category must be one of: {', '.join(RequestCategory)}")

    if not has_capability(auth.role, Capability.SUBMIT_REQUEST):
        raise ForbiddenError("A profile is required to submit requests")

    receipt_url: str | None = None
    if receipt is not None:
        name = build_receipt_name(receipt.filename)
        receipt_url = await blob_store.upload(name, receipt.content, receipt.content_type)

    request = PettyCashRequest(
        requester_id=auth.user_id,
        amount=Decimal(amount),
        purpose=purpose,
        category=category,
        receipt_url=receipt_url,
        status=RequestStatus.PENDING.value,
    )
    session.add(request)
    await _commit(session, "create request")
    await session.refresh(request)

    logger.info("Request %s created by %s for %s FCFA", request.id, auth.user_id, request.amount)
    return _build_request_response(request)


async def update_request_status(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: StatusUpdatePayload,
) -> RequestResponse:
    """Approve, reject or disburse a request.

    Validation and role checks run before any write. Approve/reject then
    append one audit trail entry in a separate commit; a failed audit write
    is logged and does not undo the status change.
    """
    if payload.status not in UPDATABLE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(UPDATABLE_STATUSES)}")
    new_status = RequestStatus(payload.status)
    rejection_reason = _clean(payload.rejection_reason)
    manager_comment = _clean(payload.manager_comment)

    if new_status == RequestStatus.REJECTED and rejection_reason is None:
        raise ValidationError("rejection_reason is required when status is 'rejected'")

    is_decision = new_status in DECISION_STATUSES
    required = Capability.REVIEW_REQUESTS if is_decision else Capability.DISBURSE_REQUESTS
    if not has_capability(auth.role, required):
        raise ForbiddenError(f"Role '{auth.role}' cannot set status '{new_status}'")

    request = await _get_request_or_404(session, request_id)
    current_status = RequestStatus(request.status)
    if new_status not in ALLOWED_TRANSITIONS[current_status]:
        raise ValidationError(f"Cannot change status from '{current_status}' to '{new_status}'")

    request.status = new_status.value
    request.updated_at = now_utc()
    if is_decision:
        request.manager_id = auth.user_id
        if rejection_reason is not None:
            request.rejection_reason = rejection_reason
        if manager_comment is not None:
            request.manager_comment = manager_comment

    await _commit(session, "update request status")
    await session.refresh(request)
    response = _build_request_response(request)
    logger.info("Request %s moved %s -> %s by %s", request_id, current_status, new_status, auth.user_id)

    if is_decision:
        action = AuditAction(new_status.value)
        try:
            await write_audit_entry(
                session,
                request_id=request_id,
                action=action,
                performed_by=auth.user_id,
                details=build_audit_details(action, rejection_reason, manager_comment),
            )
        except Exception:
            await session.rollback()
            logger.exception("Audit trail insert failed for request %s", request_id)

    return response


async def get_my_requests(session: AsyncSession, auth: AuthContext) -> RequestListResponse:
    """List the caller's own requests, newest first."""
    result = await session.execute(
        select(PettyCashRequest)
        .where(col(PettyCashRequest.requester_id) == auth.user_id)
        .order_by(col(PettyCashRequest.created_at).desc())
    )
    requests = list(result.scalars().all())
    return RequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=len(requests),
    )


async def get_pending_requests(session: AsyncSession) -> ReviewQueueResponse:
    """Manager review queue: pending requests with requester name and role."""
    return await _list_review_queue(session, RequestStatus.PENDING)


async def get_approved_requests(session: AsyncSession) -> ReviewQueueResponse:
    """Accountant disbursement queue: approved requests with requester name and role."""
    return await _list_review_queue(session, RequestStatus.APPROVED)
