# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from cashbook.models.enums import RequestStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class StatusUpdatePayload(BaseModel):
    """Request body for approving, rejecting or disbursing a request.

    Status values are checked by the lifecycle service so that an unknown
    status surfaces as a ValidationError with the list of accepted values.
    """

    status: str | None = None
    rejection_reason: str | None = Field(default=None, max_length=1000)
    manager_comment: str | None = Field(default=None, max_length=1000)


class ReceiptUpload(BaseModel):
    """Receipt file contents handed to the blob store."""

    filename: str
    content: bytes
    content_type: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single petty-cash request."""

    id: uuid.UUID
    requester_id: uuid.UUID
    amount: float
    purpose: str
    category: str | None
    receipt_url: str | None
    status: RequestStatus
    manager_id: uuid.UUID | None
    rejection_reason: str | None
    manager_comment: str | None
    created_at: datetime
    updated_at: datetime | None


class RequesterInfo(BaseModel):
    """Requester columns joined onto review queues."""

    full_name: str | None
    role: str | None = None


class PersonName(BaseModel):
    """Name-only profile join used by exports."""

    full_name: str | None


class ReviewQueueItem(RequestResponse):
    """A request joined with its requester's profile."""

    requester: RequesterInfo | None


class RequestListResponse(BaseModel):
    """List of petty-cash requests."""

    items: list[RequestResponse]
    total: int


class ReviewQueueResponse(BaseModel):
    """List of requests awaiting a decision or disbursement."""

    items: list[ReviewQueueItem]
    total: int
