# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, File, Form, UploadFile, status

from cashbook.api.deps import AuthDep, BlobStoreDep, DisburserDep, ReviewerDep
from cashbook.db import SessionDep
from cashbook.schemas.request import (
    ReceiptUpload,
    RequestListResponse,
    RequestResponse,
    ReviewQueueResponse,
    StatusUpdatePayload,
)
from cashbook.services import request as request_service

requests_router = APIRouter(prefix="/requests", tags=["requests"])


@requests_router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    session: SessionDep,
    auth: AuthDep,
    blob_store: BlobStoreDep,
    amount: Decimal | None = Form(default=None),
    purpose: str | None = Form(default=None),
    category: str | None = Form(default=None),
    receipt: UploadFile | None = File(default=None),
) -> RequestResponse:
    """Submit a new petty-cash request, optionally with a receipt file."""
    upload = None
    if receipt is not None and receipt.filename:
        upload = ReceiptUpload(
            filename=receipt.filename,
            content=await receipt.read(),
            content_type=receipt.content_type,
        )
    return await request_service.create_request(
        session,
        auth,
        blob_store,
        amount=amount,
        purpose=purpose,
        category=category,
        receipt=upload,
    )


@requests_router.get("/mine", response_model=RequestListResponse)
async def get_my_requests(session: SessionDep, auth: AuthDep) -> RequestListResponse:
    """List the caller's own requests, newest first."""
    return await request_service.get_my_requests(session, auth)


@requests_router.get("/pending", response_model=ReviewQueueResponse)
async def get_pending_requests(session: SessionDep, auth: ReviewerDep) -> ReviewQueueResponse:
    """Pending requests awaiting a manager decision."""
    return await request_service.get_pending_requests(session)


@requests_router.get("/approved", response_model=ReviewQueueResponse)
async def get_approved_requests(session: SessionDep, auth: DisburserDep) -> ReviewQueueResponse:
    """Approved requests awaiting disbursement."""
    return await request_service.get_approved_requests(session)


@requests_router.patch("/{request_id}/status", response_model=RequestResponse)
async def update_request_status(
    request_id: uuid.UUID,
    payload: StatusUpdatePayload,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Approve, reject or disburse a request."""
    return await request_service.update_request_status(session, auth, request_id, payload)
