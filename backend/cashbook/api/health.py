import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from cashbook.config import get_settings
from cashbook.db import SessionDep, ping
from cashbook.services.storage import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    database: Literal["ok", "unreachable"]
    receipt_storage: Literal["local", "memory"]


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report service version and record store connectivity."""
    settings = get_settings()
    database: Literal["ok", "unreachable"] = "ok"

    try:
        await ping(session)
    except Exception:
        logger.exception("Health check: database connectivity failed")
        database = "unreachable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database=database,
        receipt_storage="local" if isinstance(get_blob_store(), LocalBlobStore) else "memory",
    )
