from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI, Request, Response

    from cashbook.config import Settings

logger = logging.getLogger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers[PROCESS_TIME_HEADER] = f"{elapsed_ms:.1f}"
    logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware.

    Request logging is registered first so that CORS wraps it and preflight
    requests are answered before they reach the handlers.
    """
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=settings.cors_allow_headers,
        expose_headers=[PROCESS_TIME_HEADER],
        max_age=settings.cors_max_age,
    )
