# ==============================================================================
# ERROR HANDLING MIDDLEWARE
# ==============================================================================
# Translates unhandled exceptions into JSON error responses and traces every
# request with an id and its duration
# ==============================================================================

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response, status
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from improved_api.core.exceptions import AppException, IntegrityViolationError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch every exception escaping the routes.

    - AppException: its own status code, body and headers
    - IntegrityError: 409 Conflict
    - anything else: 500, details only in debug mode

    Every response, error or not, carries ``X-Request-ID`` and
    ``X-Response-Time``; the request id also prefixes the log lines.
    """

    def __init__(self, app: ASGIApp, debug: bool = False) -> None:
        super().__init__(app)
        self.debug = debug

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = self.handle_exception(request, exc)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            logging.INFO if response.status_code < 400 else logging.WARNING,
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.2f}ms)",
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"
        return response

    def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        if isinstance(exc, IntegrityError):
            logger.warning(
                f"{request.method} {request.url.path} - integrity error: {exc.orig}"
            )
            exc = IntegrityViolationError(
                details={"reason": str(exc.orig)} if self.debug else None
            )

        if isinstance(exc, AppException):
            if exc.status_code >= 500:
                logger.error(f"{request.method} {request.url.path} - {exc!r}")
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_dict(),
                headers=exc.headers or None,
            )

        logger.exception(f"Unexpected error: {exc}")
        detail = str(exc) if self.debug else "An unexpected error occurred"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": detail,
                }
            },
        )
