"""
Domain exception to HTTP response mapping.

Every DocQAException raised by a service becomes a JSON ErrorResponse
with a status code chosen by exception type.

Dependencies: fastapi, docqa.core.exceptions
System role: Uniform error responses for the HTTP API
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docqa.core.exceptions import (
    ConstraintViolation,
    DocQAException,
    IngestionConflictError,
    IngestionTimeoutError,
    InvalidStatusTransition,
    NotFoundError,
    RetrievalError,
    UpstreamUnavailable,
    ValidationError,
)
from docqa.models.common import ErrorResponse
from docqa.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
STATUS_CODES: list[tuple[type[DocQAException], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (IngestionConflictError, status.HTTP_409_CONFLICT),
    (InvalidStatusTransition, status.HTTP_409_CONFLICT),
    (ConstraintViolation, status.HTTP_409_CONFLICT),
    (IngestionTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (UpstreamUnavailable, status.HTTP_502_BAD_GATEWAY),
    (RetrievalError, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(exc: DocQAException) -> int:
    """HTTP status for a domain exception; 500 when no mapping applies."""
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def docqa_exception_handler(request: Request, exc: DocQAException) -> JSONResponse:
    code = status_code_for(exc)
    log_with_context(
        logger,
        logging.ERROR if code >= 500 else logging.WARNING,
        f"{__name__}:docqa_exception_handler - {type(exc).__name__}: {exc.message}",
        path=request.url.path,
        status_code=code,
        **(exc.details or {}),
    )
    body = ErrorResponse(error=exc.message, details=exc.details or None)
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain exception handler to the app."""
    app.add_exception_handler(DocQAException, docqa_exception_handler)
