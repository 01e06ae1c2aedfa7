"""Maps the error taxonomy onto JSON responses.

Every error body has the shape ``{"error": <message>, "code": <code>,
"details": {...}}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from learnfeed.core.errors import LearnfeedError, OutOfRange
from learnfeed.core.logging import get_logger

logger = get_logger(__name__)


def error_body(message: str, code: str, details: dict | None = None) -> dict:
    return {"error": message, "code": code, "details": details or {}}


async def learnfeed_error_handler(request: Request, exc: LearnfeedError) -> JSONResponse:
    if isinstance(exc, OutOfRange) or exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.error_code, exc.details)),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            error_body(
                "Invalid request",
                "validation_error",
                {"errors": exc.errors()},
            )
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LearnfeedError, learnfeed_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
