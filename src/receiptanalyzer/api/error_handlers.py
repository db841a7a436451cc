"""Exception handlers rendering every failure as a JSON error body."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from receiptanalyzer.core.exceptions import MissingFieldsError, ReceiptAnalysisError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

_HTTP_ERROR_MESSAGES = {405: "Method not allowed"}


async def receipt_analysis_error_handler(
    request: Request, exc: ReceiptAnalysisError
) -> JSONResponse:
    """Render a receipt analysis failure."""
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.error("Receipt analysis failed on %s: %s", request.url.path, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render routing and HTTP errors (404, 405, ...) as ``{"error": ...}``."""
    message = _HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report a body that is not a JSON object of strings as missing fields."""
    logger.info("Rejected malformed request body on %s", request.url.path)
    error = MissingFieldsError()
    return JSONResponse(status_code=error.status_code, content=error.to_content())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON exception handlers on the application."""
    app.add_exception_handler(ReceiptAnalysisError, receipt_analysis_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
