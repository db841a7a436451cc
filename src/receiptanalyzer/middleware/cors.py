"""CORS middleware applied to every response."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from receiptanalyzer.core.exceptions import InternalServerError

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Attach permissive CORS headers to every response.

    Preflight ``OPTIONS`` requests are answered here with an empty 200.
    Exceptions that escape the application are turned into a 500 JSON body
    so that they also carry the headers.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str = "*",
        allow_methods: str = "POST, OPTIONS",
        allow_headers: str = "Content-Type",
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap
            allow_origin: Access-Control-Allow-Origin value
            allow_methods: Access-Control-Allow-Methods value
            allow_headers: Access-Control-Allow-Headers value
        """
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": allow_methods,
            "Access-Control-Allow-Headers": allow_headers,
        }

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Answer preflight requests and decorate all other responses."""
        if request.method == "OPTIONS":
            response = Response(status_code=status.HTTP_200_OK)
        else:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception("Unhandled error processing %s", request.url.path)
                error = InternalServerError(str(e))
                response = JSONResponse(
                    status_code=error.status_code, content=error.to_content()
                )

        response.headers.update(self.cors_headers)
        return response
