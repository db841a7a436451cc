"""Error taxonomy for receipt analysis.

Every failure the service can report is a ``ReceiptAnalysisError`` subclass.
Each one knows its HTTP status and renders the JSON body returned to the
caller, so the FastAPI exception handler stays a one-liner.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class ReceiptAnalysisError(Exception):
    """Base exception for receipt analysis failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        """Initialize with an optional override of the default message."""
        self.error = message or self.message
        super().__init__(self.error)

    def extra_fields(self) -> dict[str, Any]:
        """Additional response fields for this failure kind."""
        return {}

    def to_content(self) -> dict[str, Any]:
        """Render the JSON response body."""
        return {"error": self.error, **self.extra_fields()}


class MissingFieldsError(ReceiptAnalysisError):
    """API key or image data absent from the request."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "API key or image data is missing"


class InvalidImageFormatError(ReceiptAnalysisError):
    """Image is not a ``data:image/`` URI."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid image format"


class UnsupportedImageFormatError(ReceiptAnalysisError):
    """Image data URI uses a subtype outside the allow-list."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Unsupported image format"


class UpstreamError(ReceiptAnalysisError):
    """The vision API answered with a non-success status."""

    def __init__(self, status_code: int, details: str) -> None:
        """Keep the upstream status and its raw error body."""
        self.status_code = status_code
        self.details = details
        super().__init__(f"OpenAI API Error: {status_code}")

    def extra_fields(self) -> dict[str, Any]:
        """Include the raw upstream body."""
        return {"details": self.details}


class UnexpectedUpstreamShapeError(ReceiptAnalysisError):
    """Successful upstream reply without ``choices[0].message``."""

    message = "Unexpected API response format"


class ExtractionError(ReceiptAnalysisError):
    """No array-shaped span in the model reply."""

    message = "JSON data not found"

    def __init__(self, raw_content: str) -> None:
        """Keep the full reply text for diagnosis."""
        self.raw_content = raw_content
        super().__init__()

    def extra_fields(self) -> dict[str, Any]:
        """Include the raw model text."""
        return {"rawContent": self.raw_content}


class JSONParseError(ReceiptAnalysisError):
    """Array-shaped span found but it is not valid JSON."""

    message = "JSON parse error"

    def __init__(self, raw_content: str, parse_error: str) -> None:
        """Keep the reply text and the decoder message."""
        self.raw_content = raw_content
        self.parse_error = parse_error
        super().__init__()

    def extra_fields(self) -> dict[str, Any]:
        """Include the raw model text and the decoder message."""
        return {"rawContent": self.raw_content, "parseError": self.parse_error}


class InternalServerError(ReceiptAnalysisError):
    """Any unexpected failure inside the handler."""

    def __init__(self, details: str) -> None:
        """Keep the original exception message."""
        self.details = details
        super().__init__()

    def extra_fields(self) -> dict[str, Any]:
        """Include the exception message."""
        return {"details": self.details}
