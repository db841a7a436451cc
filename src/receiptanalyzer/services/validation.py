"""Request validation for receipt analysis."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from receiptanalyzer.core.exceptions import (
    InvalidImageFormatError,
    MissingFieldsError,
    UnsupportedImageFormatError,
)

if TYPE_CHECKING:
    from receiptanalyzer.models import AnalysisRequest

logger = logging.getLogger(__name__)

DATA_URI_IMAGE_PREFIX = "data:image/"
SUPPORTED_IMAGE_TYPES = ("png", "jpeg", "jpg", "gif", "webp")
SUPPORTED_IMAGE_PREFIXES = tuple(
    f"{DATA_URI_IMAGE_PREFIX}{image_type}" for image_type in SUPPORTED_IMAGE_TYPES
)


def validate_image_data_uri(image_base64: str) -> None:
    """Check that the image is a data URI with an allow-listed subtype.

    Only the prefix is inspected; the encoded bytes are passed through.

    Raises:
        InvalidImageFormatError: If the value is not a ``data:image/`` URI
        UnsupportedImageFormatError: If the image subtype is not supported
    """
    if not image_base64.startswith(DATA_URI_IMAGE_PREFIX):
        raise InvalidImageFormatError

    if not image_base64.startswith(SUPPORTED_IMAGE_PREFIXES):
        logger.info("Rejected image with prefix %r", image_base64[:24])
        supported = ", ".join(SUPPORTED_IMAGE_TYPES)
        msg = f"Unsupported image format. Please use one of: {supported}"
        raise UnsupportedImageFormatError(msg)


def validate_analysis_request(request: AnalysisRequest) -> tuple[str, str]:
    """Validate an analysis request and return ``(api_key, image_base64)``.

    Raises:
        MissingFieldsError: If the API key or image data is empty or absent
        InvalidImageFormatError: If the image is not a data URI
        UnsupportedImageFormatError: If the image subtype is not supported
    """
    if not request.api_key or not request.image_base64:
        raise MissingFieldsError

    validate_image_data_uri(request.image_base64)
    return request.api_key, request.image_base64
