"""Receipt analysis routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from receiptanalyzer.core.dependencies import ReceiptAnalyzerDep
from receiptanalyzer.core.exceptions import InternalServerError, ReceiptAnalysisError
from receiptanalyzer.models import AnalysisRequest, AnalysisResult, ErrorResponse
from receiptanalyzer.services.validation import validate_analysis_request

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["receipts"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_405_METHOD_NOT_ALLOWED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post(
    "/analyze-receipt",
    response_model=AnalysisResult,
    response_model_exclude_unset=True,
    responses=_ERROR_RESPONSES,
)
async def analyze_receipt(
    request: AnalysisRequest,
    analyzer: ReceiptAnalyzerDep,
) -> AnalysisResult:
    """Categorize the expenses on a receipt image with a vision model.

    The caller's API key is forwarded to the vision API for this request only.

    Args:
        request: API key and receipt image as a ``data:image/...`` URI
        analyzer: Receipt analysis pipeline (injected)

    Returns:
        AnalysisResult with the parsed expense array and token usage
    """
    api_key, image_base64 = validate_analysis_request(request)

    try:
        return await analyzer.analyze(api_key, image_base64)
    except ReceiptAnalysisError:
        raise
    except Exception as e:
        logger.exception("Unexpected error during receipt analysis")
        raise InternalServerError(str(e)) from e
