"""Dependency injection for FastAPI."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from receiptanalyzer.core.config import Settings, get_settings
from receiptanalyzer.services.analyzer import ReceiptAnalyzer
from receiptanalyzer.services.vision import VisionClient


def get_vision_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> VisionClient:
    """Get a vision API client."""
    return VisionClient(
        base_url=settings.openai_base_url,
        timeout=settings.upstream_timeout,
    )


def get_receipt_analyzer(
    settings: Annotated[Settings, Depends(get_settings)],
    vision_client: Annotated[VisionClient, Depends(get_vision_client)],
) -> ReceiptAnalyzer:
    """Get receipt analyzer instance."""
    return ReceiptAnalyzer(
        vision_client=vision_client,
        model=settings.vision_model,
        strict_categories=settings.strict_categories,
    )


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
ReceiptAnalyzerDep = Annotated[ReceiptAnalyzer, Depends(get_receipt_analyzer)]
