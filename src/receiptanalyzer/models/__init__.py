"""Receipt analyzer models package."""

from .expense import (
    AnalysisRequest,
    AnalysisResult,
    ErrorResponse,
    ExpenseCategory,
    ExpenseItem,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "ErrorResponse",
    "ExpenseCategory",
    "ExpenseItem",
]
