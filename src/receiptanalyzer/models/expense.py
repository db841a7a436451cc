"""Models for receipt analysis requests and results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExpenseCategory(str, Enum):
    """Fixed expense taxonomy the vision model is asked to choose from."""

    FOOD = "食費"
    TRANSPORT = "交通費"
    SHOPPING = "ショッピング"
    ENTERTAINMENT = "娯楽"
    UTILITIES = "光熱費"
    OTHER = "その他"

    @property
    def description(self) -> str:
        """Kinds of expenses included in the category."""
        return _CATEGORY_DESCRIPTIONS[self]


_CATEGORY_DESCRIPTIONS = {
    ExpenseCategory.FOOD: "食品、飲料、レストラン",
    ExpenseCategory.TRANSPORT: "電車、バス、ガソリン、タクシー",
    ExpenseCategory.SHOPPING: "衣類、日用品、家電",
    ExpenseCategory.ENTERTAINMENT: "映画、本、ゲーム、趣味",
    ExpenseCategory.UTILITIES: "電気、ガス、水道、通信費",
    ExpenseCategory.OTHER: "上記以外",
}


class ExpenseItem(BaseModel):
    """One categorized expense recovered from a receipt."""

    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory = Field(..., description="Expense category")
    amount: int = Field(..., ge=0, description="Amount in whole currency units")
    items: list[str] = Field(
        default_factory=list, description="Product names on the receipt"
    )


class AnalysisRequest(BaseModel):
    """Request body for receipt analysis.

    Both fields are optional here so that missing values are reported as a
    400 by the request gate instead of a framework validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(
        default=None,
        alias="apiKey",
        repr=False,
        description="Vision API key, used for this request only",
    )
    image_base64: str | None = Field(
        default=None,
        alias="imageBase64",
        repr=False,
        description="Receipt image as a data URI (data:image/<type>;base64,...)",
    )


class AnalysisResult(BaseModel):
    """Successful analysis response.

    ``data`` holds whatever array the model produced; elements are expected,
    not guaranteed, to look like ``ExpenseItem``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "success": True,
                    "data": [
                        ExpenseItem(
                            category=ExpenseCategory.FOOD,
                            amount=500,
                            items=["coffee"],
                        ).model_dump(mode="json")
                    ],
                    "usage": {
                        "prompt_tokens": 300,
                        "completion_tokens": 25,
                        "total_tokens": 325,
                    },
                }
            ]
        }
    )

    success: bool = Field(default=True, description="Always true on success")
    data: list[Any] = Field(..., description="Parsed expense array")
    usage: Any = Field(
        default=None, description="Token usage reported by the vision API, as is"
    )


class ErrorResponse(BaseModel):
    """Error response body; only the fields relevant to the failure are set."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error message")
    details: str | None = Field(default=None, description="Upstream body or cause")
    raw_content: str | None = Field(
        default=None, alias="rawContent", description="Raw model text"
    )
    parse_error: str | None = Field(
        default=None, alias="parseError", description="JSON decoder message"
    )
