"""Chat-completions payload construction for receipt analysis."""

from __future__ import annotations

from typing import Any

from receiptanalyzer.models.expense import ExpenseCategory

TEMPERATURE = 0.1  # Low temperature for consistency
MAX_TOKENS = 1500
IMAGE_DETAIL = "low"


def _build_category_lines() -> str:
    return "\n".join(
        f"- {category.value}（{category.description}）" for category in ExpenseCategory
    )


RECEIPT_ANALYSIS_PROMPT = (
    "このレシートを分析して、商品と金額を抽出し、以下のJSON形式で正確に返してください。\n"
    "\n"
    "形式:\n"
    "[\n"
    "  {\n"
    f'    "category": "{ExpenseCategory.FOOD.value}",\n'
    '    "amount": 1200,\n'
    '    "items": ["商品1", "商品2"]\n'
    "  }\n"
    "]\n"
    "\n"
    "カテゴリは以下から選択：\n"
    f"{_build_category_lines()}\n"
    "\n"
    "金額は数字のみ、商品名は配列で返してください。"
)


def build_analysis_payload(image_data_uri: str, *, model: str) -> dict[str, Any]:
    """Build the chat-completions request body for one receipt image.

    Args:
        image_data_uri: Validated ``data:image/...`` URI
        model: Vision model identifier

    Returns:
        JSON-serializable request body
    """
    return {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": RECEIPT_ANALYSIS_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": image_data_uri, "detail": IMAGE_DETAIL},
                    },
                ],
            }
        ],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }
