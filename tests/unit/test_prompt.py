"""Unit tests for chat-completions payload construction."""

from __future__ import annotations

from receiptanalyzer.models import ExpenseCategory
from receiptanalyzer.services.prompt import RECEIPT_ANALYSIS_PROMPT, build_analysis_payload


def test_payload_structure(png_data_uri: str) -> None:
    """Test the request body sent to the vision API."""
    payload = build_analysis_payload(png_data_uri, model="gpt-4o-mini")

    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == 0.1
    assert payload["max_tokens"] == 1500

    messages = payload["messages"]
    assert len(messages) == 1
    assert messages[0]["role"] == "user"

    text_part, image_part = messages[0]["content"]
    assert text_part == {"type": "text", "text": RECEIPT_ANALYSIS_PROMPT}
    assert image_part == {
        "type": "image_url",
        "image_url": {"url": png_data_uri, "detail": "low"},
    }


def test_payload_is_deterministic(png_data_uri: str) -> None:
    """Test that identical input yields identical payloads."""
    assert build_analysis_payload(png_data_uri, model="m") == build_analysis_payload(
        png_data_uri, model="m"
    )


def test_prompt_lists_every_category() -> None:
    """Test that the prompt names all six categories with their scope."""
    for category in ExpenseCategory:
        assert f"- {category.value}（{category.description}）" in RECEIPT_ANALYSIS_PROMPT


def test_prompt_describes_output_shape() -> None:
    """Test that the prompt asks for category, amount and items."""
    for field in ('"category"', '"amount"', '"items"'):
        assert field in RECEIPT_ANALYSIS_PROMPT
    assert "JSON" in RECEIPT_ANALYSIS_PROMPT
