"""Tests for the receipt analysis pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from receiptanalyzer.core.exceptions import (
    ExtractionError,
    JSONParseError,
    UpstreamError,
)
from receiptanalyzer.services.analyzer import ReceiptAnalyzer

if TYPE_CHECKING:
    from conftest import UpstreamStub

    from receiptanalyzer.services.vision import VisionClient


@pytest.fixture
def analyzer(vision_client: VisionClient) -> ReceiptAnalyzer:
    """Create a permissive analyzer."""
    return ReceiptAnalyzer(vision_client=vision_client, model="gpt-4o-mini")


@pytest.mark.asyncio
async def test_analyze_success(
    analyzer: ReceiptAnalyzer, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test a full successful analysis."""
    usage = {"prompt_tokens": 100, "completion_tokens": 20, "total_tokens": 120}
    upstream.reply(
        'Here is the result:\n[{"category":"食費","amount":500,"items":["coffee"]}]\nThanks',
        usage=usage,
    )

    result = await analyzer.analyze("sk-test", png_data_uri)

    assert result.success is True
    assert result.data == [{"category": "食費", "amount": 500, "items": ["coffee"]}]
    assert result.usage == usage

    payload = upstream.last_payload
    assert payload["model"] == "gpt-4o-mini"
    assert payload["messages"][0]["content"][1]["image_url"]["url"] == png_data_uri


@pytest.mark.asyncio
async def test_unknown_categories_pass_through_by_default(
    analyzer: ReceiptAnalyzer, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test that categories are not validated unless asked to."""
    upstream.reply('[{"category": "groceries", "amount": 300, "items": []}]')

    result = await analyzer.analyze("sk-test", png_data_uri)

    assert result.data[0]["category"] == "groceries"


@pytest.mark.asyncio
async def test_strict_categories(
    vision_client: VisionClient, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test category normalization when enabled."""
    analyzer = ReceiptAnalyzer(
        vision_client=vision_client, model="gpt-4o-mini", strict_categories=True
    )
    upstream.reply(
        '[{"category": "groceries", "amount": 300, "items": []},'
        ' {"category": "光熱費", "amount": 4200, "items": ["electricity"]}]'
    )

    result = await analyzer.analyze("sk-test", png_data_uri)

    assert [entry["category"] for entry in result.data] == ["その他", "光熱費"]


@pytest.mark.asyncio
async def test_extraction_failure(
    analyzer: ReceiptAnalyzer, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test a reply without any array."""
    upstream.reply("No items found.")

    with pytest.raises(ExtractionError) as exc_info:
        await analyzer.analyze("sk-test", png_data_uri)

    assert exc_info.value.raw_content == "No items found."


@pytest.mark.asyncio
async def test_parse_failure(
    analyzer: ReceiptAnalyzer, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test a reply with an invalid array."""
    upstream.reply("[{bad json}]")

    with pytest.raises(JSONParseError) as exc_info:
        await analyzer.analyze("sk-test", png_data_uri)

    assert exc_info.value.raw_content == "[{bad json}]"
    assert exc_info.value.parse_error


@pytest.mark.asyncio
async def test_upstream_failure(
    analyzer: ReceiptAnalyzer, upstream: UpstreamStub, png_data_uri: str
) -> None:
    """Test that upstream errors propagate unchanged."""
    upstream.fail(429, "rate limited")

    with pytest.raises(UpstreamError) as exc_info:
        await analyzer.analyze("sk-test", png_data_uri)

    assert exc_info.value.status_code == 429
    assert exc_info.value.details == "rate limited"
