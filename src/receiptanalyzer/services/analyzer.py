"""Receipt analysis pipeline: payload, upstream call, extraction."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from receiptanalyzer.models import AnalysisResult
from receiptanalyzer.services.extraction import normalize_categories, parse_expense_array
from receiptanalyzer.services.prompt import build_analysis_payload

if TYPE_CHECKING:
    from receiptanalyzer.services.vision import VisionClient

logger = logging.getLogger(__name__)


class ReceiptAnalyzer:
    """Turns one validated receipt image into a list of expenses."""

    def __init__(
        self,
        vision_client: VisionClient,
        model: str,
        *,
        strict_categories: bool = False,
    ) -> None:
        """Initialize the analyzer.

        Args:
            vision_client: Client for the chat-completions API
            model: Vision model identifier
            strict_categories: Rewrite unknown categories to "other"
        """
        self.vision_client = vision_client
        self.model = model
        self.strict_categories = strict_categories

    async def analyze(self, api_key: str, image_data_uri: str) -> AnalysisResult:
        """Analyze a receipt image.

        Args:
            api_key: Caller-supplied vision API key
            image_data_uri: Validated ``data:image/...`` URI

        Returns:
            AnalysisResult with the parsed expense array and token usage

        Raises:
            UpstreamError: If the vision API rejects the request
            UnexpectedUpstreamShapeError: If the reply has no message
            ExtractionError: If the reply contains no JSON array
            JSONParseError: If the JSON array cannot be parsed
        """
        start_time = time.time()

        payload = build_analysis_payload(image_data_uri, model=self.model)
        reply = await self.vision_client.create_chat_completion(api_key, payload)

        data = parse_expense_array(reply.content)
        if self.strict_categories:
            data = normalize_categories(data)

        logger.info(
            "Extracted %d expense entries in %.2f seconds",
            len(data),
            time.time() - start_time,
        )
        # usage is relayed as is, and left out of the response when absent
        if "usage" not in reply.model_fields_set:
            return AnalysisResult(success=True, data=data)
        return AnalysisResult(success=True, data=data, usage=reply.usage)
