"""HTTP client for the chat-completions vision API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from receiptanalyzer.core.exceptions import (
    UnexpectedUpstreamShapeError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class UpstreamReply(BaseModel):
    """Text content and token usage of a chat-completions reply."""

    model_config = ConfigDict(frozen=True)

    content: Any
    usage: Any = None


class VisionClient:
    """Client for one-shot chat-completions calls.

    The API key is supplied per call and only ever placed in that call's
    headers. No retries are attempted.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the vision client.

        Args:
            base_url: API base URL, e.g. ``https://api.openai.com/v1``
            timeout: Request timeout in seconds, ``None`` for no deadline
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create_chat_completion(
        self, api_key: str, payload: dict[str, Any]
    ) -> UpstreamReply:
        """Send one chat-completions request.

        Args:
            api_key: Caller-supplied bearer token
            payload: Request body

        Returns:
            UpstreamReply with ``choices[0].message.content`` and ``usage``

        Raises:
            UpstreamError: If the API answers with a non-success status
            UnexpectedUpstreamShapeError: If the reply lacks ``choices[0].message``
            httpx.RequestError: If the request cannot be sent
        """
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                "/chat/completions", json=payload, headers=headers
            )

        if not response.is_success:
            error_body = response.text
            logger.error(
                "Vision API error (status %d): %s", response.status_code, error_body
            )
            raise UpstreamError(response.status_code, error_body)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Vision API returned non-JSON body: %s", response.text)
            raise UnexpectedUpstreamShapeError from e

        message = _first_choice_message(data)
        if message is None:
            logger.error("Unexpected vision API response shape: %s", data)
            raise UnexpectedUpstreamShapeError

        if "usage" not in data:
            return UpstreamReply(content=message.get("content"))
        return UpstreamReply(content=message.get("content"), usage=data["usage"])


def _first_choice_message(data: Any) -> dict[str, Any] | None:  # noqa: ANN401
    """Return ``choices[0].message`` or None when the path is absent."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    return message if isinstance(message, dict) else None
