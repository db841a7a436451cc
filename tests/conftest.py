"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from fastapi.testclient import TestClient

from receiptanalyzer.core.config import Settings, get_settings
from receiptanalyzer.core.dependencies import get_vision_client
from receiptanalyzer.main import create_app
from receiptanalyzer.services.vision import VisionClient

if TYPE_CHECKING:
    from collections.abc import Generator

    from fastapi import FastAPI

# 1x1 white PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA"
    "60e6kgAAAABJRU5ErkJggg=="
)


class UpstreamStub:
    """Fake chat-completions endpoint served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.status_code = 200
        self.body: Any = chat_completion("[]")
        self.text: str | None = None
        self.connect_error: str | None = None
        self.requests: list[httpx.Request] = []

    def reply(self, content: Any, usage: dict[str, Any] | None = None) -> None:  # noqa: ANN401
        """Answer with a successful completion carrying ``content``."""
        self.status_code = 200
        self.text = None
        self.body = chat_completion(content, usage)

    def fail(self, status_code: int, text: str) -> None:
        """Answer with an error status and a raw text body."""
        self.status_code = status_code
        self.text = text

    def disconnect(self, message: str) -> None:
        """Fail every call with a connection error."""
        self.connect_error = message

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error is not None:
            raise httpx.ConnectError(self.connect_error, request=request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def chat_completion(
    content: Any,  # noqa: ANN401
    usage: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a chat-completions response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": usage
        or {"prompt_tokens": 120, "completion_tokens": 30, "total_tokens": 150},
    }


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        openai_base_url="https://vision.test/v1",
        vision_model="gpt-4o-mini",
        debug=True,
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    """Create a fake vision API."""
    return UpstreamStub()


@pytest.fixture
def vision_client(test_settings: Settings, upstream: UpstreamStub) -> VisionClient:
    """Create a vision client wired to the fake vision API."""
    return VisionClient(
        base_url=test_settings.openai_base_url,
        transport=upstream.transport(),
    )


@pytest.fixture
def app(test_settings: Settings, vision_client: VisionClient) -> FastAPI:
    """Create test FastAPI app."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_vision_client] = lambda: vision_client
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def png_data_uri() -> str:
    """A small PNG receipt image as a data URI."""
    return PNG_DATA_URI
