"""
Shared test fixtures and configuration.
"""
import json
import os

# Must be set before vibe_engine.config is imported
os.environ["AIMLAPI_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SENTRY_DSN", None)

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from vibe_engine.main import app
from vibe_engine.routers.generate import get_orchestrator, get_usage_counter
from vibe_engine.services.generation_orchestrator import GenerationOrchestrator
from vibe_engine.services.usage_counter import UsageCounter


def completion_body(content, total_tokens=150):
    """Chat-completion response body as the provider returns it."""
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if total_tokens is not None:
        body["usage"] = {"total_tokens": total_tokens}
    return body


class FakeProvider:
    """Records outbound requests and answers with a canned reply."""

    def __init__(self, content="", status_code=200, total_tokens=150, raise_error=None):
        self.content = content
        self.status_code = status_code
        self.total_tokens = total_tokens
        self.raise_error = raise_error
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream exploded")
        return httpx.Response(200, json=completion_body(self.content, self.total_tokens))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def usage_counter() -> UsageCounter:
    return UsageCounter(limit=100)


@pytest.fixture
def make_provider():
    """Factory for fake providers: make_provider(content=..., status_code=...)."""
    return FakeProvider


@pytest.fixture
def make_orchestrator(usage_counter):
    """Build an orchestrator wired to a fake provider."""
    def _make(provider: FakeProvider, api_key="test-key"):
        return GenerationOrchestrator(
            usage_counter=usage_counter,
            api_key=api_key,
            api_url="https://provider.test/v1/chat/completions",
            transport=provider.transport
        )
    return _make


@pytest.fixture
def client():
    """TestClient with a fresh usage counter and no dependency overrides."""
    app.state.usage_counter = UsageCounter(limit=100)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def remote_client(client):
    """Route /api/generate through a fake provider instead of the network."""
    provider = FakeProvider()

    def _orchestrator(usage_counter: UsageCounter = Depends(get_usage_counter)):
        return GenerationOrchestrator(
            usage_counter=usage_counter,
            api_key="test-key",
            api_url="https://provider.test/v1/chat/completions",
            transport=provider.transport
        )

    app.dependency_overrides[get_orchestrator] = _orchestrator
    return client, provider
