"""
Pytest configuration and fixtures for all tests.
"""

import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from mail_relay.app import create_app
from mail_relay.config import Settings

TEST_WEBHOOK = "http://n8n.test/webhook/mcp-email"


class FakeWebhook:
    """
    Records requests made to the webhook and answers with a configurable
    handler. Defaults to 200 {"ok": true}.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"ok": True})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def payloads(self) -> list:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def settings() -> Settings:
    return Settings(webhook_url=TEST_WEBHOOK, webhook_timeout=2.0)


@pytest.fixture
def webhook() -> FakeWebhook:
    return FakeWebhook()


@pytest.fixture
def client(settings, webhook):
    """TestClient with the lifespan running and the webhook mocked."""
    app = create_app(settings, http_client=webhook.client())
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
