"""
Pytest configuration and fixtures for catalog tests.

Notion and the order webhook are replaced by ``httpx.MockTransport``
handlers; nothing leaves the process.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from shared.config.settings import settings
from catalog_api.dependencies import clear_caches, get_notion_http, get_webhook_client
from catalog_api.main import app
from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.http import RetryConfig, RetryingHttpClient
from tests.fakes import COMPANIES_DB, PRODUCTS_DB, FakeNotion


async def no_sleep(_seconds: float) -> None:
    return None


class FakeClock:
    """Controllable clock for TTL caches."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class WebhookRecorder:
    """Receives forwarded presupuestos."""

    def __init__(self):
        self.status_code = 200
        self.error: Exception | None = None
        self.bodies: list[dict] = []
        self.urls: list[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        self.urls.append(str(request.url))
        self.bodies.append(json.loads(request.content))
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})


@pytest.fixture
def fake_notion():
    """Empty fake Notion workspace."""
    return FakeNotion()


@pytest.fixture
def notion_http(fake_notion):
    """Retrying client wired to the fake, without backoff sleeps."""
    return RetryingHttpClient(
        client=httpx.AsyncClient(transport=fake_notion.transport()),
        config=RetryConfig(timeout=5.0, max_retries=3),
        sleep=no_sleep,
    )


@pytest.fixture
def notion(notion_http):
    return NotionClient(notion_http, token="secret_test", api_url="https://api.notion.com/v1")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def configured_settings(monkeypatch):
    """Point the global settings at the fake databases."""
    monkeypatch.setattr(settings, "notion_token", "secret_test")
    monkeypatch.setattr(settings, "notion_database_id", PRODUCTS_DB)
    monkeypatch.setattr(settings, "notion_companies_database_id", COMPANIES_DB)
    monkeypatch.setattr(settings, "notion_api_url", "https://api.notion.com/v1")
    monkeypatch.setattr(settings, "notion_client", "Acme")
    monkeypatch.setattr(settings, "revalidate_secret", "revalidate-secret-123")
    monkeypatch.setattr(settings, "n8n_pedido_webhook_url", "https://hooks.example.com/nuevo-pedido")
    return settings


@pytest.fixture
def webhook():
    return WebhookRecorder()


@pytest.fixture
def client(configured_settings, notion_http, webhook):
    """
    Test client with Notion and webhook overrides.
    Process-wide caches are cleared around each test.
    """
    async def override_webhook_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(webhook.handle)) as c:
            yield c

    app.dependency_overrides[get_notion_http] = lambda: notion_http
    app.dependency_overrides[get_webhook_client] = override_webhook_client
    clear_caches()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_caches()
