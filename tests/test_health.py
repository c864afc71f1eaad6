"""
Tests for the health endpoint and application wiring.
"""

from catalog_api.main import DEFAULT_ORIGINS, get_allowed_origins


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "catalog-api"


def test_allowed_origins_default(configured_settings, monkeypatch):
    monkeypatch.setattr(configured_settings, "allowed_origins", "")
    assert get_allowed_origins() == DEFAULT_ORIGINS


def test_allowed_origins_from_settings(configured_settings, monkeypatch):
    monkeypatch.setattr(configured_settings, "allowed_origins", "https://a.test, https://b.test,")
    assert get_allowed_origins() == ["https://a.test", "https://b.test"]
