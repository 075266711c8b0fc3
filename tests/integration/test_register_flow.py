"""
Integration tests for the registration flow.

Runs the real application, lifespan included, with the in-memory
repository and the blocklist anti-spam backend configured through
environment variables.
"""

import logging
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.adapters.anti_spam.blocklist import BlocklistAntiSpamChecker
from src.adapters.repository.in_memory import InMemoryUserRepository
from src.api.main import app
from src.config.settings import get_settings


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Start the app with in-memory storage and a spam.com blocklist."""
    monkeypatch.setenv("REPOSITORY_BACKEND", "memory")
    monkeypatch.setenv("ANTI_SPAM_BACKEND", "blocklist")
    monkeypatch.setenv("BLOCKED_DOMAINS", '["spam.com"]')
    monkeypatch.setenv("BLOCKED_EMAILS", '["blocked@example.com"]')
    monkeypatch.setenv("ALLOWED_EMAIL_DOMAINS", "[]")
    get_settings.cache_clear()

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()


class TestLifespanWiring:
    """Tests for adapters wired at startup."""

    def test_adapters_selected_from_settings(self, client: TestClient) -> None:
        """Settings choose the in-memory repository and blocklist checker."""
        assert isinstance(app.state.repository, InMemoryUserRepository)
        assert isinstance(app.state.anti_spam, BlocklistAntiSpamChecker)
        assert app.state.pool is None

    def test_health(self, client: TestClient) -> None:
        """Health check succeeds without a database."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestRegisterFlow:
    """End-to-end flows through the v1 API."""

    def test_register_update_and_delete(self, client: TestClient) -> None:
        """A user can be registered, renamed, re-addressed and removed."""
        created = client.post(
            "/v1/users", json={"email": "Jean.Pierre@Example.com", "name": "Jean-Pierre O'Connor"}
        )
        assert created.status_code == 201
        user_id = created.json()["id"]

        renamed = client.patch(f"/v1/users/{user_id}/name", json={"name": "Jean Pierre"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Jean Pierre"

        moved = client.patch(f"/v1/users/{user_id}/email", json={"email": "jp@example.org"})
        assert moved.status_code == 200
        assert moved.json()["email"] == "jp@example.org"
        assert moved.json()["name"] == "Jean Pierre"

        assert client.get("/v1/users").json()["users"][0]["id"] == user_id

        assert client.delete(f"/v1/users/{user_id}").status_code == 204
        assert client.get("/v1/users").json() == {"users": []}

    def test_blocklists_from_settings(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Configured addresses and domains are rejected and logged."""
        with caplog.at_level(logging.INFO):
            by_domain = client.post("/v1/users", json={"email": "x@spam.com", "name": "Spam Bot"})
            by_address = client.post(
                "/v1/users", json={"email": "Blocked@Example.com", "name": "Spam Bot"}
            )

        assert by_domain.status_code == 403
        assert by_address.status_code == 403
        assert "x@spam.com" in caplog.text
        assert "blocked@example.com" in caplog.text

    def test_freed_email_can_be_reused(self, client: TestClient) -> None:
        """Deleting a user releases their address."""
        first = client.post("/v1/users", json={"email": "a@example.com", "name": "Alice Smith"})
        client.delete(f"/v1/users/{first.json()['id']}")

        again = client.post("/v1/users", json={"email": "a@example.com", "name": "Alice Jones"})

        assert again.status_code == 201
        assert again.json()["id"] != first.json()["id"]
