"""Tests for the control API."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from checkthesite import __version__
from checkthesite.api import create_app

from conftest import StubChecker


@pytest.fixture
def periodic_scheduler(make_scheduler, periodic_policy):
    scheduler = make_scheduler(periodic_policy, StubChecker(result=True))
    scheduler.start()
    return scheduler


@pytest.fixture
def client(periodic_scheduler):
    with patch("checkthesite.api.app.settings") as mock_settings:
        mock_settings.api_token = ""
        yield TestClient(create_app(periodic_scheduler))


class TestControlAPI:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "version": __version__}

    def test_status(self, client):
        resp = client.get("/status")
        assert resp.status_code == 200
        data = resp.json()
        assert data["url"] == "https://example.com/shop"
        assert data["state"] == "armed"
        assert data["scheduling_enabled"] is True
        assert data["delay_range"] == [180, 300]

    def test_confirm_when_already_enabled(self, client):
        resp = client.post("/confirm")
        assert resp.status_code == 200
        assert resp.json() == {"result": "already_enabled", "scheduling_enabled": True}

    def test_confirm_after_positive(self, client, periodic_scheduler):
        periodic_scheduler.perform_poll()
        assert client.get("/status").json()["state"] == "suspended"

        resp = client.post("/confirm")
        assert resp.json() == {"result": "confirmed", "scheduling_enabled": True}
        assert client.get("/status").json()["state"] == "armed"

    def test_confirm_after_shutdown(self, client, periodic_scheduler):
        periodic_scheduler.perform_poll()
        periodic_scheduler.shutdown()

        resp = client.post("/confirm")
        assert resp.status_code == 503
        assert client.get("/status").json()["state"] == "idle"

    def test_confirm_unsupported(self, make_scheduler, single_shot_policy):
        scheduler = make_scheduler(single_shot_policy)
        with patch("checkthesite.api.app.settings") as mock_settings:
            mock_settings.api_token = ""
            resp = TestClient(create_app(scheduler)).post("/confirm")
        assert resp.status_code == 409


class TestTokenAuth:
    @pytest.fixture
    def secured(self, periodic_scheduler):
        with patch("checkthesite.api.app.settings") as mock_settings:
            mock_settings.api_token = "s3cret"
            yield TestClient(create_app(periodic_scheduler))

    def test_missing_token(self, secured):
        resp = secured.get("/status")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or missing X-Api-Token"

    def test_wrong_token(self, secured):
        assert secured.post("/confirm", headers={"X-Api-Token": "nope"}).status_code == 401

    def test_valid_token(self, secured):
        assert secured.get("/status", headers={"X-Api-Token": "s3cret"}).status_code == 200

    def test_health_is_public(self, secured):
        assert secured.get("/health").status_code == 200
