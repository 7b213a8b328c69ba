"""Tests for the shared passphrase and allow-list checks."""

import pytest
from fastapi.testclient import TestClient

from duet.config import get_settings
from duet.services.gate import GateService


class TestValidatePassword:
    """Tests for POST /api/validate-password."""

    def test_correct_password(self, client: TestClient):
        response = client.post("/api/validate-password", json={"sharedPassword": "open-sesame"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.parametrize("candidate", ["", "open-sesame ", "OPEN-SESAME", "open", "open-sesame2"])
    def test_wrong_password(self, client: TestClient, candidate: str):
        response = client.post("/api/validate-password", json={"sharedPassword": candidate})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid shared password"

    def test_missing_password(self, client: TestClient):
        """A body without the field is a wrong password, not a malformed request."""
        response = client.post("/api/validate-password", json={})
        assert response.status_code == 401

    def test_unset_passphrase_never_matches(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(get_settings(), "SHARED_PASSWORD", "")
        response = client.post("/api/validate-password", json={"sharedPassword": ""})
        assert response.status_code == 401


class TestValidateEmail:
    """Tests for POST /api/validate-email."""

    @pytest.mark.parametrize("email", ["me@example.com", "her@example.com"])
    def test_allowed_emails(self, client: TestClient, email: str):
        response = client.post("/api/validate-email", json={"email": email})
        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.parametrize("email", ["someone@example.com", "", "ME@EXAMPLE.COM", "me@example.com.evil"])
    def test_other_emails_forbidden(self, client: TestClient, email: str):
        response = client.post("/api/validate-email", json={"email": email})
        assert response.status_code == 403
        assert response.json()["error"] == "Email not authorized for this app"

    def test_missing_email(self, client: TestClient):
        response = client.post("/api/validate-email", json={})
        assert response.status_code == 403


class TestGateService:
    """Direct tests for the gate checks."""

    def test_unset_allow_list_entry_never_matches(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "ALLOWED_EMAIL_2", "")
        service = GateService()
        assert service.validate_email("me@example.com") is True
        assert service.validate_email("") is False
        assert service.validate_email(None) is False

    def test_passphrase_none(self):
        assert GateService().validate_passphrase(None) is False
