"""Tests for the tweakhub REST API."""

import pytest
from fastapi.testclient import TestClient

from tweakhub import __version__
from tweakhub.config import AppConfig, EngineConfig, ServerConfig
from tweakhub.hub.api import create_api
from tweakhub.hub.core import SettingsHub

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def client(hub):
    """Test client over an initialized demo-machine hub."""
    return TestClient(create_api(hub))


@pytest.fixture
def cold_client(snapshot, fast_config):
    """Test client over a hub that was never initialized."""
    return TestClient(create_api(SettingsHub.from_snapshot(snapshot, fast_config)))


# ============================================================================
# Service endpoints
# ============================================================================


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"service": "tweakhub", "version": __version__}

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["features"]["taskbar"] == {"compatible": 4, "total": 5}


# ============================================================================
# Features and settings
# ============================================================================


class TestFeatures:
    def test_list_features(self, client):
        data = client.get("/api/features").json()
        assert data["features"] == {"power": 6, "privacy": 4, "sound": 3, "explorer": 5, "taskbar": 4}

    def test_not_initialized_is_503(self, cold_client):
        response = cold_client.get("/api/features")
        assert response.status_code == 503
        assert "not initialized" in response.json()["detail"]

    def test_feature_settings(self, client):
        data = client.get("/api/features/privacy/settings").json()
        ids = [s["id"] for s in data["settings"]]
        assert "privacy-cortana" not in ids
        assert data["bypass"] is False

    def test_feature_settings_bypass(self, client):
        data = client.get("/api/features/privacy/settings", params={"bypass": True}).json()
        cortana = next(s for s in data["settings"] if s["id"] == "privacy-cortana")
        assert cortana["compatibility_message"] == "Only available on Windows 10"

    def test_unknown_feature_is_404(self, client):
        assert client.get("/api/features/gaming/settings").status_code == 404


class TestSettings:
    def test_options(self, client):
        data = client.get("/api/settings/power-display-timeout/options").json()
        assert data["success"] is True
        assert data["selected_value"] == 1
        assert [o["display_text"] for o in data["options"]][:2] == ["5 minutes", "10 minutes"]

    def test_options_for_toggle_fail_softly(self, client):
        data = client.get("/api/settings/sound-startup-sound/options").json()
        assert data["success"] is False
        assert data["error_message"] == "Setting 'sound-startup-sound' is not a selection control"

    def test_options_unknown_setting_is_404(self, client):
        assert client.get("/api/settings/gaming-mode/options").status_code == 404

    def test_value(self, client):
        data = client.get("/api/settings/taskbar-alignment/value").json()
        assert data == {"setting_id": "taskbar-alignment", "value": 1}

    def test_value_unknown_setting_is_404(self, client):
        assert client.get("/api/settings/gaming-mode/value").status_code == 404

    def test_apply(self, client):
        response = client.post("/api/settings/taskbar-alignment/apply", json={"value": 0})
        assert response.status_code == 200
        assert client.get("/api/settings/taskbar-alignment/value").json()["value"] == 0

    def test_apply_failure_is_400(self, client):
        response = client.post("/api/settings/power-display-timeout/apply", json={"value": 9})
        assert response.status_code == 400
        assert "no option at index" in response.json()["detail"]

    def test_apply_unknown_setting_is_404(self, client):
        response = client.post("/api/settings/gaming-mode/apply", json={"enable": True})
        assert response.status_code == 404
        assert "No domain service found" in response.json()["detail"]

    def test_apply_before_initialize_is_503(self, cold_client):
        response = cold_client.post("/api/settings/privacy-advertising-id/apply", json={"enable": True})
        assert response.status_code == 503
        assert "not initialized" in response.json()["detail"]

    def test_value_before_initialize_is_503(self, cold_client):
        response = cold_client.get("/api/settings/privacy-advertising-id/value")
        assert response.status_code == 503
        assert "not initialized" in response.json()["detail"]

    def test_toggle_filter(self, client):
        response = client.put("/api/filter", json={"enabled": False})
        assert response.json() == {"filter_enabled": False}
        assert client.get("/api/features").json()["features"]["privacy"] == 6


# ============================================================================
# Recommended settings
# ============================================================================


class TestRecommended:
    def test_list(self, client):
        data = client.get("/api/recommended/sound").json()
        assert [s["id"] for s in data["settings"]] == ["sound-communication-ducking", "sound-startup-sound"]

    def test_unknown_is_404(self, client):
        assert client.get("/api/recommended/gaming-mode").status_code == 404

    def test_apply(self, client):
        data = client.post("/api/recommended/sound").json()
        assert data == {"applied": ["sound-communication-ducking", "sound-startup-sound"], "failed": {}}


# ============================================================================
# API key
# ============================================================================


class TestApiKey:
    @pytest.fixture
    def secured(self, snapshot):
        config = AppConfig(
            engine=EngineConfig(settle_delay_seconds=0, apply_spacing_seconds=0),
            server=ServerConfig(api_key="secret"),
        )
        return TestClient(create_api(SettingsHub.from_snapshot(snapshot, config)))

    def test_missing_key_rejected(self, secured):
        assert secured.put("/api/filter", json={"enabled": True}).status_code == 403

    def test_valid_key_accepted(self, secured):
        response = secured.put("/api/filter", json={"enabled": True}, headers={"X-API-Key": "secret"})
        assert response.status_code == 200

    def test_health_is_open(self, secured):
        assert secured.get("/health").status_code == 200
