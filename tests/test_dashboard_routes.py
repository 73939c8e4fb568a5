import importlib
import json
import sys

import httpx
from fastapi.testclient import TestClient

from conftest import FakeApi


def _reload_app(monkeypatch, extra_env=None):
    keys_to_clear = [
        "MAPLE_API_BASE",
        "DASHBOARD_TOKEN_FILE",
        "STATUS_POLL_INTERVAL",
        "USAGE_REFRESH_INTERVAL",
        "ERROR_BANNER_SECONDS",
        "REQUEST_TIMEOUT",
    ]
    for key in keys_to_clear:
        monkeypatch.delenv(key, raising=False)
    if extra_env:
        for k, v in extra_env.items():
            monkeypatch.setenv(k, str(v))

    for mod in list(sys.modules.keys()):
        if mod == "maple_usage_dashboard" or mod.startswith("dashboard."):
            sys.modules.pop(mod, None)

    import maple_usage_dashboard

    importlib.reload(maple_usage_dashboard)
    return maple_usage_dashboard


def _wire_fake_api(module):
    # Build the client from the freshly reloaded modules so error classes match.
    from dashboard.api_client import MapleApiClient

    api = FakeApi()
    client = MapleApiClient(base_url="https://api.test", transport=httpx.MockTransport(api.handler))
    module.session.client = client
    module.session.status_poller.client = client
    return api


def test_index_serves_dashboard_page(monkeypatch):
    module = _reload_app(monkeypatch)
    client = TestClient(module.app)
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Maple API Usage" in resp.text
    assert "/api/state" in resp.text


def test_settings_come_from_env(monkeypatch, tmp_path):
    module = _reload_app(
        monkeypatch,
        {
            "MAPLE_API_BASE": "https://maple.example/",
            "DASHBOARD_TOKEN_FILE": str(tmp_path / "t.json"),
            "USAGE_REFRESH_INTERVAL": "not-a-number",
        },
    )
    assert module.settings.api_base == "https://maple.example"
    assert module.settings.token_file == str(tmp_path / "t.json")
    assert module.settings.usage_refresh_interval == 30.0
    assert module.settings.status_poll_interval == 60.0


def test_empty_token_rejected(monkeypatch):
    module = _reload_app(monkeypatch)
    api = _wire_fake_api(module)
    client = TestClient(module.app)
    resp = client.post("/api/token", json={"token": "   "})
    assert resp.status_code == 400
    data = resp.json()
    assert data["error"] == "Please enter your API token"
    assert data["state"]["error"] == "Please enter your API token"
    assert api.calls == []


def test_non_string_token_rejected(monkeypatch):
    module = _reload_app(monkeypatch)
    api = _wire_fake_api(module)
    client = TestClient(module.app)
    resp = client.post("/api/token", json={"token": 123})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Please enter your API token"
    assert api.calls == []


def test_submit_refresh_and_clear(monkeypatch, tmp_path):
    token_path = tmp_path / "token.json"
    module = _reload_app(monkeypatch, {"DASHBOARD_TOKEN_FILE": str(token_path)})
    api = _wire_fake_api(module)
    client = TestClient(module.app)

    resp = client.post("/api/token", json={"token": "tok-1"})
    assert resp.status_code == 200
    state = resp.json()
    assert state["visible"] is True
    assert state["status"] == {"state": "active", "text": "Live"}
    assert state["rate_cards"]["rpd"]["percentage"] == 85.0
    assert state["rate_cards"]["rpd"]["limited"] is True
    assert state["rate_cards"]["rpd"]["fill_tier"] == "warning"
    assert state["chart_summary"]["trend"] == "📈"
    assert json.loads(token_path.read_text()) == {"mapleai_token": "tok-1"}

    first_chart = state["chart"]["id"]
    resp = client.post("/api/refresh")
    assert resp.status_code == 200
    assert resp.json()["chart"]["id"] != first_chart
    assert len(api.calls) == 4

    resp = client.delete("/api/token")
    assert resp.status_code == 200
    assert resp.json()["visible"] is False
    assert resp.json()["token_input"] == ""
    assert json.loads(token_path.read_text()) == {}

    assert client.get("/api/state").json()["visible"] is False


def test_unauthorized_token_reports_error(monkeypatch):
    module = _reload_app(monkeypatch)
    api = _wire_fake_api(module)
    api.set("/v1/key-info", 401)
    client = TestClient(module.app)

    resp = client.post("/api/token", json={"token": "nope"})
    assert resp.status_code == 200
    state = resp.json()
    assert state["error"] == "API request failed. Please check your token."
    assert state["status"]["state"] == "error"
    assert state["visible"] is False


def test_health(monkeypatch):
    module = _reload_app(monkeypatch)
    _wire_fake_api(module)
    client = TestClient(module.app)
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["token_present"] is False
    assert [t["name"] for t in data["tasks"]] == ["service-status", "usage-refresh"]
