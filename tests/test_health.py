from fastapi.testclient import TestClient

from pitch_proxy.config import Settings
from pitch_proxy.main import create_app


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_request_id_header_present_on_response(client):
    resp = client.get("/health")

    assert "X-Request-ID" in resp.headers
    assert len(resp.headers["X-Request-ID"]) == 32


def test_request_ids_are_unique(client):
    first = client.get("/health").headers["X-Request-ID"]
    second = client.get("/health").headers["X-Request-ID"]
    assert first != second


def test_cors_preflight_allowed(client):
    resp = client.options(
        "/gemini",
        headers={
            "Origin": "https://app-aaf.canva-apps.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization,content-type",
        },
    )
    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers


def test_default_app_builds_from_settings():
    """create_app wires a real cache, service and JWKS resolver when none are injected."""
    app = create_app(Settings(app_id="AAFtestapp"))
    assert app.state.verifier.app_id == "AAFtestapp"
    assert app.state.proxy.cache.ttl_seconds == 60
    assert TestClient(app).get("/health").status_code == 200
