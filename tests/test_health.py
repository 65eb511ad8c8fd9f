"""Tests pour l'endpoint de santé de l'application."""

from fastapi.testclient import TestClient

from salonbook.core.http_constants import HTTP_OK


def test_health(client: TestClient):
    """Teste que l'endpoint de santé répond UP dans l'enveloppe, sans jeton."""
    r = client.get("/api/health")
    assert r.status_code == HTTP_OK
    assert r.json() == {"success": True, "message": None, "data": {"status": "UP"}}


def test_health_ignores_invalid_token(client: TestClient):
    """Teste qu'une route publique ne valide pas un jeton fourni."""
    r = client.get("/api/health", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == HTTP_OK


def test_request_id_and_timing_headers(client: TestClient):
    """Teste la propagation de X-Request-ID et l'en-tête de durée."""
    r = client.get("/api/health", headers={"X-Request-ID": "req-42"})
    assert r.headers["X-Request-ID"] == "req-42"
    assert int(r.headers["X-Process-Time-ms"]) >= 0

    generated = client.get("/api/health").headers["X-Request-ID"]
    assert generated and generated != "req-42"


def test_metrics_endpoint_is_public(client: TestClient):
    """Teste que `/metrics` expose les compteurs sans authentification."""
    client.get("/api/health")
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert "http_requests_total" in r.text
    assert 'route="/api/health"' in r.text
