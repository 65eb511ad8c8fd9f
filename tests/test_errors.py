"""
Tests de l'enveloppe d'erreur uniforme.

Vérifie la forme `{success, message, data}` pour les 404 de routage, les erreurs de stockage et
les exceptions inattendues (message générique, détail jamais exposé).
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.testclient import TestClient

from salonbook.apigw.access_policy import PERMIT_ALL, AccessPolicy, AccessRule
from salonbook.apigw.errors import create_error_response, envelope, not_found
from salonbook.app.main import create_app
from salonbook.core.container import Container
from salonbook.core.http_constants import (
    GENERIC_SERVER_ERROR_MESSAGE,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
)
from salonbook.domain.errors import StorageError


def _app_with_failing_routes(container: Container):
    router = APIRouter(prefix="/api/boom")

    @router.get("/unexpected")
    def unexpected():
        raise RuntimeError("secret internal detail")

    @router.get("/storage")
    def storage():
        raise StorageError("database is locked")

    @router.get("/missing")
    def missing():
        raise not_found("rien ici")

    app = create_app(
        container, policy=AccessPolicy([AccessRule(None, "/api/boom/**", PERMIT_ALL)])
    )
    app.include_router(router)
    return app


def test_envelope_helpers() -> None:
    assert envelope(True, data=[1]) == {"success": True, "message": None, "data": [1]}
    response = create_error_response(HTTP_NOT_FOUND, "x")
    assert response.status_code == HTTP_NOT_FOUND
    assert response.body == b'{"success":false,"message":"x","data":null}'


def test_unexpected_exception_is_generic_500(container: Container) -> None:
    """Teste qu'une exception inattendue donne 500 'Erreur serveur' sans détail interne."""
    client = TestClient(_app_with_failing_routes(container), raise_server_exceptions=False)
    r = client.get("/api/boom/unexpected")
    assert r.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert r.json() == {"success": False, "message": GENERIC_SERVER_ERROR_MESSAGE, "data": None}
    assert "secret" not in r.text


def test_storage_error_is_generic_500(container: Container) -> None:
    client = TestClient(_app_with_failing_routes(container))
    r = client.get("/api/boom/storage")
    assert r.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert r.json()["message"] == GENERIC_SERVER_ERROR_MESSAGE
    assert "locked" not in r.text


def test_api_error_carries_message(container: Container) -> None:
    client = TestClient(_app_with_failing_routes(container))
    r = client.get("/api/boom/missing")
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json() == {"success": False, "message": "rien ici", "data": None}


def test_routing_404_is_enveloped(client: TestClient) -> None:
    """Teste qu'un chemin public inexistant reçoit aussi l'enveloppe d'échec."""
    r = client.get("/api/salons/x/unknown/deeper")
    assert r.status_code == HTTP_NOT_FOUND
    body = r.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["message"]
