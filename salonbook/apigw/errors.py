"""Gestion standardisée des erreurs API avec enveloppes de réponse.

Toutes les réponses, succès comme échecs, partagent l'enveloppe `{success, message, data}`. Ce
module traduit les exceptions (métier, validation, HTTP, inattendues) en enveloppes d'échec avec
un statut HTTP cohérent.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from salonbook.core.http_constants import (
    GENERIC_SERVER_ERROR_MESSAGE,
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
)
from salonbook.domain.errors import BookingValidationError, NotFoundError, StorageError

log = logging.getLogger(__name__)


class APIError(HTTPException):
    """Erreur API portant directement le message de l'enveloppe."""

    def __init__(self, status_code: int, message: str) -> None:
        """Initialise une erreur API avec son statut et son message."""
        super().__init__(status_code=status_code, detail=message)
        self.message = message


def envelope(success: bool, message: str | None = None, data: Any = None) -> dict[str, Any]:
    """Construit l'enveloppe uniforme des réponses."""
    return {"success": success, "message": message, "data": data}


def create_error_response(status_code: int, message: str) -> JSONResponse:
    """Crée une réponse d'échec enveloppée."""
    return JSONResponse(status_code=status_code, content=envelope(False, message))


def extract_request_id(request: Request) -> str | None:
    """Identifiant de requête propagé par `RequestIDMiddleware`, s'il existe."""
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def format_validation_error(exc: RequestValidationError) -> str:
    """Formate la première erreur de validation en `"<champ>: <message>"`."""
    errors = exc.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or "request"
    return f"{field}: {first.get('msg', 'invalid value')}"


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Gère les APIError."""
    log.warning(
        "API error occurred",
        extra={
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_id": extract_request_id(request),
        },
    )
    return create_error_response(exc.status_code, exc.message)


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Gère les HTTPException FastAPI/Starlette (404 de routage, 405, ...)."""
    log.warning(
        "HTTP exception occurred",
        extra={
            "error_message": str(exc.detail),
            "status_code": exc.status_code,
            "request_id": extract_request_id(request),
        },
    )
    return create_error_response(exc.status_code, str(exc.detail))


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Gère les erreurs de validation de requête (400, premier champ fautif)."""
    return create_error_response(HTTP_BAD_REQUEST, format_validation_error(exc))


def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    """Ressource référencée absente."""
    return create_error_response(HTTP_NOT_FOUND, str(exc))


def handle_booking_validation(request: Request, exc: BookingValidationError) -> JSONResponse:
    """Incohérence métier rattachée à un champ."""
    return create_error_response(HTTP_BAD_REQUEST, str(exc))


def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    """Échec du stockage: message générique, détail uniquement dans les logs."""
    log.error(
        "Storage error occurred",
        extra={"request_id": extract_request_id(request), "exception_message": str(exc)},
        exc_info=exc,
    )
    return create_error_response(HTTP_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR_MESSAGE)


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Gère les exceptions inattendues avec une enveloppe générique."""
    log.error(
        "Unexpected error occurred",
        extra={
            "request_id": extract_request_id(request),
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return create_error_response(HTTP_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(BookingValidationError, handle_booking_validation)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(Exception, handle_generic_exception)


# Convenience functions for common errors
def unauthorized(message: str = "Authentification requise") -> APIError:
    """Create a 401 Unauthorized error."""
    return APIError(HTTP_UNAUTHORIZED, message)


def not_found(message: str) -> APIError:
    """Create a 404 Not Found error."""
    return APIError(HTTP_NOT_FOUND, message)
