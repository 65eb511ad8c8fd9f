"""
Exceptions métier.

Ces exceptions sont levées par le domaine et l'infrastructure, puis traduites en enveloppes de
réponse par `salonbook.apigw.errors`.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base des erreurs métier."""


class NotFoundError(DomainError):
    """Ressource référencée introuvable (salon, prestation, réservation)."""

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} introuvable: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class BookingValidationError(DomainError):
    """Requête de réservation incohérente, rattachée à un champ."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StorageError(DomainError):
    """Échec du stockage sous-jacent. Jamais rejoué en interne."""
