"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Centraliser l'accès aux instances nécessaires aux endpoints (services métier, identité de
  l'appelant) à partir du conteneur attaché à l'application.
- Permettre d'injecter un conteneur dédié (tests) sans modifier les routes.
"""

from fastapi import Depends, Request

from salonbook.apigw.access_policy import Principal
from salonbook.apigw.errors import unauthorized
from salonbook.core.container import Container
from salonbook.domain.bookings import BookingWorkflow
from salonbook.domain.catalog import SalonCatalog
from salonbook.domain.entities import UserProfile
from salonbook.domain.profiles import ProfileDirectory


def get_container(request: Request) -> Container:
    """Retourne le conteneur attaché à l'application."""
    return request.app.state.container


def get_catalog(container: Container = Depends(get_container)) -> SalonCatalog:
    return container.catalog


def get_profiles(container: Container = Depends(get_container)) -> ProfileDirectory:
    return container.profiles


def get_booking_workflow(container: Container = Depends(get_container)) -> BookingWorkflow:
    return container.bookings


def get_principal(request: Request) -> Principal:
    """Identité posée par `AccessPolicyMiddleware`; 401 si la route n'est pas protégée."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise unauthorized()
    return principal


def get_current_profile(
    principal: Principal = Depends(get_principal),
    profiles: ProfileDirectory = Depends(get_profiles),
) -> UserProfile:
    """Résout (ou crée) le profil local de l'appelant."""
    return profiles.get_or_create(principal.subject)
