"""
Catalogue en lecture seule: salons et prestations.

Les données sont créées par le seed ou un processus d'administration; ce service ne fait que les
exposer.
"""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from salonbook.domain.entities import Salon, ServiceItem
from salonbook.domain.errors import NotFoundError
from salonbook.infra.repo.db import session_scope
from salonbook.infra.repo.salon_repo import SalonRepo


class SalonCatalog:
    """Lectures publiques du catalogue."""

    def __init__(self, session_factory: sessionmaker):
        self._factory = session_factory

    def list_salons(self) -> list[Salon]:
        with session_scope(self._factory) as session:
            return SalonRepo(session).list_salons()

    def get_salon(self, salon_id: str) -> Salon:
        """Retourne un salon ou lève `NotFoundError`."""
        with session_scope(self._factory) as session:
            salon = SalonRepo(session).get_salon(salon_id)
        if salon is None:
            raise NotFoundError("salon", salon_id)
        return salon

    def list_services(self, salon_id: str | None = None) -> list[ServiceItem]:
        """Prestations d'un salon (liste vide si le salon n'existe pas), ou toutes."""
        with session_scope(self._factory) as session:
            return SalonRepo(session).list_services(salon_id)

    def get_service(self, service_id: str) -> ServiceItem:
        """Retourne une prestation ou lève `NotFoundError`."""
        with session_scope(self._factory) as session:
            service = SalonRepo(session).get_service(service_id)
        if service is None:
            raise NotFoundError("service", service_id)
        return service
