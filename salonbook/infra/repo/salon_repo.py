# ============================================================
# Module : salonbook/infra/repo/salon_repo.py
# Objet  : Accès SQL en lecture aux salons et à leurs prestations.
# ============================================================

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ...domain.entities import Salon, ServiceItem
from .models import SalonORM, ServiceItemORM


def _to_salon(row: SalonORM) -> Salon:
    return Salon(id=row.id, name=row.name, address=row.address, rating=row.rating)


def _to_service(row: ServiceItemORM) -> ServiceItem:
    return ServiceItem(
        id=row.id,
        salon_id=row.salon_id,
        name=row.name,
        price=row.price,
        duration_minutes=row.duration_minutes,
    )


class SalonRepo:
    """Lecture des salons et prestations (création réservée au seed/admin)."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    def list_salons(self) -> list[Salon]:
        """Retourne tous les salons, triés par nom."""
        rows = self._session.execute(select(SalonORM).order_by(SalonORM.name)).scalars()
        return [_to_salon(r) for r in rows]

    def get_salon(self, salon_id: str) -> Salon | None:
        """Retourne un salon par id, ou None."""
        row = self._session.get(SalonORM, salon_id)
        return _to_salon(row) if row else None

    def count_salons(self) -> int:
        """Nombre de salons enregistrés."""
        return self._session.scalar(select(func.count()).select_from(SalonORM)) or 0

    def list_services(self, salon_id: str | None = None) -> list[ServiceItem]:
        """Retourne les prestations, éventuellement filtrées par salon."""
        stmt = select(ServiceItemORM)
        if salon_id is not None:
            stmt = stmt.where(ServiceItemORM.salon_id == salon_id)
        stmt = stmt.order_by(ServiceItemORM.name)
        return [_to_service(r) for r in self._session.execute(stmt).scalars()]

    def get_service(self, service_id: str) -> ServiceItem | None:
        """Retourne une prestation par id, ou None."""
        row = self._session.get(ServiceItemORM, service_id)
        return _to_service(row) if row else None

    def add_salon(
        self, name: str, address: str | None = None, rating: float | None = None
    ) -> Salon:
        """Insère un salon (seed/admin)."""
        row = SalonORM(name=name, address=address, rating=rating)
        self._session.add(row)
        self._session.flush()
        return _to_salon(row)

    def add_service(
        self, salon_id: str, name: str, price: int, duration_minutes: int | None = None
    ) -> ServiceItem:
        """Insère une prestation pour un salon existant (seed/admin)."""
        if price < 0:
            raise ValueError("price must be non-negative")
        row = ServiceItemORM(
            salon_id=salon_id, name=name, price=price, duration_minutes=duration_minutes
        )
        self._session.add(row)
        self._session.flush()
        return _to_service(row)

    def update_service_price(self, service_id: str, price: int) -> ServiceItem | None:
        """Modifie le prix catalogue d'une prestation (admin)."""
        if price < 0:
            raise ValueError("price must be non-negative")
        row = self._session.get(ServiceItemORM, service_id)
        if not row:
            return None
        row.price = price
        self._session.flush()
        return _to_service(row)
