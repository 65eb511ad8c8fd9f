# ============================================================
# Module : salonbook/infra/repo/booking_repo.py
# Objet  : Accès SQL aux réservations.
# ============================================================

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from ...domain.entities import BookingRecord, BookingStatus
from .models import BookingORM, as_utc


def _to_record(row: BookingORM) -> BookingRecord:
    return BookingRecord(
        id=row.id,
        salon_name=row.salon.name,
        service_name=row.service.name,
        datetime=as_utc(row.datetime),
        status=BookingStatus(row.status),
        total=row.total,
    )


class BookingRepo:
    """Insertion et lecture des réservations d'un utilisateur."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    def create(
        self,
        external_subject_id: str,
        salon_id: str,
        service_id: str,
        scheduled_at: datetime,
        total: int,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> BookingRecord:
        """Insère une réservation et retourne sa projection."""
        row = BookingORM(
            external_subject_id=external_subject_id,
            salon_id=salon_id,
            service_id=service_id,
            datetime=scheduled_at,
            status=status.value,
            total=total,
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return _to_record(row)

    def list_for_subject(self, external_subject_id: str) -> list[BookingRecord]:
        """Réservations d'un utilisateur, de la plus tardive à la plus ancienne."""
        stmt = (
            select(BookingORM)
            .options(joinedload(BookingORM.salon), joinedload(BookingORM.service))
            .where(BookingORM.external_subject_id == external_subject_id)
            .order_by(BookingORM.datetime.desc())
        )
        return [_to_record(r) for r in self._session.execute(stmt).scalars()]

    def count(self) -> int:
        """Nombre total de réservations."""
        return len(self._session.execute(select(BookingORM.id)).all())
