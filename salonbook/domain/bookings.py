import datetime as dt

import structlog
from sqlalchemy.orm import sessionmaker

from salonbook.app.metrics import BOOKINGS_CREATED
from salonbook.domain.entities import BookingRecord, BookingStatus
from salonbook.domain.errors import BookingValidationError, NotFoundError
from salonbook.infra.repo.booking_repo import BookingRepo
from salonbook.infra.repo.db import session_scope
from salonbook.infra.repo.salon_repo import SalonRepo

log = structlog.get_logger(__name__)


def _to_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)


class BookingWorkflow:
    """Service métier de réservation.

    Responsabilités:
    - Résoudre le salon puis la prestation demandés (erreur si absents).
    - Figer le total au prix courant de la prestation.
    - Persister la réservation au statut `pending` et en renvoyer la projection.
    """

    def __init__(self, session_factory: sessionmaker, enforce_service_salon_match: bool = False):
        """Initialise le service.

        Paramètres:
        - session_factory: fabrique de sessions SQLAlchemy.
        - enforce_service_salon_match: refuse une prestation n'appartenant pas au salon demandé.
        """
        self._factory = session_factory
        self.enforce_service_salon_match = enforce_service_salon_match

    def create(
        self,
        external_subject_id: str,
        salon_id: str,
        service_id: str,
        scheduled_at: dt.datetime,
    ) -> BookingRecord:
        """Crée une réservation pour l'utilisateur courant.

        Les étapes sont strictement séquentielles; aucune réservation n'est écrite si le salon ou
        la prestation est introuvable.
        """
        with session_scope(self._factory) as session:
            catalog = SalonRepo(session)
            salon = catalog.get_salon(salon_id)
            if salon is None:
                raise NotFoundError("salon", salon_id)
            service = catalog.get_service(service_id)
            if service is None:
                raise NotFoundError("service", service_id)
            if self.enforce_service_salon_match and service.salon_id != salon.id:
                raise BookingValidationError(
                    "serviceId", "la prestation n'appartient pas au salon"
                )
            record = BookingRepo(session).create(
                external_subject_id=external_subject_id,
                salon_id=salon.id,
                service_id=service.id,
                scheduled_at=_to_utc(scheduled_at),
                total=int(service.price),
                status=BookingStatus.PENDING,
            )
        BOOKINGS_CREATED.inc()
        log.info("booking_created", booking_id=record.id, salon_id=salon.id, total=record.total)
        return record

    def list_mine(self, external_subject_id: str) -> list[BookingRecord]:
        """Réservations de l'utilisateur, triées par date décroissante (sans pagination)."""
        with session_scope(self._factory) as session:
            return BookingRepo(session).list_for_subject(external_subject_id)
