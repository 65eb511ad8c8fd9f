# ============================================================
# Tests : tests/test_repositories.py
# Objet  : Repos SQLAlchemy (sqlite mémoire): salons, profils, réservations.
# ============================================================
"""
Tests pour les repositories SQLAlchemy.

Ce module teste les accès SQL directement, sans passer par les services métier, avec une base
SQLite en mémoire.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salonbook.domain.entities import BookingStatus, Role
from salonbook.infra.repo.booking_repo import BookingRepo
from salonbook.infra.repo.db import SHARED_CONNECTION_LOCK, get_engine, get_session_factory
from salonbook.infra.repo.models import Base, ServiceItemORM, as_utc
from salonbook.infra.repo.profile_repo import UserProfileRepo
from salonbook.infra.repo.salon_repo import SalonRepo


def _session() -> Session:
    """Crée une session SQLAlchemy avec une base SQLite en mémoire."""
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    return Session(bind=engine)


def test_salons_listed_by_name() -> None:
    session = _session()
    repo = SalonRepo(session)
    repo.add_salon("Keur Coiff Premium")
    repo.add_salon("Chez Ibra")
    assert [s.name for s in repo.list_salons()] == ["Chez Ibra", "Keur Coiff Premium"]
    assert repo.count_salons() == 2


def test_get_unknown_salon_and_service() -> None:
    repo = SalonRepo(_session())
    assert repo.get_salon("nope") is None
    assert repo.get_service("nope") is None


def test_services_filtered_by_salon() -> None:
    """Teste le filtre par salon et la liste vide pour un salon inconnu."""
    repo = SalonRepo(_session())
    a = repo.add_salon("A")
    b = repo.add_salon("B")
    repo.add_service(a.id, "Tresses", 8000, 90)
    repo.add_service(a.id, "Nattes", 6000, 60)
    repo.add_service(b.id, "Coupe", 2500, 25)

    assert [s.name for s in repo.list_services(a.id)] == ["Nattes", "Tresses"]
    assert len(repo.list_services()) == 3
    assert repo.list_services("unknown") == []


def test_negative_price_rejected() -> None:
    repo = SalonRepo(_session())
    salon = repo.add_salon("A")
    with pytest.raises(ValueError):
        repo.add_service(salon.id, "Tresses", -1)
    service = repo.add_service(salon.id, "Tresses", 0)
    with pytest.raises(ValueError):
        repo.update_service_price(service.id, -5)
    assert repo.update_service_price("missing", 10) is None


def test_profile_unique_constraint() -> None:
    """Teste que la contrainte d'unicité sur le sujet externe est respectée."""
    session = _session()
    repo = UserProfileRepo(session)
    now = datetime.now(UTC)
    created = repo.create("kc-1", Role.CLIENT, now)
    session.commit()
    with pytest.raises(IntegrityError):
        repo.create("kc-1", Role.ADMIN, now)
    # la session reste utilisable après l'échec
    again = repo.get_by_external_id("kc-1")
    assert again is not None and again.id == created.id and again.role is Role.CLIENT
    assert repo.count_for_subject("kc-1") == 1


def test_profile_created_at_read_back_as_utc() -> None:
    session = _session()
    repo = UserProfileRepo(session)
    repo.create("kc-1", Role.CLIENT, datetime(2026, 1, 1, 8, 30, tzinfo=UTC))
    session.commit()
    session.expire_all()
    got = repo.get_by_external_id("kc-1")
    assert got is not None
    assert got.created_at == datetime(2026, 1, 1, 8, 30, tzinfo=UTC)


def test_booking_repo_create_and_list() -> None:
    session = _session()
    catalog = SalonRepo(session)
    salon = catalog.add_salon("Salon Awa Beauty")
    service = catalog.add_service(salon.id, "Tresses", 8000, 90)
    repo = BookingRepo(session)
    early = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
    late = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
    repo.create("kc-1", salon.id, service.id, early, total=8000)
    repo.create("kc-1", salon.id, service.id, late, total=8000, status=BookingStatus.CONFIRMED)

    records = repo.list_for_subject("kc-1")
    assert [r.datetime for r in records] == [late, early]
    assert records[0].status is BookingStatus.CONFIRMED
    assert records[1].status is BookingStatus.PENDING
    assert records[0].salon_name == "Salon Awa Beauty" and records[0].service_name == "Tresses"
    assert repo.count() == 2


def test_as_utc() -> None:
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    aware = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    assert as_utc(aware) is aware
    assert as_utc(None) is None


def test_price_check_constraint_enforced_by_database() -> None:
    """Teste que la base refuse un prix négatif écrit hors de `SalonRepo`."""
    session = _session()
    salon = SalonRepo(session).add_salon("A")
    session.add(ServiceItemORM(salon_id=salon.id, name="Tresses", price=-1))
    with pytest.raises(IntegrityError):
        session.flush()


def test_memory_session_factory_shares_a_lock(tmp_path) -> None:
    """Teste que seule la base mémoire (connexion unique) sérialise les sessions."""
    memory = get_session_factory(get_engine("sqlite+pysqlite:///:memory:"))
    assert memory().info.get(SHARED_CONNECTION_LOCK) is not None
    assert memory().info[SHARED_CONNECTION_LOCK] is memory().info[SHARED_CONNECTION_LOCK]

    on_disk = get_session_factory(get_engine(f"sqlite+pysqlite:///{tmp_path / 'f.db'}"))
    assert SHARED_CONNECTION_LOCK not in on_disk().info
