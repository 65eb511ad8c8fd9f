"""SQLAlchemy models for persistence layer (salons, services, bookings, user profiles)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class SalonORM(Base):
    """Modèle ORM pour les salons."""

    __tablename__ = "salons"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True)

    services = relationship("ServiceItemORM", back_populates="salon")


class ServiceItemORM(Base):
    """Modèle ORM pour les prestations d'un salon."""

    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=_new_id)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=True)

    salon = relationship("SalonORM", back_populates="services")

    __table_args__ = (CheckConstraint("price >= 0", name="ck_services_price_non_negative"),)


class BookingORM(Base):
    """Modèle ORM pour les réservations."""

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_new_id)
    external_subject_id = Column(String(255), nullable=False)
    salon_id = Column(String(36), ForeignKey("salons.id"), nullable=False)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False)
    datetime = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(32), nullable=False, default="pending")
    total = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    salon = relationship("SalonORM")
    service = relationship("ServiceItemORM")

    __table_args__ = (
        Index("ix_bookings_subject_datetime", "external_subject_id", "datetime"),
    )


class UserProfileORM(Base):
    """Modèle ORM pour les profils locaux."""

    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    external_subject_id = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="client")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint("external_subject_id", name="uq_user_profiles_external_subject"),
    )


def as_utc(value: datetime | None) -> datetime | None:
    """Rattache UTC aux dates naïves relues (SQLite ne conserve pas le fuseau)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)
