"""
Entités du domaine métier.

Ce module définit les objets manipulés par le cœur de l'application de réservation: profils
utilisateurs, salons, prestations et réservations. Ils sont indépendants de l'ORM et de l'API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Role(StrEnum):
    """Rôle applicatif d'un profil local."""

    CLIENT = "client"
    COIFFEUR = "coiffeur"
    ADMIN = "admin"


class BookingStatus(StrEnum):
    """Statut d'une réservation. Seul `pending` est attribué par ce service."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class UserProfile:
    """Profil local rattaché à un sujet du fournisseur d'identité."""

    id: str
    external_subject_id: str
    role: Role
    created_at: datetime


@dataclass(frozen=True)
class Salon:
    """Établissement réservable."""

    id: str
    name: str
    address: str | None
    rating: float | None


@dataclass(frozen=True)
class ServiceItem:
    """Prestation proposée par un salon (prix en plus petite unité monétaire)."""

    id: str
    salon_id: str
    name: str
    price: int
    duration_minutes: int | None


@dataclass(frozen=True)
class BookingRecord:
    """Projection d'une réservation renvoyée aux appelants."""

    id: str
    salon_name: str
    service_name: str
    datetime: datetime
    status: BookingStatus
    total: int
