# Schémas Pydantic exposés par l'API (requêtes et réponses).

from __future__ import annotations

import datetime as dt
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from salonbook.domain.entities import BookingRecord, Salon, ServiceItem, UserProfile

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base des schémas: champs snake_case, JSON camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    """Enveloppe uniforme `{success, message, data}`."""

    success: bool
    message: str | None = None
    data: T | None = None

    @classmethod
    def ok(cls, data: T) -> ApiResponse[T]:
        return cls(success=True, message=None, data=data)


class HealthOut(BaseModel):
    status: str


class SalonOut(CamelModel):
    id: str
    name: str
    address: str | None = None
    rating: float | None = None

    @classmethod
    def from_domain(cls, salon: Salon) -> SalonOut:
        return cls(id=salon.id, name=salon.name, address=salon.address, rating=salon.rating)


class ServiceItemOut(CamelModel):
    id: str
    salon_id: str
    name: str
    price: int
    duration_minutes: int | None = None

    @classmethod
    def from_domain(cls, service: ServiceItem) -> ServiceItemOut:
        return cls(
            id=service.id,
            salon_id=service.salon_id,
            name=service.name,
            price=service.price,
            duration_minutes=service.duration_minutes,
        )


class MeOut(CamelModel):
    """Profil local de l'utilisateur courant."""

    id: str
    external_subject_id: str
    role: str
    created_at: dt.datetime

    @classmethod
    def from_domain(cls, profile: UserProfile) -> MeOut:
        return cls(
            id=profile.id,
            external_subject_id=profile.external_subject_id,
            role=profile.role.value,
            created_at=profile.created_at,
        )


class CreateBookingRequest(CamelModel):
    """Requête de création de réservation.

    Champs:
    - salonId: str (non vide)
    - serviceId: str (non vide)
    - datetime: horodatage ISO-8601
    """

    salon_id: str = Field(min_length=1)
    service_id: str = Field(min_length=1)
    datetime: dt.datetime

    @field_validator("salon_id", "service_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class BookingOut(CamelModel):
    """Projection d'une réservation (jamais l'entité brute)."""

    id: str
    salon_name: str
    service_name: str
    datetime: dt.datetime
    status: str
    total: int

    @classmethod
    def from_domain(cls, record: BookingRecord) -> BookingOut:
        return cls(
            id=record.id,
            salon_name=record.salon_name,
            service_name=record.service_name,
            datetime=record.datetime,
            status=record.status.value,
            total=record.total,
        )
