"""
Routes de réservation (authentifiées).

Chaque appel résout d'abord le profil local de l'appelant, puis délègue au `BookingWorkflow`.
"""

from fastapi import APIRouter, Depends

from salonbook.api.deps import get_booking_workflow, get_current_profile
from salonbook.api.schemas import ApiResponse, BookingOut, CreateBookingRequest
from salonbook.domain.bookings import BookingWorkflow
from salonbook.domain.entities import UserProfile

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
profile_dep = Depends(get_current_profile)
workflow_dep = Depends(get_booking_workflow)


@router.get("/me", response_model=ApiResponse[list[BookingOut]])
def my_bookings(
    profile: UserProfile = profile_dep,
    workflow: BookingWorkflow = workflow_dep,
):
    """Réservations de l'appelant, de la plus tardive à la plus ancienne."""
    records = workflow.list_mine(profile.external_subject_id)
    return ApiResponse[list[BookingOut]].ok([BookingOut.from_domain(r) for r in records])


@router.post("", response_model=ApiResponse[BookingOut])
def create_booking(
    payload: CreateBookingRequest,
    profile: UserProfile = profile_dep,
    workflow: BookingWorkflow = workflow_dep,
):
    """
    Crée une réservation au statut `pending`.

    Paramètres:
    - payload: `CreateBookingRequest` (salonId, serviceId, datetime).

    Retour: projection de la réservation (salon, prestation, date, statut, total).
    """
    record = workflow.create(
        profile.external_subject_id,
        payload.salon_id,
        payload.service_id,
        payload.datetime,
    )
    return ApiResponse[BookingOut].ok(BookingOut.from_domain(record))
