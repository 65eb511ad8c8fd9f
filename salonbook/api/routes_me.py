"""Route `/api/me`: profil local de l'utilisateur authentifié (créé au premier appel)."""

from fastapi import APIRouter, Depends

from salonbook.api.deps import get_current_profile
from salonbook.api.schemas import ApiResponse, MeOut
from salonbook.domain.entities import UserProfile

router = APIRouter(prefix="/api", tags=["me"])


@router.get("/me", response_model=ApiResponse[MeOut])
def me(profile: UserProfile = Depends(get_current_profile)):
    """Retourne `{id, externalSubjectId, role, createdAt}` pour l'appelant."""
    return ApiResponse[MeOut].ok(MeOut.from_domain(profile))
