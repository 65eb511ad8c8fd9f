"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/api/health`, public, au format enveloppé.
"""

from fastapi import APIRouter

from salonbook.api.schemas import ApiResponse, HealthOut

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthOut])
def health():
    """Signale que l'API est démarrée."""
    return ApiResponse[HealthOut].ok(HealthOut(status="UP"))
