"""
Routes publiques du catalogue: salons et prestations.

Ce module regroupe les lectures `/api/salons` (liste, détail, prestations d'un salon) et
`/api/services` (liste filtrable et détail).
"""

from fastapi import APIRouter, Depends, Query

from salonbook.api.deps import get_catalog
from salonbook.api.schemas import ApiResponse, SalonOut, ServiceItemOut
from salonbook.domain.catalog import SalonCatalog

router = APIRouter(prefix="/api", tags=["catalog"])
catalog_dep = Depends(get_catalog)


@router.get("/salons", response_model=ApiResponse[list[SalonOut]])
def list_salons(catalog: SalonCatalog = catalog_dep):
    """Liste tous les salons."""
    salons = [SalonOut.from_domain(s) for s in catalog.list_salons()]
    return ApiResponse[list[SalonOut]].ok(salons)


@router.get("/salons/{salon_id}", response_model=ApiResponse[SalonOut])
def get_salon(salon_id: str, catalog: SalonCatalog = catalog_dep):
    """
    Retourne un salon.

    Paramètres:
    - salon_id: identifiant du salon.

    Retour: enveloppe contenant le salon; 404 enveloppé s'il est absent.
    """
    return ApiResponse[SalonOut].ok(SalonOut.from_domain(catalog.get_salon(salon_id)))


@router.get("/salons/{salon_id}/services", response_model=ApiResponse[list[ServiceItemOut]])
def list_salon_services(salon_id: str, catalog: SalonCatalog = catalog_dep):
    """Liste les prestations d'un salon (vide si le salon est inconnu)."""
    services = [ServiceItemOut.from_domain(s) for s in catalog.list_services(salon_id)]
    return ApiResponse[list[ServiceItemOut]].ok(services)


@router.get("/services", response_model=ApiResponse[list[ServiceItemOut]])
def list_services(
    salon_id: str | None = Query(default=None, alias="salonId"),
    catalog: SalonCatalog = catalog_dep,
):
    """Liste toutes les prestations, éventuellement filtrées par `salonId`."""
    services = [ServiceItemOut.from_domain(s) for s in catalog.list_services(salon_id)]
    return ApiResponse[list[ServiceItemOut]].ok(services)


@router.get("/services/{service_id}", response_model=ApiResponse[ServiceItemOut])
def get_service(service_id: str, catalog: SalonCatalog = catalog_dep):
    """Retourne une prestation; 404 enveloppé si absente."""
    service = catalog.get_service(service_id)
    return ApiResponse[ServiceItemOut].ok(ServiceItemOut.from_domain(service))
