"""
Application principale FastAPI.

Ce module assemble tous les composants de l'API de réservation de salons : middlewares,
politique d'accès, routes, métriques et gestion d'erreurs.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI à partir d'un conteneur (injecté ou global)
- Ajouter les middlewares (CORS, request id, timing, métriques, politique d'accès)
- Monter les routers (santé, catalogue, profil, réservations, métriques)
- Peupler le catalogue de démonstration si demandé
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salonbook.api.routes_bookings import router as bookings_router
from salonbook.api.routes_health import router as health_router
from salonbook.api.routes_me import router as me_router
from salonbook.api.routes_salons import router as salons_router
from salonbook.apigw.access_policy import AccessPolicy, AccessPolicyMiddleware
from salonbook.apigw.errors import register_error_handlers
from salonbook.app.metrics import PrometheusMiddleware, metrics_router
from salonbook.core.container import Container
from salonbook.core.logging import setup_logging
from salonbook.infra.seed import seed_demo_data
from salonbook.middlewares.request_id import RequestIDMiddleware
from salonbook.middlewares.timing import TimingMiddleware


def create_app(
    container: Container | None = None, policy: AccessPolicy | None = None
) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Attache le conteneur (settings, base, services) à `app.state`
    - Ajoute les middlewares; la politique d'accès est la plus interne
    - Publie les routes et les gestionnaires d'erreurs enveloppées
    """
    if container is None:
        from salonbook.core.container import container as default_container  # noqa: PLC0415

        container = default_container
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)

    # Le mode debug Starlette court-circuite le gestionnaire d'erreurs 500.
    app = FastAPI(title=settings.APP_NAME)
    app.state.container = container

    app.add_middleware(
        AccessPolicyMiddleware,
        verifier=container.token_verifier,
        policy=policy or AccessPolicy(),
        roles_claim=settings.ROLES_CLAIM,
        authority_prefix=settings.AUTHORITY_PREFIX,
    )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o).rstrip("/") for o in settings.CORS_ORIGINS],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    app.include_router(health_router)
    app.include_router(salons_router)
    app.include_router(me_router)
    app.include_router(bookings_router)
    app.include_router(metrics_router)
    register_error_handlers(app)

    if settings.SEED_DEMO_DATA:
        seed_demo_data(container.session_factory)
    return app


app = create_app()
