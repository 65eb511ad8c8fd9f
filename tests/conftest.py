"""Configuration de test pour pytest.

Fournit une application isolée par test (SQLite en mémoire, jetons HS256 signés localement) et un
utilitaire de création de jetons imitant ceux du fournisseur d'identité.
"""

import os
import sys
import time
from collections.abc import Callable, Iterator
from typing import Any

import jwt
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so that imports like `from salonbook...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from salonbook.app.main import create_app  # noqa: E402
from salonbook.core.container import Container  # noqa: E402
from salonbook.core.settings import Settings  # noqa: E402

TEST_JWT_SECRET = "test-secret-for-salonbook-at-least-32-bytes"


def make_settings(**overrides: Any) -> Settings:
    """Settings de test: base mémoire, pas de seed, secret HS256 connu."""
    values: dict[str, Any] = {
        "DATABASE_URL": "sqlite+pysqlite:///:memory:",
        "DB_CREATE_ALL": True,
        "SEED_DEMO_DATA": False,
        "JWT_SECRET": TEST_JWT_SECRET,
        "JWT_ALG": "HS256",
        "OIDC_ISSUER": None,
        "OIDC_JWKS_URL": None,
        "OIDC_AUDIENCE": None,
        "APP_DEBUG": True,
    }
    values.update(overrides)
    return Settings(**values)


def mint_token(
    sub: str = "sub-123",
    roles: Any = ("client",),
    expires_in: int = 300,
    secret: str = TEST_JWT_SECRET,
    **extra: Any,
) -> str:
    """Signe un jeton d'accès au format Keycloak (`realm_access.roles`)."""
    payload: dict[str, Any] = {
        "sub": sub,
        "iat": int(time.time()),
        "exp": int(time.time()) + expires_in,
        **extra,
    }
    if roles is not None:
        payload["realm_access"] = {"roles": list(roles)}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(sub: str = "sub-123", **kwargs: Any) -> dict[str, str]:
    """En-tête Authorization prêt à l'emploi."""
    return {"Authorization": f"Bearer {mint_token(sub=sub, **kwargs)}"}


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def container(settings: Settings) -> Iterator[Container]:
    c = Container(settings)
    yield c
    c.dispose()


@pytest.fixture
def client(container: Container) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def seed_catalog(container: Container) -> Callable[..., dict[str, str]]:
    """Insère un salon et deux prestations; retourne leurs identifiants."""
    from salonbook.infra.repo.db import session_scope
    from salonbook.infra.repo.salon_repo import SalonRepo

    def _seed(price: int = 5000) -> dict[str, str]:
        with session_scope(container.session_factory) as session:
            repo = SalonRepo(session)
            salon = repo.add_salon("Salon Awa Beauty", "Plateau, Dakar", 4.8)
            other = repo.add_salon("Chez Ibra - Coiffeur Homme", "Ouakam, Dakar", 4.9)
            service = repo.add_service(salon.id, "Tresses", price, 90)
            foreign = repo.add_service(other.id, "Coupe", 2500, 25)
        return {
            "salon_id": salon.id,
            "other_salon_id": other.id,
            "service_id": service.id,
            "foreign_service_id": foreign.id,
        }

    return _seed
