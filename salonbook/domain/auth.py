"""
Module d'authentification: validation des jetons d'identité et mapping des rôles.

Le fournisseur d'identité (Keycloak ou équivalent OIDC) émet des jetons JWT porteurs d'un sujet
(`sub`) et d'une claim imbriquée listant les rôles (`realm_access.roles`). Ce module:
- valide un jeton (JWKS RS256 si configuré, sinon secret partagé);
- dérive l'ensemble des authorities locales à partir des rôles du jeton.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import jwt
from jwt import PyJWKClient
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidAudienceError,
    InvalidIssuerError,
    InvalidSignatureError,
    PyJWKClientError,
    PyJWTError,
)

from salonbook.core.settings import Settings

DEFAULT_ROLES_CLAIM = "realm_access"
DEFAULT_AUTHORITY_PREFIX = "ROLE_"

_ROLE_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class InvalidTokenError(Exception):
    """Jeton absent, mal formé, expiré ou non vérifiable."""


@dataclass(frozen=True)
class IdentityToken:
    """Jeton d'identité validé: sujet et claims brutes."""

    subject: str
    claims: Mapping[str, Any] = field(default_factory=dict)


def derive_authorities(
    token: IdentityToken,
    roles_claim: str = DEFAULT_ROLES_CLAIM,
    prefix: str = DEFAULT_AUTHORITY_PREFIX,
) -> frozenset[str]:
    """Dérive les authorities locales depuis `<roles_claim>.roles`.

    Une claim absente ou mal typée donne un ensemble vide (moindre privilège), jamais une erreur.
    Chaque rôle est mis en majuscules et préfixé: `"admin"` -> `"ROLE_ADMIN"`.
    """
    container = token.claims.get(roles_claim)
    if not isinstance(container, Mapping):
        return frozenset()
    roles = container.get("roles")
    if not isinstance(roles, _ROLE_SEQUENCE_TYPES):
        return frozenset()
    return frozenset(f"{prefix}{str(role).upper()}" for role in roles)


def parse_bearer(authorization: str | None) -> str:
    """Extrait le jeton d'un en-tête `Authorization: Bearer <token>`."""
    if not authorization:
        raise InvalidTokenError("missing_token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        raise InvalidTokenError("invalid_authorization_scheme")
    token = token.strip()
    if not token:
        raise InvalidTokenError("missing_token")
    return token


class TokenVerifier:
    """Valide les jetons d'accès émis par le fournisseur d'identité.

    Deux modes:
    - JWKS (`OIDC_JWKS_URL` défini): clé publique résolue via le `kid`, algorithme RS256;
    - secret partagé (défaut, dev/tests): `JWT_SECRET` + `JWT_ALG`.

    L'émetteur et l'audience ne sont vérifiés que s'ils sont configurés.
    """

    def __init__(self, settings: Settings, jwks_client: PyJWKClient | None = None):
        """Prépare le vérificateur (client JWKS paresseux sauf injection)."""
        self.settings = settings
        self._jwks_client = jwks_client

    @property
    def uses_jwks(self) -> bool:
        """Indique si la vérification passe par JWKS."""
        return bool(self.settings.OIDC_JWKS_URL) or self._jwks_client is not None

    def _get_jwks_client(self) -> PyJWKClient:
        if self._jwks_client is None:
            self._jwks_client = PyJWKClient(
                self.settings.OIDC_JWKS_URL,
                cache_keys=True,
                max_cached_keys=16,
                lifespan=3600,
            )
        return self._jwks_client

    def _resolve_key(self, raw: str) -> tuple[Any, list[str]]:
        if self.uses_jwks:
            signing_key = self._get_jwks_client().get_signing_key_from_jwt(raw)
            return signing_key.key, ["RS256"]
        return self.settings.JWT_SECRET, [self.settings.JWT_ALG]

    def verify(self, raw: str) -> IdentityToken:
        """Décode et valide un jeton, puis retourne le sujet et les claims."""
        options = {
            "require": ["exp", "sub"],
            "verify_aud": bool(self.settings.OIDC_AUDIENCE),
            "verify_iss": bool(self.settings.OIDC_ISSUER),
        }
        try:
            key, algorithms = self._resolve_key(raw)
            claims = jwt.decode(
                raw,
                key,
                algorithms=algorithms,
                audience=self.settings.OIDC_AUDIENCE,
                issuer=self.settings.OIDC_ISSUER,
                options=options,
                leeway=self.settings.JWT_LEEWAY_SECONDS,
            )
        except ExpiredSignatureError as err:
            raise InvalidTokenError("token_expired") from err
        except InvalidIssuerError as err:
            raise InvalidTokenError("invalid_issuer") from err
        except InvalidAudienceError as err:
            raise InvalidTokenError("invalid_audience") from err
        except InvalidSignatureError as err:
            raise InvalidTokenError("invalid_signature") from err
        except DecodeError as err:
            raise InvalidTokenError("malformed_token") from err
        except (PyJWKClientError, PyJWTError) as err:
            raise InvalidTokenError("invalid_token") from err

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("missing_subject")
        return IdentityToken(subject=subject, claims=claims)
