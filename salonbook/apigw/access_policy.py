"""
Politique d'accès déclarative et middleware d'authentification.

La politique est une liste ordonnée de règles `(méthode, motif de chemin, exigence)` évaluée de
haut en bas; la première règle qui correspond l'emporte, et une requête sans règle applicable
exige une authentification. Les motifs suivent la syntaxe « Ant »:
- `*` correspond à un segment (sans `/`);
- `**` correspond à zéro ou plusieurs segments (`/api/salons/**` couvre aussi `/api/salons`).

Le middleware prend la décision une seule fois par requête, avant toute logique métier: les
routes publiques passent directement, les autres exigent un jeton Bearer valide. Les authorities
dérivées du jeton sont attachées à `request.state.principal`.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

import structlog
from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from salonbook.apigw.errors import create_error_response
from salonbook.app.metrics import ACCESS_DENIED
from salonbook.core.http_constants import HTTP_FORBIDDEN, HTTP_UNAUTHORIZED
from salonbook.domain.auth import (
    DEFAULT_AUTHORITY_PREFIX,
    DEFAULT_ROLES_CLAIM,
    IdentityToken,
    InvalidTokenError,
    TokenVerifier,
    derive_authorities,
    parse_bearer,
)

log = structlog.get_logger(__name__)


class Access(StrEnum):
    """Nature d'une exigence d'accès."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    AUTHORITY = "authority"


@dataclass(frozen=True)
class Requirement:
    """Exigence attachée à une règle."""

    access: Access
    authority: str | None = None

    @property
    def is_public(self) -> bool:
        return self.access is Access.PUBLIC


PERMIT_ALL = Requirement(Access.PUBLIC)
AUTHENTICATED = Requirement(Access.AUTHENTICATED)


def has_authority(authority: str) -> Requirement:
    """Exige une authority précise (ex: `ROLE_ADMIN`) en plus d'un jeton valide."""
    return Requirement(Access.AUTHORITY, authority)


def compile_path_pattern(pattern: str) -> re.Pattern[str]:
    """Compile un motif de chemin « Ant » en expression régulière ancrée."""
    regex = ""
    for part in pattern.strip("/").split("/"):
        if part == "**":
            regex += "(?:/.*)?"
        else:
            regex += "/" + re.escape(part).replace(r"\*", "[^/]*")
    return re.compile(f"^{regex}/?$")


@dataclass(frozen=True)
class AccessRule:
    """Règle `(méthode, motif, exigence)`; `method=None` couvre toutes les méthodes."""

    method: str | None
    pattern: str
    requirement: Requirement
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", compile_path_pattern(self.pattern))

    def matches(self, method: str, path: str) -> bool:
        """Vrai si la règle s'applique à la méthode et au chemin donnés."""
        if self.method is not None and self.method.upper() != method.upper():
            return False
        return bool(self._regex.match(path))


# Règles actives de l'API (ordre significatif)
DEFAULT_RULES: tuple[AccessRule, ...] = (
    AccessRule(None, "/api/health", PERMIT_ALL),
    AccessRule("GET", "/api/salons/**", PERMIT_ALL),
    AccessRule("GET", "/api/services/**", PERMIT_ALL),
    AccessRule("GET", "/metrics", PERMIT_ALL),
)


class AccessPolicy:
    """Évalue une liste ordonnée de règles; défaut: authentification requise."""

    def __init__(
        self,
        rules: Sequence[AccessRule] = DEFAULT_RULES,
        default: Requirement = AUTHENTICATED,
    ):
        self.rules = tuple(rules)
        self.default = default

    def requirement_for(self, method: str, path: str) -> Requirement:
        """Retourne l'exigence de la première règle correspondante."""
        for rule in self.rules:
            if rule.matches(method, path):
                return rule.requirement
        return self.default


@dataclass(frozen=True)
class Principal:
    """Identité authentifiée attachée à la requête."""

    subject: str
    authorities: frozenset[str]
    token: IdentityToken

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities


class AccessPolicyMiddleware(BaseHTTPMiddleware):
    """Middleware appliquant la politique d'accès avant les routes.

    Rejette en 401 (jeton absent/invalide) ou 403 (authority manquante) avec l'enveloppe
    standard; la requête n'atteint alors jamais la logique métier.
    """

    def __init__(
        self,
        app: ASGIApp,
        verifier: TokenVerifier,
        policy: AccessPolicy | None = None,
        roles_claim: str = DEFAULT_ROLES_CLAIM,
        authority_prefix: str = DEFAULT_AUTHORITY_PREFIX,
    ) -> None:
        """Initialise le middleware avec le vérificateur de jetons et la politique."""
        super().__init__(app)
        self.verifier = verifier
        self.policy = policy or AccessPolicy()
        self.roles_claim = roles_claim
        self.authority_prefix = authority_prefix

    async def dispatch(self, request: Request, call_next):
        """Applique la politique puis délègue au middleware suivant."""
        requirement = self.policy.requirement_for(request.method, request.url.path)
        if requirement.is_public:
            return await call_next(request)

        try:
            raw = parse_bearer(request.headers.get("Authorization"))
            token = await run_in_threadpool(self.verifier.verify, raw)
        except InvalidTokenError as err:
            reason = str(err)
            ACCESS_DENIED.labels(reason="unauthenticated").inc()
            log.info("access_denied", path=request.url.path, reason=reason)
            response = create_error_response(
                HTTP_UNAUTHORIZED, f"Authentification requise: {reason}"
            )
            response.headers["WWW-Authenticate"] = "Bearer"
            return response

        authorities = derive_authorities(token, self.roles_claim, self.authority_prefix)
        if requirement.access is Access.AUTHORITY and requirement.authority not in authorities:
            ACCESS_DENIED.labels(reason="forbidden").inc()
            log.info(
                "access_denied",
                path=request.url.path,
                reason="missing_authority",
                required=requirement.authority,
            )
            return create_error_response(
                HTTP_FORBIDDEN, f"Accès refusé: {requirement.authority} requis"
            )

        request.state.principal = Principal(
            subject=token.subject, authorities=authorities, token=token
        )
        return await call_next(request)
