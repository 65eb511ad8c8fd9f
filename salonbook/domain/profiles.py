"""
Annuaire des profils locaux.

Associe un sujet du fournisseur d'identité à un profil applicatif, créé à la première requête
authentifiée. La création est sûre en concurrence: la contrainte d'unicité sur le sujet externe
arbitre les insertions simultanées, le perdant relit la ligne gagnante.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from salonbook.app.metrics import PROFILES_CREATED
from salonbook.domain.entities import Role, UserProfile
from salonbook.domain.errors import StorageError
from salonbook.infra.repo.db import session_scope
from salonbook.infra.repo.profile_repo import UserProfileRepo

log = structlog.get_logger(__name__)


class ProfileDirectory:
    """Résout ou crée le profil local d'un sujet externe."""

    def __init__(self, session_factory: sessionmaker, default_role: Role = Role.CLIENT):
        """Initialise l'annuaire.

        Paramètres:
        - session_factory: fabrique de sessions SQLAlchemy.
        - default_role: rôle attribué aux nouveaux profils.
        """
        self._factory = session_factory
        self.default_role = default_role

    def get_or_create(self, external_subject_id: str) -> UserProfile:
        """Retourne le profil du sujet, en le créant s'il n'existe pas encore.

        Au plus un profil par sujet, même avec N premières requêtes concurrentes.
        """
        with session_scope(self._factory) as session:
            repo = UserProfileRepo(session)
            existing = repo.get_by_external_id(external_subject_id)
            if existing:
                return existing
            try:
                profile = repo.create(
                    external_subject_id, self.default_role, datetime.now(UTC)
                )
            except IntegrityError:
                # Insertion concurrente gagnante: on relit sa ligne.
                winner = repo.get_by_external_id(external_subject_id)
                if winner is None:
                    raise StorageError(
                        f"profile insert conflict without row: {external_subject_id}"
                    ) from None
                log.info("profile_race_resolved", profile_id=winner.id)
                return winner
        PROFILES_CREATED.inc()
        log.info("profile_created", profile_id=profile.id, role=profile.role.value)
        return profile
