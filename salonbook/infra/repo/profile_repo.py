# ============================================================
# Module : salonbook/infra/repo/profile_repo.py
# Objet  : Accès SQL aux profils locaux (unicité du sujet externe).
# ============================================================

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.entities import Role, UserProfile
from .models import UserProfileORM, as_utc


def _to_profile(row: UserProfileORM) -> UserProfile:
    return UserProfile(
        id=row.id,
        external_subject_id=row.external_subject_id,
        role=Role(row.role),
        created_at=as_utc(row.created_at),
    )


class UserProfileRepo:
    """CRUD minimal pour UserProfile."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    def get_by_external_id(self, external_subject_id: str) -> UserProfile | None:
        """Recherche un profil par identifiant de sujet externe."""
        stmt = select(UserProfileORM).where(
            UserProfileORM.external_subject_id == external_subject_id
        )
        row = self._session.execute(stmt).scalars().first()
        return _to_profile(row) if row else None

    def create(
        self, external_subject_id: str, role: Role, created_at: datetime
    ) -> UserProfile:
        """Crée un profil. Lève IntegrityError si le sujet existe déjà.

        Contrainte d'unicité: (external_subject_id). La session est remise dans un état utilisable
        avant la propagation de l'erreur.
        """
        row = UserProfileORM(
            external_subject_id=external_subject_id,
            role=role.value,
            created_at=created_at,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError:
            self._session.rollback()
            raise
        return _to_profile(row)

    def count_for_subject(self, external_subject_id: str) -> int:
        """Nombre de lignes pour un sujet (0 ou 1 par construction)."""
        stmt = select(UserProfileORM.id).where(
            UserProfileORM.external_subject_id == external_subject_id
        )
        return len(self._session.execute(stmt).all())
