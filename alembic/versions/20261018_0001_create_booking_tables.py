# mypy: ignore-errors
"""
Migration Alembic initiale: salons, prestations, réservations et profils.

Crée les quatre tables du service avec leurs clés étrangères, l'index de lecture des réservations
par utilisateur et la contrainte d'unicité du sujet externe des profils.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée les tables salons, services, bookings et user_profiles."""
    op.create_table(
        "salons",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
    )
    op.create_table(
        "services",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("salon_id", sa.String(length=36), sa.ForeignKey("salons.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )
    op.create_index("ix_services_salon_id", "services", ["salon_id"])
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("external_subject_id", sa.String(length=255), nullable=False),
        sa.Column("salon_id", sa.String(length=36), sa.ForeignKey("salons.id"), nullable=False),
        sa.Column(
            "service_id", sa.String(length=36), sa.ForeignKey("services.id"), nullable=False
        ),
        sa.Column("datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_bookings_subject_datetime", "bookings", ["external_subject_id", "datetime"]
    )
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("external_subject_id", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("external_subject_id", name="uq_user_profiles_external_subject"),
    )


def downgrade() -> None:
    """Supprime les tables dans l'ordre inverse des dépendances."""
    op.drop_table("user_profiles")
    op.drop_index("ix_bookings_subject_datetime", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_services_salon_id", table_name="services")
    op.drop_table("services")
    op.drop_table("salons")
