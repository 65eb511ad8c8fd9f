"""
Jeu de données de démonstration.

Insère trois salons dakarois et leurs prestations si la base ne contient encore aucun salon.
Sans effet sur une base déjà peuplée.
"""

from __future__ import annotations

import structlog
from sqlalchemy.orm import sessionmaker

from salonbook.infra.repo.db import session_scope
from salonbook.infra.repo.salon_repo import SalonRepo

log = structlog.get_logger(__name__)

# (nom, adresse, note, [(prestation, prix, durée en minutes)])
DEMO_SALONS = [
    ("Salon Awa Beauty", "Plateau, Dakar", 4.8, [("Tresses", 8000, 90), ("Nattes", 6000, 60)]),
    ("Chez Ibra - Coiffeur Homme", "Ouakam, Dakar", 4.9, [("Coupe", 2500, 25)]),
    ("Keur Coiff Premium", "Almadies, Dakar", 4.7, [("Brushing", 5000, 45)]),
]


def seed_demo_data(session_factory: sessionmaker) -> bool:
    """Peuple le catalogue si vide. Retourne True si des données ont été insérées."""
    with session_scope(session_factory) as session:
        repo = SalonRepo(session)
        if repo.count_salons() > 0:
            return False
        for name, address, rating, services in DEMO_SALONS:
            salon = repo.add_salon(name, address, rating)
            for service_name, price, duration in services:
                repo.add_service(salon.id, service_name, price, duration)
    log.info("demo_data_seeded", salons=len(DEMO_SALONS))
    return True
