from salonbook.core.settings import Settings, get_settings
from salonbook.domain.auth import TokenVerifier
from salonbook.domain.bookings import BookingWorkflow
from salonbook.domain.catalog import SalonCatalog
from salonbook.domain.entities import Role
from salonbook.domain.profiles import ProfileDirectory
from salonbook.infra.repo.db import get_engine, get_session_factory
from salonbook.infra.repo.models import Base


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL)
        if self.settings.DB_CREATE_ALL:
            Base.metadata.create_all(self.engine)
        self.session_factory = get_session_factory(self.engine)

        self.token_verifier = TokenVerifier(self.settings)
        self.catalog = SalonCatalog(self.session_factory)
        self.profiles = ProfileDirectory(
            self.session_factory, default_role=Role(self.settings.DEFAULT_PROFILE_ROLE)
        )
        self.bookings = BookingWorkflow(
            self.session_factory,
            enforce_service_salon_match=self.settings.ENFORCE_SERVICE_SALON_MATCH,
        )

    def dispose(self) -> None:
        """Libère les connexions du moteur."""
        self.engine.dispose()


container = Container()
"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, services métier, vérificateur de jetons)
et expose un singleton `container` utilisé par défaut par `create_app`.
"""
