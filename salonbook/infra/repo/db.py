"""DB utilities for SQLAlchemy sessions/engine.

Uses `DATABASE_URL` env var or falls back to `sqlite+pysqlite:///:memory:` for tests.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from salonbook.domain.errors import StorageError

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"
SHARED_CONNECTION_LOCK = "shared_connection_lock"


def get_engine(url: str | None = None) -> Engine:
    """Crée un moteur SQLAlchemy à partir de l'URL de base de données."""
    db_url = url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    kwargs: dict = {}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # Une base mémoire n'existe que sur sa connexion: on la partage.
        if ":memory:" in db_url or db_url.rstrip("/").endswith("sqlite:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(db_url, future=True, echo=False, **kwargs)


def get_session_factory(engine: Engine) -> sessionmaker:
    """Crée une factory de sessions SQLAlchemy.

    Sur une base mémoire (`StaticPool`), toutes les sessions partagent une seule connexion: un
    verrou commun, transmis via `Session.info`, sérialise alors les `session_scope`.
    """
    info = {}
    if isinstance(engine.pool, StaticPool):
        info[SHARED_CONNECTION_LOCK] = threading.RLock()
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, info=info)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Contexte de session SQLAlchemy avec gestion automatique des transactions.

    Commit en sortie normale, rollback sinon. Toute `SQLAlchemyError` non traitée par l'appelant
    est convertie en `StorageError` (pas de rejeu).
    """
    session = factory()
    lock = session.info.get(SHARED_CONNECTION_LOCK) or nullcontext()
    with lock:
        try:
            yield session
            session.commit()
        except SQLAlchemyError as err:
            session.rollback()
            raise StorageError(str(err)) from err
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
