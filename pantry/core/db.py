"""Engine, session factory and the scoped storage session used by one import run."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pantry.core.config import settings
from pantry.core.errors import StorageConnectionError
from pantry.core.logging import get_logger
from pantry.models import Base

log = get_logger("db")

_engines: dict[str, Engine] = {}
_session_makers: dict[str, sessionmaker] = {}


def safe_url(database_url: str) -> str:
    """Render a database URL with the password masked."""
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except Exception:  # noqa: BLE001
        return "<invalid database url>"


def get_engine(database_url: str | None = None) -> Engine:
    url = database_url or settings.DATABASE_URL
    engine = _engines.get(url)
    if engine is None:
        try:
            engine = create_engine(url, pool_pre_ping=True)
        except (SQLAlchemyError, ValueError, ImportError) as exc:
            raise StorageConnectionError(f"Cannot create engine for {safe_url(url)}: {exc}") from exc
        _engines[url] = engine
    return engine


def get_session_maker(database_url: str | None = None) -> sessionmaker:
    url = database_url or settings.DATABASE_URL
    maker = _session_makers.get(url)
    if maker is None:
        maker = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=get_engine(url),
            class_=Session,
        )
        _session_makers[url] = maker
    return maker


def init_db(database_url: str | None = None) -> None:
    """Create missing tables. Schema migrations are not managed here."""
    url = database_url or settings.DATABASE_URL
    try:
        Base.metadata.create_all(bind=get_engine(url))
    except SQLAlchemyError as exc:
        raise StorageConnectionError(f"Cannot create tables on {safe_url(url)}: {exc}") from exc


def dispose_engine(database_url: str | None = None) -> None:
    """Close pooled connections for one database and drop it from the cache."""
    url = database_url or settings.DATABASE_URL
    _session_makers.pop(url, None)
    engine = _engines.pop(url, None)
    if engine is not None:
        engine.dispose()
        log.debug(f"Connection pool disposed for {safe_url(url)}")


def reset_engines() -> None:
    """Dispose cached engines (used by tests between databases)."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _session_makers.clear()


def _release(session: Session, *, raise_errors: bool) -> None:
    try:
        session.close()
    except SQLAlchemyError as exc:
        if raise_errors:
            raise StorageConnectionError(f"Failed to release storage session: {exc}") from exc
        log.error(f"Failed to release storage session: {exc}")
    else:
        log.debug("Storage session released")


@contextmanager
def session_scope(database_url: str | None = None) -> Iterator[Session]:
    """Acquire one storage session for a run and always release it.

    The connection is verified up front so an unreachable database is a
    fatal error before any row is read, not a per-row failure.
    """
    url = database_url or settings.DATABASE_URL
    session = get_session_maker(url)()
    try:
        try:
            session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StorageConnectionError(f"Cannot connect to {safe_url(url)}: {exc}") from exc
        log.debug(f"Storage session acquired on {safe_url(url)}")
        yield session
    except BaseException:
        _release(session, raise_errors=False)
        raise
    _release(session, raise_errors=True)
