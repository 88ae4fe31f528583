"""SQLAlchemy-backed unit of work for the ticketing tables.

The adapter owns one engine per process. ``startup`` creates it, brings the
schema to the latest migration, and prepares the session factory every unit of
work draws from; ``shutdown`` disposes it again.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ticketsync.adapters.sqlalchemy.mappings import start_mappers
from ticketsync.adapters.sqlalchemy.migrations import upgrade_head
from ticketsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyEventInfoRepository,
    SqlAlchemyItemInfoRepository,
    SqlAlchemyTicketRepository,
)
from ticketsync.config.storage import DatabaseConfig, get_database_config
from ticketsync.domain.ports.unit_of_work import TicketingRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before ``startup`` or misused."""


@dataclass(slots=True)
class _EngineState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_STATE = _EngineState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Create (or adopt) the engine, migrate the schema, and prepare sessions."""

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already initialised. Pass force=True to reconfigure.")

    if engine is None:
        database = DatabaseConfig(uri=database_uri) if database_uri else get_database_config()
        engine = create_engine(database.uri, echo=database.echo)
    start_mappers()
    upgrade_head(engine=engine)

    _STATE.engine = engine
    _STATE.sessions = sessionmaker(bind=engine, expire_on_commit=False)
    log.info("Ticket store ready at %s", engine.url.render_as_string(hide_password=True))
    return engine


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.sessions = None


def _session_factory() -> sessionmaker[Session]:
    if _STATE.sessions is None:
        raise StartupError(
            "SQLAlchemy adapter not initialised. Call "
            "ticketsync.adapters.sqlalchemy.startup() before opening a unit of work."
        )
    return _STATE.sessions


class SqlAlchemyTicketingUnitOfWork:
    """One session and transaction over event info, item info, and ticket rows.

    Leaving the ``with`` block without ``commit()`` discards pending changes.
    """

    def __init__(self) -> None:
        self._sessions = _session_factory()
        self._session: Session | None = None
        self._repositories: TicketingRepositories | None = None

    def __enter__(self) -> SqlAlchemyTicketingUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already open")
        session = self._sessions()
        self._session = session
        self._repositories = TicketingRepositories(
            event_infos=SqlAlchemyEventInfoRepository(session),
            item_infos=SqlAlchemyItemInfoRepository(session),
            tickets=SqlAlchemyTicketRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not open")
        return self._session

    @property
    def repositories(self) -> TicketingRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from ticketsync.domain.ports.unit_of_work import TicketingUnitOfWork

    _uow_check: TicketingUnitOfWork = SqlAlchemyTicketingUnitOfWork()
