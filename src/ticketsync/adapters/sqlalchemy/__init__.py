"""SQLAlchemy adapter package for ticketsync."""

from __future__ import annotations

from .mappings import (
    event_info_table,
    item_info_table,
    mapper_registry,
    start_mappers,
    ticket_table,
)
from .repositories import (
    SqlAlchemyEventInfoRepository,
    SqlAlchemyItemInfoRepository,
    SqlAlchemyTicketRepository,
)
from .unit_of_work import (
    SqlAlchemyTicketingUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEventInfoRepository",
    "SqlAlchemyItemInfoRepository",
    "SqlAlchemyTicketRepository",
    "SqlAlchemyTicketingUnitOfWork",
    "StartupError",
    "event_info_table",
    "item_info_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "ticket_table",
]
