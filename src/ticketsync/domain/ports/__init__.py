"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import TicketSource
from .persistence import EventInfoRepository, ItemInfoRepository, TicketRepository
from .reporting import ErrorReporter
from .unit_of_work import (
    RepositoryCollection,
    TicketingRepositories,
    TicketingUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ErrorReporter",
    "EventInfoRepository",
    "ItemInfoRepository",
    "RepositoryCollection",
    "TicketRepository",
    "TicketSource",
    "TicketingRepositories",
    "TicketingUnitOfWork",
    "UnitOfWork",
]
