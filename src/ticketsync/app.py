"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from signal import SIGINT, SIGTERM, Signals
from typing import TYPE_CHECKING

from ticketsync.adapters.pretix import PretixClient
from ticketsync.adapters.reporting import LoggingErrorReporter
from ticketsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyTicketingUnitOfWork,
    is_started,
    startup,
)
from ticketsync.config import get_pretix_config, get_sync_config
from ticketsync.domain.ports.unit_of_work import TicketingUnitOfWork
from ticketsync.domain.scheduling import SyncScheduler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ticketsync.config import SyncConfig
    from ticketsync.domain.ports import ErrorReporter, TicketSource
    from ticketsync.domain.scheduling import CycleListener, SyncCycleReport

UnitOfWorkFactory = Callable[[], TicketingUnitOfWork]


log = getLogger(__name__)

STOP_SIGNALS: tuple[Signals, ...] = (SIGINT, SIGTERM)


def build_sync_service(
    *,
    source: TicketSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reporter: ErrorReporter | None = None,
    sync_config: SyncConfig | None = None,
    listeners: Sequence[CycleListener] = (),
) -> SyncScheduler | None:
    """Wire a scheduler from configured adapters, or ``None`` if nothing is tracked."""

    effective_source = source or PretixClient(config=get_pretix_config())
    pair_count = sum(len(organizer.events) for organizer in effective_source.organizers)
    if pair_count == 0:
        log.warning("No organizer events configured, not starting sync service")
        return None

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyTicketingUnitOfWork

    effective_sync_config = sync_config or get_sync_config()
    log.info(
        "Built sync service: organizers=%d, events=%d, interval=%ss",
        len(effective_source.organizers),
        pair_count,
        effective_sync_config.interval_seconds,
    )
    return SyncScheduler(
        source=effective_source,
        unit_of_work_factory=unit_of_work_factory,
        reporter=reporter or LoggingErrorReporter(),
        interval_seconds=effective_sync_config.interval_seconds,
        listeners=listeners,
    )


async def run_sync_once(scheduler: SyncScheduler) -> SyncCycleReport:
    """Run a single cycle outside the timer loop."""

    return await scheduler.run_cycle()


async def run_sync_service(
    scheduler: SyncScheduler,
    *,
    stop_signals: Sequence[Signals] = STOP_SIGNALS,
) -> None:
    """Run the sync loop until the scheduler is stopped.

    ``stop_signals`` stop the scheduler instead of interrupting it, so a cycle in
    flight when the signal arrives still commits before this returns.
    """

    loop = asyncio.get_running_loop()
    installed: list[Signals] = []
    for signum in stop_signals:
        try:
            loop.add_signal_handler(signum, _request_stop, scheduler, signum)
        except (NotImplementedError, RuntimeError):
            log.debug("Cannot handle %s in this event loop", signum.name)
            continue
        installed.append(signum)

    scheduler.start()
    try:
        await scheduler.wait_stopped()
    finally:
        await scheduler.aclose()
        for signum in installed:
            loop.remove_signal_handler(signum)


def _request_stop(scheduler: SyncScheduler, signum: Signals) -> None:
    log.info("Received %s, finishing the current cycle before exiting", signum.name)
    scheduler.stop()
