from __future__ import annotations

import asyncio
import os
import signal
import sys
from typing import TYPE_CHECKING

import pytest

from tests.helpers.ticketing import (
    FakeTicketSource,
    RecordingReporter,
    make_event_config,
    make_order,
    make_organizer,
    make_position,
)
from ticketsync.app import build_sync_service, run_sync_once, run_sync_service
from ticketsync.config import SyncConfig
from ticketsync.domain.model import SourceItem
from ticketsync.domain.scheduling import SchedulerState, SyncCycleReport, SyncScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketsync.adapters.sqlalchemy import SqlAlchemyTicketingUnitOfWork


def _source() -> FakeTicketSource:
    event = make_event_config("conf", active_item_ids=("1",))
    return FakeTicketSource(
        organizers=(make_organizer(event),),
        events={"conf": "Conf"},
        items={"conf": [SourceItem("1", "GA")]},
    )


def test_build_returns_none_without_events() -> None:
    source = FakeTicketSource(organizers=(make_organizer(),))

    assert build_sync_service(source=source, reporter=RecordingReporter()) is None


def test_build_wires_scheduler(
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    source = _source()

    scheduler = build_sync_service(
        source=source,
        unit_of_work_factory=sqlite_unit_of_work,
        reporter=RecordingReporter(),
        sync_config=SyncConfig(interval_seconds=12.0),
    )

    assert scheduler is not None
    assert scheduler.source is source
    assert scheduler.interval_seconds == 12.0
    report = asyncio.run(run_sync_once(scheduler))
    assert report.completed
    assert not report.failed_results


def test_run_sync_service_returns_once_stopped(
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    scheduler: SyncScheduler | None = None

    async def stop_after_first(_report: SyncCycleReport) -> None:
        if scheduler is not None:
            scheduler.stop()

    scheduler = build_sync_service(
        source=_source(),
        unit_of_work_factory=sqlite_unit_of_work,
        reporter=RecordingReporter(),
        sync_config=SyncConfig(interval_seconds=0.01),
        listeners=[stop_after_first],
    )
    assert scheduler is not None

    asyncio.run(asyncio.wait_for(run_sync_service(scheduler), timeout=5))

    assert scheduler.state is SchedulerState.STOPPED
    assert scheduler.has_completed_sync


@pytest.mark.skipif(sys.platform == "win32", reason="needs loop signal handlers")
def test_sigterm_stops_the_service_after_the_cycle_commits(
    sqlite_unit_of_work: Callable[[], SqlAlchemyTicketingUnitOfWork],
) -> None:
    source = _source()
    source.orders = {"conf": [make_order("A1", make_position("1", email="a@example.com"))]}
    sent: list[int] = []

    def send_sigterm() -> None:
        if not sent:
            sent.append(signal.SIGTERM)
            os.kill(os.getpid(), signal.SIGTERM)

    source.before_orders = send_sigterm
    source.orders_delay = 0.05
    scheduler = build_sync_service(
        source=source,
        unit_of_work_factory=sqlite_unit_of_work,
        reporter=RecordingReporter(),
        sync_config=SyncConfig(interval_seconds=0.01),
    )
    assert scheduler is not None

    asyncio.run(asyncio.wait_for(run_sync_service(scheduler), timeout=5))

    assert sent == [signal.SIGTERM]
    assert scheduler.state is SchedulerState.STOPPED
    assert scheduler.has_completed_sync
    assert source.calls.count(("orders", "conf")) == 1
    with sqlite_unit_of_work() as uow:
        assert [t.email for t in uow.repositories.tickets.list_active_by_event("1")] == [
            "a@example.com"
        ]
