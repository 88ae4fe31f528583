"""Periodic sync loop over every configured organizer/event pair.

The scheduler behaves like a self re-arming timer: a cycle runs, and only once it
has settled (successfully or not) is the next one scheduled ``interval_seconds``
later. Cycles therefore never overlap, and a slow source stretches the period
instead of piling up work.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from ticketsync.domain.reconciliation import EventReconciler, EventSyncResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ticketsync.domain.model import EventConfig, OrganizerConfig
    from ticketsync.domain.ports import ErrorReporter, TicketingUnitOfWork, TicketSource

    type CycleListener = Callable[[SyncCycleReport], Awaitable[None]]

log = getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class SyncStatus(StrEnum):
    NOT_SYNCED = "not_synced"
    SYNCED = "synced"


@dataclass(slots=True)
class SyncCycleReport:
    """Outcome of one sync cycle across all pairs."""

    started_at: datetime
    finished_at: datetime | None = None
    duration_seconds: float = 0.0
    results: list[EventSyncResult] = field(default_factory=list["EventSyncResult"])
    error: BaseException | None = None

    @property
    def completed(self) -> bool:
        """Whether the cycle ran to the end without a top-level failure."""
        return self.error is None

    @property
    def failed_results(self) -> list[EventSyncResult]:
        return [result for result in self.results if not result.ok]


class SyncScheduler:
    """Owns the sync loop, the current ticket source, and readiness state."""

    def __init__(
        self,
        *,
        source: TicketSource,
        unit_of_work_factory: Callable[[], TicketingUnitOfWork],
        reporter: ErrorReporter,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        listeners: Sequence[CycleListener] = (),
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._unit_of_work_factory = unit_of_work_factory
        self._reporter = reporter
        self._interval_seconds = interval_seconds
        self._listeners = tuple(listeners)

        self._state = SchedulerState.IDLE
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: asyncio.Task[None] | None = None
        self._stopped = asyncio.Event()
        self._has_completed_sync = False
        self._last_report: SyncCycleReport | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def source(self) -> TicketSource:
        return self._source

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def has_completed_sync(self) -> bool:
        return self._has_completed_sync

    @property
    def status(self) -> SyncStatus:
        return SyncStatus.SYNCED if self._has_completed_sync else SyncStatus.NOT_SYNCED

    @property
    def last_report(self) -> SyncCycleReport | None:
        return self._last_report

    # Loop control -----------------------------------------------------------------

    def start(self) -> None:
        """Run a cycle now and keep re-arming after each one. Needs a running loop."""

        if self._state is SchedulerState.RUNNING:
            log.warning("Sync loop already running")
            return
        loop = asyncio.get_running_loop()
        self._state = SchedulerState.RUNNING
        self._generation += 1
        self._stopped.clear()
        log.info("Starting sync loop, interval=%ss", self._interval_seconds)
        loop.call_soon(self._launch, self._generation)

    def stop(self) -> None:
        """Cancel the pending timer. A cycle already in flight runs to completion."""

        self._disarm()
        if self._state is SchedulerState.RUNNING:
            log.info("Stopping sync loop")
            self._state = SchedulerState.STOPPED
        self._stopped.set()

    def replace_source(self, source: TicketSource) -> None:
        """Swap the ticket source; a running loop restarts against the new one.

        The loop stays running throughout, so ``wait_stopped`` callers are not woken.
        """

        self._source = source
        self._has_completed_sync = False
        log.info("Ticket source replaced")

        if self._state is SchedulerState.RUNNING:
            self._disarm()
            asyncio.get_running_loop().call_soon(self._launch, self._generation)

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # a timer or task from an older generation must not re-arm
        self._generation += 1

    async def wait_stopped(self) -> None:
        await self._stopped.wait()

    async def wait_idle(self) -> None:
        """Wait for the cycle currently in flight, if any."""

        task = self._in_flight
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def aclose(self) -> None:
        self.stop()
        await self.wait_idle()

    def _launch(self, generation: int) -> None:
        if self._state is not SchedulerState.RUNNING or generation != self._generation:
            return
        self._timer = None
        previous = self._in_flight
        self._in_flight = asyncio.get_running_loop().create_task(
            self._run_and_rearm(generation, previous)
        )

    async def _run_and_rearm(self, generation: int, previous: asyncio.Task[None] | None) -> None:
        # a restart must not overlap a cycle that was in flight when stop() was called
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        try:
            await self.run_cycle()
        finally:
            if self._state is SchedulerState.RUNNING and generation == self._generation:
                self._timer = asyncio.get_running_loop().call_later(
                    self._interval_seconds, self._launch, generation
                )

    # Cycle ----------------------------------------------------------------------------

    async def run_cycle(self) -> SyncCycleReport:
        """Sync every configured pair once and return the cycle report."""

        source = self._source
        report = SyncCycleReport(started_at=datetime.now(tz=UTC))
        started = time.monotonic()
        log.info("Sync start")

        try:
            report.results = await self._sync_all(source)
            for listener in self._listeners:
                await listener(report)
        except Exception as exc:  # noqa: BLE001
            log.exception("Sync cycle failed")
            self._reporter.report_error(exc)
            report.error = exc
        else:
            if source is self._source:
                self._has_completed_sync = True
        finally:
            report.finished_at = datetime.now(tz=UTC)
            report.duration_seconds = time.monotonic() - started

        failed = report.failed_results
        log.info(
            "Sync end. Completed in %d seconds: %d pairs, %d failed",
            int(report.duration_seconds),
            len(report.results),
            len(failed),
        )
        for result in report.results:
            log.info("  %s", result.describe())

        self._last_report = report
        return report

    async def _sync_all(self, source: TicketSource) -> list[EventSyncResult]:
        reconciler = EventReconciler(
            source=source,
            unit_of_work_factory=self._unit_of_work_factory,
            reporter=self._reporter,
        )
        pairs: list[tuple[OrganizerConfig, EventConfig]] = [
            (organizer, event) for organizer in source.organizers for event in organizer.events
        ]
        outcomes = await asyncio.gather(
            *(reconciler.sync(organizer, event) for organizer, event in pairs),
            return_exceptions=True,
        )

        results: list[EventSyncResult] = []
        for (organizer, event), outcome in zip(pairs, outcomes, strict=True):
            if isinstance(outcome, EventSyncResult):
                results.append(outcome)
                continue
            if not isinstance(outcome, Exception):
                raise outcome
            log.error(
                "Failed to save tickets for %s event %s: %r",
                organizer.org_url,
                event.event_id,
                outcome,
            )
            self._reporter.report_error(outcome)
            results.append(
                EventSyncResult(
                    organizer_id=organizer.id,
                    org_url=organizer.org_url,
                    event_config_id=event.id,
                    event_id=event.event_id,
                    error=outcome,
                )
            )
        return results
