"""Three-phase reconciliation of one organizer/event pair.

Phases run strictly in order (event info, item catalog, tickets) because that is
the direction local references point in: tickets reference item rows, which
belong to an event. Each phase fetches from the source first and only then opens
a unit of work, so no transaction is held open across network I/O. A failing
phase is logged, reported, and ends the pair's sync for this cycle; writes
committed by earlier phases stand and the next cycle picks up from there.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from ticketsync.domain.errors import InactiveItemConfigurationError
from ticketsync.domain.model import EventInfo, ItemInfo, SourceItem, TicketRecord

from .changeset import ChangeSet, compute_change_set
from .projection import project_orders

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ticketsync.domain.model import EventConfig, OrganizerConfig
    from ticketsync.domain.ports import ErrorReporter, TicketingUnitOfWork, TicketSource

    type UnitOfWorkFactory = Callable[[], TicketingUnitOfWork]

log = getLogger(__name__)

type ItemChangeSet = ChangeSet[ItemInfo, SourceItem]
type TicketChangeSet = ChangeSet[TicketRecord, TicketRecord]


class SyncPhase(StrEnum):
    EVENT = "event"
    ITEMS = "items"
    TICKETS = "tickets"


@dataclass(slots=True)
class EventSyncResult:
    """Outcome of syncing one organizer/event pair during one cycle."""

    organizer_id: str
    org_url: str
    event_config_id: str
    event_id: str
    completed_phases: list[SyncPhase] = field(default_factory=list["SyncPhase"])
    failed_phase: SyncPhase | None = None
    error: BaseException | None = None
    item_changes: ItemChangeSet | None = None
    ticket_changes: TicketChangeSet | None = None

    @property
    def ok(self) -> bool:
        return self.failed_phase is None and self.error is None

    def describe(self) -> str:
        label = f"{self.org_url} event {self.event_id}"
        if not self.ok:
            phase = self.failed_phase or "unknown"
            return f"{label}: failed in {phase} phase ({self.error!r})"
        items = self.item_changes.summary() if self.item_changes else "-"
        tickets = self.ticket_changes.summary() if self.ticket_changes else "-"
        return f"{label}: items[{items}] tickets[{tickets}]"


def _same_item(existing: ItemInfo, desired: SourceItem) -> bool:
    return existing.item_name == desired.name


def _same_ticket(existing: TicketRecord, desired: TicketRecord) -> bool:
    return (
        existing.full_name == desired.full_name
        and existing.item_info_id == desired.item_info_id
    )


@dataclass(slots=True)
class EventReconciler:
    """Bring the local rows of one event into agreement with the source."""

    source: TicketSource
    unit_of_work_factory: UnitOfWorkFactory
    reporter: ErrorReporter

    async def sync(self, organizer: OrganizerConfig, event: EventConfig) -> EventSyncResult:
        result = EventSyncResult(
            organizer_id=organizer.id,
            org_url=organizer.org_url,
            event_config_id=event.id,
            event_id=event.event_id,
        )
        log.info("Syncing %s event %s", organizer.org_url, event.event_id)

        phases: tuple[tuple[SyncPhase, Callable[[], Awaitable[None]]], ...] = (
            (SyncPhase.EVENT, lambda: self.sync_event_info(organizer, event)),
            (SyncPhase.ITEMS, lambda: self._record_items(organizer, event, result)),
            (SyncPhase.TICKETS, lambda: self._record_tickets(organizer, event, result)),
        )
        for phase, run_phase in phases:
            try:
                await run_phase()
            except Exception as exc:  # noqa: BLE001
                log.exception(
                    "Error while syncing %s for %s and %s, skipping remaining phases",
                    phase,
                    organizer.org_url,
                    event.event_id,
                )
                self.reporter.report_error(exc)
                result.failed_phase = phase
                result.error = exc
                return result
            result.completed_phases.append(phase)

        return result

    async def sync_event_info(self, organizer: OrganizerConfig, event: EventConfig) -> None:
        source_event = await self.source.fetch_event(
            organizer.org_url, organizer.token, event.event_id
        )

        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.event_infos
            existing = repository.get_by_event_config(event.id)
            if existing is None:
                log.info("Inserting event info %r for config %s", source_event.name, event.id)
                repository.add(EventInfo(event_config_id=event.id, event_name=source_event.name))
            elif existing.event_name != source_event.name:
                log.info(
                    "Renaming event info for config %s: %r -> %r",
                    event.id,
                    existing.event_name,
                    source_event.name,
                )
                repository.update_name(existing, source_event.name)
            uow.commit()

    async def sync_items(self, organizer: OrganizerConfig, event: EventConfig) -> ItemChangeSet:
        catalog = await self.source.fetch_items(organizer.org_url, organizer.token, event.event_id)

        missing = event.active_item_ids.difference(item.id for item in catalog)
        if missing:
            raise InactiveItemConfigurationError(event.event_id, missing)
        active_items = [item for item in catalog if item.id in event.active_item_ids]

        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.item_infos
            changes = compute_change_set(
                repository.list_by_event(event.id),
                active_items,
                existing_key=lambda row: row.item_id,
                desired_key=lambda item: item.id,
                same=_same_item,
            )
            log.info("Item changes for event %s: %s", event.event_id, changes.summary())

            for item in changes.to_insert:
                log.debug("Inserting item %s %r", item.id, item.name)
                repository.add(
                    ItemInfo(event_config_id=event.id, item_id=item.id, item_name=item.name)
                )
            for update in changes.to_update:
                log.debug(
                    "Renaming item %s: %r -> %r",
                    update.existing.item_id,
                    update.existing.item_name,
                    update.desired.name,
                )
                repository.update_name(update.existing, update.desired.name)
            for row in changes.to_delete:
                retired = uow.repositories.tickets.soft_delete_for_item(row.id)
                log.debug("Deleting item %s, retiring %d tickets", row.item_id, retired)
                repository.delete(row)
            uow.commit()

        return changes

    async def sync_tickets(
        self, organizer: OrganizerConfig, event: EventConfig
    ) -> TicketChangeSet:
        orders = await self.source.fetch_orders(organizer.org_url, organizer.token, event.event_id)

        with self.unit_of_work_factory() as uow:
            items = uow.repositories.item_infos.list_by_event(event.id)
            projected = project_orders(orders, items, event_config_id=event.id)

            repository = uow.repositories.tickets
            changes = compute_change_set(
                repository.list_active_by_event(event.id),
                projected,
                existing_key=lambda ticket: ticket.key,
                desired_key=lambda ticket: ticket.key,
                same=_same_ticket,
            )
            log.info("Ticket changes for event %s: %s", event.event_id, changes.summary())

            for ticket in changes.to_insert:
                log.debug("Inserting ticket %s for item %s", ticket.email, ticket.item_info_id)
                repository.add(ticket)
            for update in changes.to_update:
                log.debug(
                    "Updating ticket %s: %r -> %r",
                    update.existing.email,
                    update.existing.full_name,
                    update.desired.full_name,
                )
                repository.update(
                    update.existing,
                    full_name=update.desired.full_name,
                    item_info_id=update.desired.item_info_id,
                )
            for ticket in changes.to_delete:
                log.debug("Soft-deleting ticket %s for item %s", ticket.email, ticket.item_info_id)
                repository.soft_delete(ticket)
            uow.commit()

        return changes

    async def _record_items(
        self, organizer: OrganizerConfig, event: EventConfig, result: EventSyncResult
    ) -> None:
        result.item_changes = await self.sync_items(organizer, event)

    async def _record_tickets(
        self, organizer: OrganizerConfig, event: EventConfig, result: EventSyncResult
    ) -> None:
        result.ticket_changes = await self.sync_tickets(organizer, event)
