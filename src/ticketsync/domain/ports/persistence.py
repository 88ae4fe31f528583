"""Ports for persisting local ticketing rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from ticketsync.domain.model import EventInfo, ItemInfo, TicketRecord


@runtime_checkable
class EventInfoRepository(Protocol):
    def get_by_event_config(self, event_config_id: str) -> EventInfo | None: ...

    def add(self, entity: EventInfo) -> None: ...

    def update_name(self, entity: EventInfo, event_name: str) -> None: ...


@runtime_checkable
class ItemInfoRepository(Protocol):
    def list_by_event(self, event_config_id: str) -> list[ItemInfo]: ...

    def add(self, entity: ItemInfo) -> None: ...

    def update_name(self, entity: ItemInfo, item_name: str) -> None: ...

    def delete(self, entity: ItemInfo) -> None: ...


@runtime_checkable
class TicketRepository(Protocol):
    def list_active_by_event(self, event_config_id: str) -> list[TicketRecord]:
        """Return the non-deleted tickets of an event."""
        ...

    def add(self, entity: TicketRecord) -> TicketRecord:
        """Insert a ticket, reviving a soft-deleted row with the same (email, item)."""
        ...

    def update(
        self, entity: TicketRecord, *, full_name: str, item_info_id: UUID | None
    ) -> None: ...

    def soft_delete(self, entity: TicketRecord) -> None: ...

    def soft_delete_for_item(self, item_info_id: UUID) -> int:
        """Soft-delete every live ticket owned by an item, returning the count."""
        ...
