"""Ports for fetching state from an external ticket source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ticketsync.domain.model import OrganizerConfig, SourceEvent, SourceItem, SourceOrder


@runtime_checkable
class TicketSource(Protocol):
    """Read-only view of the authoritative ticket-sales system.

    Implementations carry the organizer configuration they were built for, so that
    swapping the source also swaps what gets synced. Snapshots returned by the three
    fetchers are not guaranteed to be consistent with each other.
    """

    @property
    def organizers(self) -> Sequence[OrganizerConfig]: ...

    async def fetch_event(self, org_url: str, token: str, event_id: str) -> SourceEvent:
        """Raise ``SourceNotFoundError`` when ``event_id`` is unknown."""
        ...

    async def fetch_items(self, org_url: str, token: str, event_id: str) -> list[SourceItem]: ...

    async def fetch_orders(self, org_url: str, token: str, event_id: str) -> list[SourceOrder]: ...


__all__ = ["TicketSource"]
