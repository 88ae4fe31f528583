"""Domain error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class SourceError(RuntimeError):
    """Raised when a ticket source cannot produce a usable snapshot."""


class SourceNotFoundError(SourceError):
    """Raised when the source does not know the requested event."""

    def __init__(self, org_url: str, event_id: str) -> None:
        super().__init__(f"Event {event_id!r} not found at {org_url}")
        self.org_url = org_url
        self.event_id = event_id


class InactiveItemConfigurationError(RuntimeError):
    """Raised when configured active items are missing from the source catalog."""

    def __init__(self, event_id: str, missing_item_ids: Iterable[str]) -> None:
        self.event_id = event_id
        self.missing_item_ids = tuple(sorted(missing_item_ids))
        missing = ", ".join(self.missing_item_ids)
        super().__init__(
            f"Active items of event {event_id!r} no longer exist in the source catalog: {missing}"
        )
