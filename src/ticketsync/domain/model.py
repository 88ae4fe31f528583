"""Domain model: sync configuration, external snapshots, and local rows.

Three families of types live here:

- configuration (``OrganizerConfig``/``EventConfig``), immutable and loaded once;
- source records (``Source*``), read-only snapshots produced by a ticket source;
- local rows (``EventInfo``/``ItemInfo``/``TicketRecord``), mapped by the
  persistence adapter and mutated only by the reconciler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


class OrderStatus(StrEnum):
    """Pretix order status codes."""

    PENDING = "n"
    PAID = "p"
    EXPIRED = "e"
    CANCELED = "c"


# Configuration ----------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class EventConfig:
    """One tracked event of an organizer."""

    id: str
    event_id: str
    active_item_ids: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True, kw_only=True)
class OrganizerConfig:
    """Credentials and tracked events for one organizer account."""

    id: str
    org_url: str
    token: str = field(repr=False)
    events: tuple[EventConfig, ...] = ()


# Source snapshots ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceEvent:
    event_id: str
    name: str


@dataclass(frozen=True, slots=True)
class SourceItem:
    id: str
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class SourcePosition:
    id: int
    item_id: str
    attendee_name: str | None = None
    attendee_email: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceOrder:
    code: str
    status: str
    purchaser_email: str
    purchaser_name: str | None = None
    positions: tuple[SourcePosition, ...] = ()

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID


# Local rows -----------------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class EventInfo:
    """Display metadata of a tracked event, one row per event config."""

    event_config_id: str
    event_name: str
    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class ItemInfo:
    """An active catalog item of a tracked event."""

    event_config_id: str
    item_id: str
    item_name: str
    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class TicketRecord:
    """A ticket held by ``email`` for one item.

    Rows are never removed: a ticket that disappears from the source is marked
    ``is_deleted``. ``item_info_id`` is cleared by storage when the owning item
    stops being tracked.
    """

    email: str
    full_name: str
    item_info_id: UUID | None
    event_config_id: str
    is_deleted: bool = False
    id: UUID = field(default_factory=new_id)

    @property
    def key(self) -> tuple[str, UUID | None]:
        return (self.email, self.item_info_id)
