"""Translate Pretix payloads into source records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ticketsync.domain.model import SourceEvent, SourceItem, SourceOrder, SourcePosition

from .schema import resolve_i18n

if TYPE_CHECKING:
    from .schema import PretixEvent, PretixItem, PretixOrder, PretixPosition


def translate_event(payload: PretixEvent) -> SourceEvent:
    return SourceEvent(event_id=payload.slug, name=resolve_i18n(payload.name))


def translate_item(payload: PretixItem) -> SourceItem:
    return SourceItem(id=str(payload.id), name=resolve_i18n(payload.name))


def translate_position(payload: PretixPosition) -> SourcePosition:
    return SourcePosition(
        id=payload.positionid if payload.positionid is not None else payload.id,
        item_id=str(payload.item),
        attendee_name=payload.attendee_name or None,
        attendee_email=payload.attendee_email or None,
    )


def translate_order(payload: PretixOrder) -> SourceOrder:
    purchaser_name = payload.invoice_address.name if payload.invoice_address else None
    return SourceOrder(
        code=payload.code,
        status=payload.status,
        purchaser_email=payload.email or "",
        purchaser_name=purchaser_name or None,
        positions=tuple(translate_position(position) for position in payload.positions),
    )
