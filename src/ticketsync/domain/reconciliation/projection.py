"""Project source orders into candidate local ticket records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ticketsync.domain.model import TicketRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ticketsync.domain.model import ItemInfo, SourceOrder

log = getLogger(__name__)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def project_order(
    order: SourceOrder,
    items_by_external_id: Mapping[str, ItemInfo],
    *,
    event_config_id: str,
) -> list[TicketRecord]:
    """Return one ticket per paid position whose item is tracked.

    Positions without an attendee email fall back to the purchaser's address;
    that is logged, since it usually means the attendee question was skipped.
    """

    if not order.is_paid:
        return []

    tickets: list[TicketRecord] = []
    for position in order.positions:
        item = items_by_external_id.get(position.item_id)
        if item is None:
            continue
        if not position.attendee_email:
            log.warning(
                "Order position without attendee email, using purchaser email: "
                "order=%s position=%s",
                order.code,
                position.id,
            )
        email = normalize_email(position.attendee_email or order.purchaser_email)
        if not email:
            log.warning(
                "Skipping order position without any email: order=%s position=%s",
                order.code,
                position.id,
            )
            continue
        full_name = position.attendee_name or order.purchaser_name or ""
        tickets.append(
            TicketRecord(
                email=email,
                full_name=full_name,
                item_info_id=item.id,
                event_config_id=event_config_id,
            )
        )
    return tickets


def project_orders(
    orders: Iterable[SourceOrder],
    items: Iterable[ItemInfo],
    *,
    event_config_id: str,
) -> list[TicketRecord]:
    items_by_external_id = {item.item_id: item for item in items}
    tickets: list[TicketRecord] = []
    for order in orders:
        tickets.extend(
            project_order(order, items_by_external_id, event_config_id=event_config_id)
        )
    return tickets
