"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from ticketsync.adapters.sqlalchemy.mappings import (
    event_info_table,
    item_info_table,
    ticket_table,
)
from ticketsync.domain.model import EventInfo, ItemInfo, TicketRecord

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyEventInfoRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_event_config(self, event_config_id: str) -> EventInfo | None:
        stmt = select(EventInfo).where(event_info_table.c.event_config_id == event_config_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def add(self, entity: EventInfo) -> None:
        self.session.add(entity)

    def update_name(self, entity: EventInfo, event_name: str) -> None:
        entity.event_name = event_name


class SqlAlchemyItemInfoRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_by_event(self, event_config_id: str) -> list[ItemInfo]:
        stmt = (
            select(ItemInfo)
            .where(item_info_table.c.event_config_id == event_config_id)
            .order_by(item_info_table.c.item_id)
        )
        return list(self.session.execute(stmt).scalars())

    def add(self, entity: ItemInfo) -> None:
        self.session.add(entity)

    def update_name(self, entity: ItemInfo, item_name: str) -> None:
        entity.item_name = item_name

    def delete(self, entity: ItemInfo) -> None:
        self.session.delete(entity)


class SqlAlchemyTicketRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active_by_event(self, event_config_id: str) -> list[TicketRecord]:
        stmt = (
            select(TicketRecord)
            .where(ticket_table.c.event_config_id == event_config_id)
            .where(ticket_table.c.is_deleted.is_(False))
            .order_by(ticket_table.c.email)
        )
        return list(self.session.execute(stmt).scalars())

    def add(self, entity: TicketRecord) -> TicketRecord:
        stmt = (
            select(TicketRecord)
            .where(ticket_table.c.email == entity.email)
            .where(ticket_table.c.item_info_id == entity.item_info_id)
            .limit(1)
        )
        previous = self.session.execute(stmt).scalar_one_or_none()
        if previous is None:
            self.session.add(entity)
            return entity
        # (email, item) is unique, so a re-appearing ticket revives its old row
        previous.is_deleted = False
        previous.full_name = entity.full_name
        previous.event_config_id = entity.event_config_id
        return previous

    def update(
        self, entity: TicketRecord, *, full_name: str, item_info_id: UUID | None
    ) -> None:
        entity.full_name = full_name
        entity.item_info_id = item_info_id

    def soft_delete(self, entity: TicketRecord) -> None:
        entity.is_deleted = True

    def soft_delete_for_item(self, item_info_id: UUID) -> int:
        stmt = select(TicketRecord).where(ticket_table.c.item_info_id == item_info_id)
        retired = 0
        for ticket in self.session.execute(stmt).scalars():
            if not ticket.is_deleted:
                ticket.is_deleted = True
                retired += 1
            ticket.item_info_id = None
        # detach before the item row itself is deleted in the same transaction
        self.session.flush()
        return retired


if TYPE_CHECKING:
    from ticketsync.domain.ports.persistence import (
        EventInfoRepository,
        ItemInfoRepository,
        TicketRepository,
    )

    _session_stub = cast("Session", object())
    _event_repo: EventInfoRepository = SqlAlchemyEventInfoRepository(_session_stub)
    _item_repo: ItemInfoRepository = SqlAlchemyItemInfoRepository(_session_stub)
    _ticket_repo: TicketRepository = SqlAlchemyTicketRepository(_session_stub)
