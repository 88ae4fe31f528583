"""SQLAlchemy mapping metadata for the local ticketing tables."""

from __future__ import annotations

import uuid
from functools import cache

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    false,
    orm,
)
from sqlalchemy.orm import configure_mappers

from ticketsync.domain.model import EventInfo, ItemInfo, TicketRecord

UUIDColumnType = Uuid[uuid.UUID]

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

event_info_table = Table(
    "event_info",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_config_id", String, nullable=False, unique=True),
    Column("event_name", String, nullable=False),
)

item_info_table = Table(
    "item_info",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_config_id", String, nullable=False),
    Column("item_id", String, nullable=False),
    Column("item_name", String, nullable=False),
    UniqueConstraint("event_config_id", "item_id"),
    Index(None, "event_config_id"),
)

ticket_table = Table(
    "ticket",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("email", String, nullable=False),
    Column("full_name", String, nullable=False, default=""),
    Column(
        "item_info_id",
        UUIDColumnType,
        ForeignKey("item_info.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("event_config_id", String, nullable=False),
    Column("is_deleted", Boolean, nullable=False, default=False, server_default=false()),
    UniqueConstraint("email", "item_info_id"),
    Index(None, "event_config_id", "is_deleted"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain rows onto their tables. Safe to call repeatedly."""

    mapper_registry.map_imperatively(EventInfo, event_info_table)
    mapper_registry.map_imperatively(ItemInfo, item_info_table)
    mapper_registry.map_imperatively(TicketRecord, ticket_table)

    configure_mappers()
    return mapper_registry

