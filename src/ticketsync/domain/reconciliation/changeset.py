"""Key-based diff between stored rows and freshly fetched source state.

The change-set is the contract between the fetch and the apply half of a sync
phase: it names what to insert, what to update in place, and what to delete, and
nothing else. Identity is always a caller-supplied key, never list position, so
the result does not depend on the order the source returned its data in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable


@dataclass(frozen=True, slots=True)
class Update[TExisting, TDesired]:
    """An existing row whose payload differs from its desired counterpart."""

    existing: TExisting
    desired: TDesired


@dataclass(frozen=True, slots=True)
class ChangeSet[TExisting, TDesired]:
    to_insert: tuple[TDesired, ...] = ()
    to_update: tuple[Update[TExisting, TDesired], ...] = ()
    to_delete: tuple[TExisting, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.to_insert or self.to_update or self.to_delete)

    def summary(self) -> str:
        return (
            f"insert={len(self.to_insert)}, update={len(self.to_update)}, "
            f"delete={len(self.to_delete)}"
        )


def compute_change_set[TExisting, TDesired, TKey: Hashable](
    existing: Iterable[TExisting],
    desired: Iterable[TDesired],
    *,
    existing_key: Callable[[TExisting], TKey],
    desired_key: Callable[[TDesired], TKey],
    same: Callable[[TExisting, TDesired], bool],
) -> ChangeSet[TExisting, TDesired]:
    """Diff ``existing`` against ``desired``.

    Inserts and updates follow the order of ``desired``; deletes follow the order
    of ``existing``. When several desired entries share a key the last one wins,
    so the result never asks for two rows with the same identity.
    """

    existing_by_key: dict[TKey, TExisting] = {}
    for entity in existing:
        existing_by_key.setdefault(existing_key(entity), entity)

    desired_by_key: dict[TKey, TDesired] = {}
    for entity in desired:
        desired_by_key[desired_key(entity)] = entity

    to_insert: list[TDesired] = []
    to_update: list[Update[TExisting, TDesired]] = []
    for key, wanted in desired_by_key.items():
        current = existing_by_key.get(key)
        if current is None:
            to_insert.append(wanted)
        elif not same(current, wanted):
            to_update.append(Update(existing=current, desired=wanted))

    to_delete = [
        entity for key, entity in existing_by_key.items() if key not in desired_by_key
    ]

    return ChangeSet(
        to_insert=tuple(to_insert),
        to_update=tuple(to_update),
        to_delete=tuple(to_delete),
    )
