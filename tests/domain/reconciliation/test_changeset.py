from __future__ import annotations

from dataclasses import dataclass

from ticketsync.domain.reconciliation import ChangeSet, Update, compute_change_set


@dataclass(frozen=True)
class Row:
    key: str
    value: str


def _diff(existing: list[Row], desired: list[Row]) -> ChangeSet[Row, Row]:
    return compute_change_set(
        existing,
        desired,
        existing_key=lambda row: row.key,
        desired_key=lambda row: row.key,
        same=lambda current, wanted: current.value == wanted.value,
    )


def test_change_set_partitions_by_key() -> None:
    a1, b1 = Row("A", "v1"), Row("B", "v1")
    a2, c1 = Row("A", "v2"), Row("C", "v1")

    changes = _diff([a1, b1], [a2, c1])

    assert changes.to_update == (Update(existing=a1, desired=a2),)
    assert changes.to_insert == (c1,)
    assert changes.to_delete == (b1,)
    assert changes.summary() == "insert=1, update=1, delete=1"


def test_unchanged_rows_produce_empty_change_set() -> None:
    rows = [Row("A", "v1"), Row("B", "v2")]

    changes = _diff(rows, [Row("B", "v2"), Row("A", "v1")])

    assert changes.is_empty
    assert changes.summary() == "insert=0, update=0, delete=0"


def test_change_set_ignores_source_ordering() -> None:
    existing = [Row("A", "v1"), Row("B", "v1"), Row("C", "v1")]
    desired = [Row("C", "v1"), Row("D", "v1"), Row("A", "v1")]

    forward = _diff(existing, desired)
    backward = _diff(list(reversed(existing)), list(reversed(desired)))

    assert set(forward.to_insert) == set(backward.to_insert) == {Row("D", "v1")}
    assert set(forward.to_delete) == set(backward.to_delete) == {Row("B", "v1")}
    assert forward.to_update == backward.to_update == ()


def test_duplicate_desired_keys_keep_the_last_entry() -> None:
    changes = _diff([Row("A", "v1")], [Row("A", "v2"), Row("A", "v3"), Row("B", "x"), Row("B", "y")])

    assert changes.to_update == (Update(existing=Row("A", "v1"), desired=Row("A", "v3")),)
    assert changes.to_insert == (Row("B", "y"),)
    assert changes.to_delete == ()


def test_everything_is_inserted_into_an_empty_store() -> None:
    desired = [Row("A", "v1"), Row("B", "v1")]

    changes = _diff([], desired)

    assert changes.to_insert == tuple(desired)
    assert not changes.to_update
    assert not changes.to_delete
