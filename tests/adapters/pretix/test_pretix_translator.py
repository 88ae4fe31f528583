from __future__ import annotations

import pytest

from ticketsync.adapters.pretix import PretixItem, PretixOrder, resolve_i18n, translate_item
from ticketsync.adapters.pretix.translator import translate_order


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Plain", "Plain"),
        ({"en": "English", "de": "Deutsch"}, "English"),
        ({"de": "Deutsch"}, "Deutsch"),
        ({"en": "", "fr": "Francais"}, "Francais"),
        ({}, ""),
        (None, ""),
    ],
)
def test_resolve_i18n(value: str | dict[str, str] | None, expected: str) -> None:
    assert resolve_i18n(value) == expected


def test_translate_item_uses_string_ids() -> None:
    item = PretixItem.model_validate({"id": 42, "name": {"en": "GA"}, "default_price": "10.00"})

    assert translate_item(item).id == "42"
    assert translate_item(item).name == "GA"


def test_translate_order_without_invoice_address() -> None:
    order = PretixOrder.model_validate(
        {
            "code": "Q9",
            "status": "n",
            "email": None,
            "positions": [{"id": 7, "item": 3}],
        }
    )

    translated = translate_order(order)

    assert translated.purchaser_email == ""
    assert translated.purchaser_name is None
    assert not translated.is_paid
    assert translated.positions[0].id == 7
    assert translated.positions[0].item_id == "3"
