"""Public interface for the Pretix adapter."""

from __future__ import annotations

from .client import PretixAPIError, PretixClient
from .schema import PretixEvent, PretixItem, PretixOrder, PretixPosition, resolve_i18n
from .translator import translate_event, translate_item, translate_order

__all__ = [
    "PretixAPIError",
    "PretixClient",
    "PretixEvent",
    "PretixItem",
    "PretixOrder",
    "PretixPosition",
    "resolve_i18n",
    "translate_event",
    "translate_item",
    "translate_order",
]
