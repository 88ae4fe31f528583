"""Pretix REST API response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type I18nString = str | dict[str, str]

DEFAULT_LANGUAGE = "en"


def resolve_i18n(value: I18nString | None, *, language: str = DEFAULT_LANGUAGE) -> str:
    """Pick ``language`` from a multilingual Pretix string, else the first non-empty one."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    preferred = value.get(language)
    if preferred:
        return preferred
    for text in value.values():
        if text:
            return text
    return ""


class PretixBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[tuple[str, str]]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        model = type(self).__name__
        new_keys = {key for key in extras if (model, key) not in self._logged_extra_keys}
        if not new_keys:
            return
        self._logged_extra_keys.update((model, key) for key in new_keys)
        log.debug(
            "Pretix %s: unmodeled keys: %s",
            model,
            ", ".join(sorted(new_keys)),
        )


class PretixEvent(PretixBaseModel):
    slug: str
    name: I18nString


class PretixItem(PretixBaseModel):
    id: int
    name: I18nString
    active: bool = True


class PretixInvoiceAddress(PretixBaseModel):
    name: str | None = None
    company: str | None = None


class PretixPosition(PretixBaseModel):
    id: int
    positionid: int | None = None
    item: int
    attendee_name: str | None = None
    attendee_email: str | None = None


class PretixOrder(PretixBaseModel):
    code: str
    status: str
    email: str | None = None
    invoice_address: PretixInvoiceAddress | None = None
    positions: list[PretixPosition] = Field(default_factory=list["PretixPosition"])


class PretixPage(PretixBaseModel):
    """Pagination envelope shared by Pretix list endpoints."""

    count: int | None = None
    next: str | None = None
    previous: str | None = None


class PretixItemPage(PretixPage):
    results: list[PretixItem] = Field(default_factory=list["PretixItem"])


class PretixOrderPage(PretixPage):
    results: list[PretixOrder] = Field(default_factory=list["PretixOrder"])
