"""HTTP client for the Pretix REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError

from ticketsync.adapters.http_resilience import ResilientClient
from ticketsync.domain.errors import SourceError, SourceNotFoundError

from .schema import PretixEvent, PretixItemPage, PretixOrderPage
from .translator import translate_event, translate_item, translate_order

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ticketsync.config.http_resilience import ResilienceConfig
    from ticketsync.config.pretix import PretixConfig
    from ticketsync.domain.model import OrganizerConfig, SourceEvent, SourceItem, SourceOrder

log = getLogger(__name__)

MAX_PAGES = 1000


class PretixAPIError(SourceError):
    """Raised when the Pretix API returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _event_url(org_url: str, event_id: str) -> str:
    return f"{org_url.rstrip('/')}/events/{event_id}/"


class PretixClient:
    """Ticket source backed by the Pretix REST API.

    Each fetch opens its own resilient client, so concurrent fetches for different
    events share nothing but configuration.
    """

    def __init__(
        self,
        *,
        config: PretixConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    @property
    def organizers(self) -> Sequence[OrganizerConfig]:
        return self._config.organizers

    async def fetch_event(self, org_url: str, token: str, event_id: str) -> SourceEvent:
        url = _event_url(org_url, event_id)
        async with self._client_factory(self._resilience) as client:
            response = await client.get(url, headers=_auth_headers(token))
            if response.status_code == httpx.codes.NOT_FOUND:
                raise SourceNotFoundError(org_url, event_id)
            payload = _json_object(response)
        return translate_event(_validate(PretixEvent, payload, url))

    async def fetch_items(self, org_url: str, token: str, event_id: str) -> list[SourceItem]:
        url = f"{_event_url(org_url, event_id)}items/"
        pages = await self._fetch_pages(url, token, PretixItemPage)
        return [translate_item(item) for page in pages for item in page.results]

    async def fetch_orders(self, org_url: str, token: str, event_id: str) -> list[SourceOrder]:
        url = f"{_event_url(org_url, event_id)}orders/"
        pages = await self._fetch_pages(url, token, PretixOrderPage)
        orders = [translate_order(order) for page in pages for order in page.results]
        log.debug("Fetched %d orders for %s", len(orders), event_id)
        return orders

    async def _fetch_pages[TPage: (PretixItemPage, PretixOrderPage)](
        self,
        url: str,
        token: str,
        page_model: type[TPage],
    ) -> list[TPage]:
        pages: list[TPage] = []
        next_url: str | None = url
        async with self._client_factory(self._resilience) as client:
            while next_url is not None:
                if len(pages) >= MAX_PAGES:
                    raise PretixAPIError(f"Pagination of {url} exceeded {MAX_PAGES} pages")
                response = await client.get(next_url, headers=_auth_headers(token))
                page = _validate(page_model, _json_object(response), next_url)
                pages.append(page)
                next_url = page.next
        return pages


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Token {token}", "Accept": "application/json"}


def _json_object(response: httpx.Response) -> dict[str, object]:
    response.raise_for_status()
    try:
        payload = response.json()
    except ValueError as exc:
        raise PretixAPIError(
            f"Pretix returned a non-JSON body for {response.request.url}",
            status_code=response.status_code,
        ) from exc
    if not isinstance(payload, dict):
        raise PretixAPIError(
            f"Unexpected Pretix response payload for {response.request.url}",
            status_code=response.status_code,
        )
    return payload


def _validate[TModel: (PretixEvent, PretixItemPage, PretixOrderPage)](
    model: type[TModel], payload: dict[str, object], url: str
) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        log.error("Pretix payload from %s failed validation: %s", url, exc)
        raise PretixAPIError(f"Invalid Pretix payload from {url}") from exc


if TYPE_CHECKING:
    from ticketsync.domain.ports import TicketSource

    _source_check: TicketSource = PretixClient(config=cast("PretixConfig", object()))
