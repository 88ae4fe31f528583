from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from tests.helpers.ticketing import ORG_URL, TOKEN, make_event_config, make_organizer
from ticketsync.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from ticketsync.adapters.pretix import PretixAPIError, PretixClient
from ticketsync.config import PretixConfig
from ticketsync.domain.errors import SourceNotFoundError
from ticketsync.domain.model import OrderStatus, SourceItem

EVENT_URL = f"{ORG_URL}/events/conf/"


def _make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    retry: RetryPolicy | None = None,
) -> PretixClient:
    resilience = ResilienceConfig(
        name="pretix-test",
        retry=retry or RetryPolicy(total=0),
    )

    def factory(config: ResilienceConfig) -> ResilientClient:
        return ResilientClient(config, transport=httpx.MockTransport(handler))

    config = PretixConfig(
        organizers=(make_organizer(make_event_config("conf")),),
        resilience=resilience,
    )
    return PretixClient(config=config, client_factory=factory)


def test_fetch_event_sends_token_and_resolves_name() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"slug": "conf", "name": {"de": "Konferenz", "en": "Conference"}, "live": True},
        )

    client = _make_client(handler)

    event = asyncio.run(client.fetch_event(ORG_URL + "/", TOKEN, "conf"))

    assert event.event_id == "conf"
    assert event.name == "Conference"
    assert len(requests) == 1
    assert str(requests[0].url) == EVENT_URL
    assert requests[0].headers["Authorization"] == f"Token {TOKEN}"


def test_fetch_event_not_found() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"detail": "Not found."})

    client = _make_client(handler)

    with pytest.raises(SourceNotFoundError) as excinfo:
        asyncio.run(client.fetch_event(ORG_URL, TOKEN, "conf"))

    assert excinfo.value.event_id == "conf"


def test_fetch_items_follows_pagination() -> None:
    pages = {
        f"{EVENT_URL}items/": {
            "count": 3,
            "next": f"{EVENT_URL}items/?page=2",
            "previous": None,
            "results": [
                {"id": 1, "name": {"en": "GA"}, "active": True},
                {"id": 2, "name": {"en": "VIP"}, "active": True},
            ],
        },
        f"{EVENT_URL}items/?page=2": {
            "count": 3,
            "next": None,
            "previous": f"{EVENT_URL}items/",
            "results": [{"id": 3, "name": "Workshop", "active": False}],
        },
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=pages[str(request.url)])

    client = _make_client(handler)

    items = asyncio.run(client.fetch_items(ORG_URL, TOKEN, "conf"))

    assert items == [SourceItem("1", "GA"), SourceItem("2", "VIP"), SourceItem("3", "Workshop")]


def test_fetch_orders_translates_positions() -> None:
    payload = {
        "count": 1,
        "next": None,
        "previous": None,
        "results": [
            {
                "code": "ABC12",
                "status": "p",
                "email": "buyer@example.com",
                "invoice_address": {"name": "Grace Hopper", "company": ""},
                "positions": [
                    {
                        "id": 901,
                        "positionid": 1,
                        "item": 1,
                        "attendee_name": "Ada Lovelace",
                        "attendee_email": "Ada@Example.com",
                        "secret": "abc",
                    },
                    {"id": 902, "positionid": 2, "item": 2, "attendee_name": "", "attendee_email": None},
                ],
            }
        ],
    }

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    client = _make_client(handler)

    orders = asyncio.run(client.fetch_orders(ORG_URL, TOKEN, "conf"))

    assert len(orders) == 1
    order = orders[0]
    assert order.code == "ABC12"
    assert order.is_paid
    assert order.status == OrderStatus.PAID
    assert order.purchaser_name == "Grace Hopper"
    assert [(p.id, p.item_id, p.attendee_email) for p in order.positions] == [
        (1, "1", "Ada@Example.com"),
        (2, "2", None),
    ]
    assert order.positions[1].attendee_name is None


def test_invalid_payload_raises_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [{"id": "not-a-number"}]})

    client = _make_client(handler)

    with pytest.raises(PretixAPIError):
        asyncio.run(client.fetch_items(ORG_URL, TOKEN, "conf"))


def test_non_object_payload_raises_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    client = _make_client(handler)

    with pytest.raises(PretixAPIError):
        asyncio.run(client.fetch_event(ORG_URL, TOKEN, "conf"))


def test_http_error_status_is_raised() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Invalid token."})

    client = _make_client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_orders(ORG_URL, TOKEN, "conf"))


def test_server_errors_are_retried() -> None:
    attempts: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"slug": "conf", "name": "Conference"})

    client = _make_client(
        handler, retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)
    )

    event = asyncio.run(client.fetch_event(ORG_URL, TOKEN, "conf"))

    assert event.name == "Conference"
    assert len(attempts) == 2


def test_organizers_come_from_config() -> None:
    client = _make_client(lambda _request: httpx.Response(200))

    assert [organizer.id for organizer in client.organizers] == ["demo"]
