"""Pretix organizer configuration.

Organizers and their tracked events are read from a TOML file::

    [[organizers]]
    id = "devconnect"
    org_url = "https://pretix.eu/api/v1/organizers/devconnect"
    token_env = "PRETIX_DEVCONNECT_TOKEN"   # or: token = "..."

    [[organizers.events]]
    id = "1"
    event_id = "cowork"
    active_item_ids = ["1", "2"]
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, cast

from ticketsync.domain.model import EventConfig, OrganizerConfig

from .env import require_env_var
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping

PRETIX_TIMEOUT_SECONDS = 30.0


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="pretix",
        timeout_seconds=PRETIX_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
    )


@dataclass(frozen=True, slots=True)
class PretixConfig:
    organizers: tuple[OrganizerConfig, ...]
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_pretix_config(
    *,
    path: Path | None = None,
    resilience: ResilienceConfig | None = None,
) -> PretixConfig:
    config_path = path or Path(require_env_var("TICKETSYNC_ORGANIZERS_FILE"))
    return PretixConfig(
        organizers=load_organizers(config_path),
        resilience=resilience or _default_resilience(),
    )


def load_organizers(path: Path) -> tuple[OrganizerConfig, ...]:
    try:
        with path.expanduser().open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Organizers file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Organizers file {path} is not valid TOML: {exc}") from exc
    return parse_organizers(document)


def parse_organizers(document: Mapping[str, object]) -> tuple[OrganizerConfig, ...]:
    raw_organizers = _table_list(document, "organizers", "document")
    organizers = tuple(
        _parse_organizer(raw, f"organizers[{index}]") for index, raw in enumerate(raw_organizers)
    )

    seen: set[str] = set()
    for organizer in organizers:
        for event in organizer.events:
            if event.id in seen:
                raise ConfigurationError(f"Duplicate event config id {event.id!r}")
            seen.add(event.id)
    return organizers


def _parse_organizer(raw: Mapping[str, object], where: str) -> OrganizerConfig:
    token = raw.get("token")
    token_env = raw.get("token_env")
    if isinstance(token_env, str) and token_env.strip():
        token = require_env_var(token_env)
    if not isinstance(token, str) or not token.strip():
        raise ConfigurationError(f"{where}: one of 'token' or 'token_env' is required")

    events = tuple(
        _parse_event(event, f"{where}.events[{index}]")
        for index, event in enumerate(_table_list(raw, "events", where))
    )
    return OrganizerConfig(
        id=_required_str(raw, "id", where),
        org_url=_required_str(raw, "org_url", where),
        token=token,
        events=events,
    )


def _parse_event(raw: Mapping[str, object], where: str) -> EventConfig:
    raw_items = raw.get("active_item_ids", [])
    if not isinstance(raw_items, list):
        raise ConfigurationError(f"{where}: 'active_item_ids' must be a list")
    active_item_ids: set[str] = set()
    for value in cast("list[object]", raw_items):
        if isinstance(value, bool) or not isinstance(value, str | int):
            raise ConfigurationError(f"{where}: active item ids must be strings or integers")
        active_item_ids.add(str(value))
    return EventConfig(
        id=_required_str(raw, "id", where),
        event_id=_required_str(raw, "event_id", where),
        active_item_ids=frozenset(active_item_ids),
    )


def _required_str(raw: Mapping[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{where}: '{key}' is required")
    return value


def _table_list(raw: Mapping[str, object], key: str, where: str) -> list[Mapping[str, object]]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise ConfigurationError(f"{where}: '{key}' must be an array of tables")
    tables: list[Mapping[str, object]] = []
    for entry in cast("list[object]", value):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{where}: entries of '{key}' must be tables")
        tables.append(cast("Mapping[str, object]", entry))
    return tables
