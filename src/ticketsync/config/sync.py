"""Synchronization defaults for the sync scheduler."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env

DEFAULT_SYNC_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    interval_seconds: float = DEFAULT_SYNC_INTERVAL_SECONDS


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        interval_seconds=optional_float_env(
            "TICKETSYNC_SYNC_INTERVAL_SECONDS", DEFAULT_SYNC_INTERVAL_SECONDS
        )
    )
