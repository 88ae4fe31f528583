"""Mirror Pretix events, catalog items, and paid tickets into a local store."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("ticketsync")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"
