#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ticketsync.app import build_sync_service, run_sync_once, run_sync_service
from ticketsync.common.logging import configure_logging
from ticketsync.config import ConfigurationError, SyncConfig, get_sync_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise Pretix tickets into the local store")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sync cycle and exit (non-zero if any event failed)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between sync cycles (default: TICKETSYNC_SYNC_INTERVAL_SECONDS or 60)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every individual change",
    )
    return parser.parse_args(list(argv))


def _sync_config(args: argparse.Namespace) -> SyncConfig:
    if args.interval is None:
        return get_sync_config()
    if args.interval <= 0:
        raise ValueError("Interval must be positive")
    return SyncConfig(interval_seconds=args.interval)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        scheduler = build_sync_service(sync_config=_sync_config(parsed_args))
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    if scheduler is None:
        print("Nothing to sync: no organizer events configured", file=sys.stderr)
        sys.exit(0)

    if parsed_args.once:
        install_exit_handlers()
        report = asyncio.run(run_sync_once(scheduler))
        if not report.completed or report.failed_results:
            sys.exit(1)
        return

    asyncio.run(run_sync_service(scheduler))


def shutdown_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT/SIGTERM during a one-shot run."""
    print("\nClosed by user")
    sys.exit(0)


def install_exit_handlers() -> None:
    # the long-running service stops through its event loop instead
    signal(SIGINT, shutdown_handler)
    signal(SIGTERM, shutdown_handler)


def cli() -> None:
    load_dotenv()
    main()


if __name__ == "__main__":
    cli()
