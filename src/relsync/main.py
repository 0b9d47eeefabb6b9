from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from relsync.app import sync_relationships
from relsync.common import configure_logging
from relsync.config import ConfigurationError, get_sync_config
from relsync.domain import TimeWindow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from relsync.config import SyncConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile service -> host relationships in New Relic"
    )
    parser.add_argument(
        "--lookback-hours",
        type=float,
        help="Trailing window in hours for the telemetry queries (defaults to config)",
    )
    parser.add_argument(
        "--start",
        type=str,
        help="ISO-8601 timestamp (UTC) marking the start of the window",
    )
    parser.add_argument(
        "--end",
        type=str,
        help="ISO-8601 timestamp (UTC) marking the end of the window",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and log the changes without creating or deleting relationships",
    )
    parser.add_argument(
        "--max-concurrent-sources",
        type=int,
        help="Maximum number of services reconciled at once (defaults to config)",
    )
    parser.add_argument(
        "--max-concurrent-mutations",
        type=int,
        help="Maximum number of mutations in flight per service (defaults to config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _build_sync_config(args: argparse.Namespace, base: SyncConfig) -> SyncConfig:
    overrides: dict[str, object] = {}
    if args.lookback_hours is not None:
        overrides["lookback_hours"] = args.lookback_hours
    if args.max_concurrent_sources is not None:
        overrides["max_concurrent_sources"] = args.max_concurrent_sources
    if args.max_concurrent_mutations is not None:
        overrides["max_concurrent_mutations"] = args.max_concurrent_mutations
    if args.dry_run:
        overrides["dry_run"] = True
    try:
        return replace(base, **overrides)
    except ConfigurationError as exc:
        raise ValueError(str(exc)) from exc


def _build_time_window(args: argparse.Namespace, config: SyncConfig) -> TimeWindow:
    start = _parse_iso_datetime(args.start) if args.start else None
    end = _parse_iso_datetime(args.end) if args.end else None
    if start is not None and args.lookback_hours is None:
        # An explicit start replaces the default trailing window.
        return TimeWindow(start=start, end=end, lookback=None)
    return TimeWindow(start=start, end=end, lookback=timedelta(hours=config.lookback_hours))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        sync_config = _build_sync_config(parsed_args, get_sync_config())
        window = _build_time_window(parsed_args, sync_config)
        window.resolve()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        result = sync_relationships(window=window, sync_config=sync_config)
    except Exception:
        log.exception("Fatal error during relationship sync")
        sys.exit(1)

    if result.failed:
        names = ", ".join(failure.source.name for failure in result.failed)
        log.error("Relationship sync failed for %s service(s): %s", len(result.failed), names)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
