"""Command line runner: sync the game data tables once or on an interval."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from data import GameDataProvider
from utils import (
    ConfigurationError,
    ServiceKeys,
    configure_container,
    get_config,
    get_metrics,
    setup_logging,
    timed,
)
from utils.progress_callback import CancelToken

logger = logging.getLogger(__name__)

# How often the interval wait checks for a stop request
STOP_POLL_SECONDS = 1.0


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    ap = argparse.ArgumentParser(
        prog="ark-gamedata-mirror",
        description="Mirror the Arknights game data tables and report what was loaded",
    )
    ap.add_argument(
        "--interval",
        type=int,
        metavar="MINUTES",
        help=(
            "Keep running and re-sync every MINUTES "
            f"(configured default: {config.gamedata.sync_interval_minutes})"
        ),
    )
    ap.add_argument(
        "--watch",
        action="store_true",
        help="Keep running using GAMEDATA_SYNC_INTERVAL_MINUTES",
    )
    ap.add_argument(
        "--concurrent",
        action="store_true",
        default=None,
        help="Fetch the five tables concurrently",
    )
    ap.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    ap.add_argument(
        "--metrics",
        action="store_true",
        help="Print the timing report after each sync",
    )
    return ap


@timed("startup.initial_sync")
async def _initial_sync(
    provider: GameDataProvider, concurrent: bool, cancel_token: CancelToken | None
):
    return await provider.sync_all(concurrent=concurrent, cancel_token=cancel_token)


async def _wait_for_next_sync(seconds: float, cancel_token: CancelToken | None) -> None:
    """Sleep until the next sync, waking early once ``cancel_token`` is set."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + seconds
    while not (cancel_token and cancel_token.is_cancelled):
        remaining = deadline - loop.time()
        if remaining <= 0:
            return
        await asyncio.sleep(min(remaining, STOP_POLL_SECONDS))


async def run(
    provider: GameDataProvider,
    *,
    interval_minutes: int | None,
    concurrent: bool,
    show_metrics: bool = False,
    cancel_token: CancelToken | None = None,
) -> int:
    """Sync once, then every ``interval_minutes`` if given.

    Setting ``cancel_token`` skips the datasets not yet started and ends the
    interval loop.

    Returns:
        Process exit code: 0 when the last sync published every dataset.
    """
    report = await _initial_sync(provider, concurrent, cancel_token)
    print(report.summary())
    if show_metrics:
        print(get_metrics().report())

    while interval_minutes and not (cancel_token and cancel_token.is_cancelled):
        logger.info("Next game data sync in %d minutes", interval_minutes)
        await _wait_for_next_sync(interval_minutes * 60, cancel_token)
        if cancel_token and cancel_token.is_cancelled:
            break
        report = await provider.sync_all(
            concurrent=concurrent, cancel_token=cancel_token
        )
        print(report.summary())
        if show_metrics:
            print(get_metrics().report())

    return 0 if report.ok else 1


def _install_stop_handler(cancel_token: CancelToken) -> None:
    """Cancel ``cancel_token`` on SIGTERM so the runner stops between datasets."""

    def request_stop() -> None:
        logger.info("Received SIGTERM, stopping after the current dataset")
        cancel_token.cancel()

    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, request_stop)
    except (NotImplementedError, RuntimeError) as e:
        logger.warning(f"Could not register SIGTERM handler: {e}")


async def _main_async(args: argparse.Namespace) -> int:
    config = get_config()
    container = configure_container()
    provider: GameDataProvider = container.resolve(ServiceKeys.GAMEDATA_PROVIDER)
    client = container.resolve(ServiceKeys.GAMEDATA_CLIENT)

    interval = args.interval
    if interval is None and args.watch:
        interval = config.gamedata.sync_interval_minutes
    if interval is not None and interval < 1:
        raise ConfigurationError("--interval must be at least 1 minute")

    concurrent = config.gamedata.concurrent_sync
    if args.concurrent is not None:
        concurrent = args.concurrent

    cancel_token = CancelToken()
    _install_stop_handler(cancel_token)

    try:
        return await run(
            provider,
            interval_minutes=interval,
            concurrent=concurrent,
            show_metrics=args.metrics,
            cancel_token=cancel_token,
        )
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level)
    try:
        return asyncio.run(_main_async(args))
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
