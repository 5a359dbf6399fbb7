"""Tests for the command line runner."""

import asyncio
import os
import signal
import sys

import httpx
import pytest

import main as cli
from main import build_parser, run
from utils.di_container import reset_container
from utils.progress_callback import CancelToken


def test_single_sync_succeeds(provider, metrics, capsys):
    exit_code = asyncio.run(run(provider, interval_minutes=None, concurrent=False))

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "stage: ok (5 entries" in out
    assert "character: ok (2 entries" in out
    assert metrics.get_stats("startup.initial_sync")["count"] == 1


def test_failed_dataset_gives_nonzero_exit(provider, table_server, capsys):
    table_server.routes["activity_table.json"] = httpx.Response(502)

    exit_code = asyncio.run(run(provider, interval_minutes=None, concurrent=True))

    assert exit_code == 1
    assert "activity: FAILED [network]" in capsys.readouterr().out


def test_metrics_report_printed_on_request(provider, capsys):
    asyncio.run(
        run(provider, interval_minutes=None, concurrent=False, show_metrics=True)
    )

    out = capsys.readouterr().out
    assert "METRICS REPORT" in out
    assert "gamedata.count.zone" in out


def test_cancelled_token_skips_initial_sync_and_interval_loop(provider, table_server):
    token = CancelToken()
    token.cancel()

    exit_code = asyncio.run(
        run(provider, interval_minutes=5, concurrent=False, cancel_token=token)
    )

    assert exit_code == 1
    assert table_server.requests == []


def test_cancel_during_interval_wait_stops_loop(provider, table_server, monkeypatch):
    monkeypatch.setattr(cli, "STOP_POLL_SECONDS", 0.01)
    token = CancelToken()

    async def cancel_after_first_sync():
        while not provider.is_loaded:
            await asyncio.sleep(0.01)
        token.cancel()

    async def scenario():
        canceller = asyncio.create_task(cancel_after_first_sync())
        exit_code = await asyncio.wait_for(
            run(provider, interval_minutes=1, concurrent=False, cancel_token=token),
            timeout=5,
        )
        await canceller
        return exit_code

    assert asyncio.run(scenario()) == 0
    assert len(table_server.requests) == 5


def test_wait_for_next_sync_wakes_on_cancel(monkeypatch):
    monkeypatch.setattr(cli, "STOP_POLL_SECONDS", 0.01)
    token = CancelToken()

    async def scenario():
        asyncio.get_running_loop().call_later(0.05, token.cancel)
        await asyncio.wait_for(cli._wait_for_next_sync(60, token), timeout=5)

    asyncio.run(scenario())

    assert token.is_cancelled


@pytest.mark.skipif(sys.platform == "win32", reason="needs loop signal handlers")
def test_sigterm_cancels_token():
    token = CancelToken()

    async def scenario():
        loop = asyncio.get_running_loop()
        cli._install_stop_handler(token)
        try:
            os.kill(os.getpid(), signal.SIGTERM)
            for _ in range(100):
                if token.is_cancelled:
                    break
                await asyncio.sleep(0.01)
        finally:
            loop.remove_signal_handler(signal.SIGTERM)

    asyncio.run(scenario())

    assert token.is_cancelled


def test_parser_options():
    args = build_parser().parse_args(
        ["--interval", "15", "--concurrent", "--log-level", "DEBUG", "--metrics"]
    )

    assert args.interval == 15
    assert args.concurrent is True
    assert args.log_level == "DEBUG"
    assert args.metrics is True
    assert args.watch is False


def test_parser_defaults_leave_config_in_charge():
    args = build_parser().parse_args([])

    assert args.interval is None
    assert args.concurrent is None


def test_invalid_interval_exits_with_config_error(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)

    try:
        assert cli.main(["--interval", "0"]) == 2
    finally:
        reset_container()
