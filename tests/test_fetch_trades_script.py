"""Tests for the fetch_trades CLI script."""
import asyncio
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))
from fetch_trades import build_filter, main, parse_args, run

from capitol_fetcher.config import FetcherConfig
from capitol_fetcher.errors import FetchFailedError
from capitol_fetcher.models import FetchResult, TradeRecord


class FakeFetcher:
    def __init__(self, *, fail: bool = False):
        self.calls = []
        self.closed = False
        self._fail = fail

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def fetch(self, filters, *, skip_cache=False):
        self.calls.append((filters, skip_cache))
        if self._fail:
            raise FetchFailedError(url="https://example.test", cause=RuntimeError("boom"))
        return FetchResult(
            page=filters.page,
            limit=filters.limit,
            records=(TradeRecord(politician="Nancy Pelosi", ticker=filters.ticker),),
        )


def test_parse_args_requires_value_for_selector():
    with pytest.raises(SystemExit):
        parse_args(["--selector", "ticker"])


def test_parse_args_rejects_bad_date():
    with pytest.raises(SystemExit):
        parse_args(["--start-date", "01/02/2024"])


def test_build_filter_uses_config_page_size_and_selector():
    args = parse_args(["--selector", "ticker", "--value", "aapl", "--start-date", "2024-01-01"])
    f = build_filter(args, FetcherConfig(default_page_size=40))
    assert f.limit == 40
    assert f.ticker == "AAPL"
    assert f.start_date.isoformat() == "2024-01-01"


def test_run_fetches_consecutive_pages_and_writes_output(tmp_path):
    out = tmp_path / "trades.json"
    args = parse_args(
        ["--selector", "ticker", "--value", "nvda", "--page", "3", "--pages", "2", "--limit", "10", "--output", str(out)]
    )
    fetcher = FakeFetcher()

    meta = asyncio.run(run(args, FetcherConfig(), fetcher=fetcher))

    assert [c[0].page for c in fetcher.calls] == [3, 4]
    assert fetcher.closed
    assert meta["run_status"] == "success"
    assert meta["rows"] == 2
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data[0]["trades"][0]["ticker"] == "NVDA"


def test_run_propagates_fetch_failure_and_closes(tmp_path):
    args = parse_args(["--output", str(tmp_path / "t.json")])
    fetcher = FakeFetcher(fail=True)

    with pytest.raises(FetchFailedError):
        asyncio.run(run(args, FetcherConfig(), fetcher=fetcher))
    assert fetcher.closed
    assert not (tmp_path / "t.json").exists()


def test_main_writes_failure_meta(tmp_path, monkeypatch):
    import fetch_trades

    async def failing_run(args, config, *, fetcher=None):
        raise FetchFailedError(url="https://example.test", cause=RuntimeError("boom"))

    monkeypatch.setattr(fetch_trades, "run", failing_run)
    monkeypatch.setattr(fetch_trades, "configure_logging", lambda *a, **k: None)
    monkeypatch.chdir(tmp_path)

    code = main(["--output", str(tmp_path / "t.json")])

    assert code == 1
    meta = json.loads((tmp_path / "t.json.meta.json").read_text(encoding="utf-8"))
    assert meta["run_status"] == "failed"
    assert meta["error"]["type"] == "FetchFailedError"
    assert "env" in meta and "config" in meta
