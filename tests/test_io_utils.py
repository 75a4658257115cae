from __future__ import annotations

import json

import pandas as pd

from capitol_fetcher.io_utils import FRAME_COLUMNS, records_to_frame, write_results
from capitol_fetcher.models import FetchResult, TradeRecord


def _results():
    return [
        FetchResult(
            page=1,
            limit=2,
            records=(
                TradeRecord(politician="Nancy Pelosi", ticker="NVDA:US", trade_type="buy"),
                TradeRecord(politician="Dan Crenshaw", company="Apple Inc"),
            ),
        ),
        FetchResult(page=2, limit=2, records=(TradeRecord(ticker="MSFT:US"),)),
    ]


def test_records_to_frame_keeps_order_and_marks_absent_as_na():
    df = records_to_frame(_results())
    assert list(df.columns) == FRAME_COLUMNS
    assert df["page"].tolist() == [1, 1, 2]
    assert df["ticker"].iloc[2] == "MSFT:US"
    assert pd.isna(df["company"].iloc[0])
    assert df["company"].iloc[1] == "Apple Inc"


def test_records_to_frame_empty():
    df = records_to_frame([FetchResult(page=1, limit=25)])
    assert df.empty
    assert list(df.columns) == FRAME_COLUMNS


def test_write_results_json(tmp_path):
    out = tmp_path / "nested" / "trades.json"
    rows = write_results(_results(), str(out))

    assert rows == 3
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [page["page"] for page in data] == [1, 2]
    assert data[0]["trades"][1] == {"company": "Apple Inc", "politician": "Dan Crenshaw"}


def test_write_results_parquet(tmp_path):
    out = tmp_path / "trades.parquet"
    rows = write_results(_results(), str(out))

    assert rows == 3
    back = pd.read_parquet(out)
    assert back["politician"].tolist()[:2] == ["Nancy Pelosi", "Dan Crenshaw"]
