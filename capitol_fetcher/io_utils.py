from __future__ import annotations

import json
import os
from typing import Iterable

import pandas as pd

from .models import RECORD_FIELDS, FetchResult


FRAME_COLUMNS = ["page", *RECORD_FIELDS.values()]


def records_to_frame(results: Iterable[FetchResult]) -> pd.DataFrame:
    """Flatten fetched pages into one frame; keeps upstream row order, absent cells are NA."""
    rows = [
        {"page": result.page, **record.to_dict()}
        for result in results
        for record in result.records
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["page"] = df["page"].astype("Int64")
    for c in FRAME_COLUMNS[1:]:
        df[c] = df[c].astype("string")
    return df


def _ensure_parent(path: str) -> None:
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)


def write_parquet(df: pd.DataFrame, path: str) -> None:
    _ensure_parent(path)
    df.to_parquet(path, compression="zstd", index=False)


def write_json(data, path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)


def write_results(results: list[FetchResult], path: str) -> int:
    """Write pages as parquet (.parquet) or JSON (anything else). Returns the row count."""
    if path.endswith(".parquet"):
        df = records_to_frame(results)
        write_parquet(df, path)
        return int(len(df))
    payload = [r.to_dict() for r in results]
    write_json(payload, path)
    return sum(len(r.records) for r in results)
