"""
Fetch Capitol Trades pages and write them to JSON or parquet.

Example:
  python scripts/fetch_trades.py --selector ticker --value AAPL --pages 3 --output out/aapl.parquet
"""
import argparse
import asyncio
import datetime as dt
import os
import sys
from dataclasses import replace
from time import perf_counter

from dotenv import load_dotenv
from tqdm import tqdm

from capitol_fetcher.config import FetcherConfig
from capitol_fetcher.errors import FetcherError
from capitol_fetcher.io_utils import write_json, write_results
from capitol_fetcher.log import configure_logging
from capitol_fetcher.meta import build_env_meta
from capitol_fetcher.models import MAX_LIMIT, SORT_FIELDS, SORT_ORDERS, TradeFilter
from capitol_fetcher.pipeline import TradesFetcher


SELECTORS = ("all", "size", "politician", "ticker")


def _iso_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)") from e


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch congressional trade disclosures from Capitol Trades")
    parser.add_argument("--selector", choices=SELECTORS, default="all", help="Narrow the query to one dimension")
    parser.add_argument("--value", type=str, default="", help="Selector value (trade size, politician id or ticker)")
    parser.add_argument("--page", type=int, default=1, help="First page to fetch")
    parser.add_argument("--pages", type=int, default=1, help="Number of consecutive pages to fetch")
    parser.add_argument("--limit", type=int, default=0, help=f"Rows per page, 1..{MAX_LIMIT} (default: DEFAULT_PAGE_SIZE)")
    parser.add_argument("--sort-by", choices=SORT_FIELDS, default="date")
    parser.add_argument("--order", choices=SORT_ORDERS, default="desc")
    parser.add_argument("--start-date", type=_iso_date, default=None, help="YYYY-MM-DD")
    parser.add_argument("--end-date", type=_iso_date, default=None, help="YYYY-MM-DD")
    parser.add_argument("--skip-cache", action="store_true", help="Bypass the cache (development mode only)")
    parser.add_argument("--output", type=str, default="trades.json", help="Output path (.json or .parquet)")
    parser.add_argument("--meta-output", type=str, default="", help="Run metadata json (default: <output>.meta.json)")
    parser.add_argument("--log-dir", type=str, default="", help="Also write rotating log files here")

    args = parser.parse_args(argv)
    if args.pages < 1:
        parser.error("--pages must be >= 1")
    if args.selector != "all" and not args.value.strip():
        parser.error(f"--value is required for --selector {args.selector}")
    return args


def build_filter(args: argparse.Namespace, config: FetcherConfig) -> TradeFilter:
    base = TradeFilter(
        page=args.page,
        limit=args.limit or config.default_page_size,
        sort_by=args.sort_by,
        order=args.order,
        start_date=args.start_date,
        end_date=args.end_date,
    )
    if args.selector == "size":
        return base.for_size(args.value)
    if args.selector == "politician":
        return base.for_politician(args.value)
    if args.selector == "ticker":
        return base.for_ticker(args.value)
    return base


async def collect_pages(fetcher, first: TradeFilter, pages: int, *, skip_cache: bool = False) -> list:
    results = []
    for offset in tqdm(range(pages), desc="Fetching pages", unit="page"):
        results.append(await fetcher.fetch(replace(first, page=first.page + offset), skip_cache=skip_cache))
    return results


async def run(args: argparse.Namespace, config: FetcherConfig, *, fetcher=None) -> dict:
    """Fetch, write output and return run metadata. Raises on any failure."""
    t0 = perf_counter()
    first = build_filter(args, config)
    fetcher = fetcher or TradesFetcher(config=config)
    async with fetcher:
        results = await collect_pages(fetcher, first, args.pages, skip_cache=args.skip_cache)
    t_fetch = perf_counter()

    rows = write_results(results, args.output)
    return {
        "run_status": "success",
        "selector": args.selector,
        "value": args.value or None,
        "first_page": first.page,
        "pages": args.pages,
        "limit": first.limit,
        "rows": rows,
        "output": args.output,
        "timing_seconds": {
            "fetch": round(t_fetch - t0, 4),
            "total": round(perf_counter() - t0, 4),
        },
    }


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    config = FetcherConfig.from_env()
    configure_logging(config.log_level, log_dir=args.log_dir or None)

    started_at = dt.datetime.now(dt.timezone.utc)
    meta_output = args.meta_output or f"{args.output}.meta.json"
    try:
        meta = asyncio.run(run(args, config))
        code = 0
    except FetcherError as e:
        meta = {
            "run_status": "failed",
            "error": {"type": type(e).__name__, "message": str(e)},
        }
        print(f"[ERROR] {e}", file=sys.stderr)
        code = 1

    meta["generated_at_utc"] = started_at.isoformat()
    meta["config"] = config.snapshot()
    meta["env"] = build_env_meta()
    write_json(meta, meta_output)
    if code == 0:
        print(f"Done. {meta['rows']} rows saved to {os.path.abspath(args.output)}")
    return code


if __name__ == "__main__":
    sys.exit(main())
