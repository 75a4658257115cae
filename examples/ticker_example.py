"""
Example usage of TradesFetcher.

Fetches two pages of trades for one ticker, then shows the cache at work.
Requires: pip install -e . && playwright install chromium
"""
import asyncio

from capitol_fetcher import FetcherConfig, TradeFilter, TradesFetcher


async def main():
    config = FetcherConfig(max_retries=2, retry_delay_ms=1500)

    async with TradesFetcher(config=config) as fetcher:
        print("Fetching NVDA trades (page 1)...")
        first = await fetcher.get_trades_by_ticker("nvda", TradeFilter(limit=10))
        print(f"Got {len(first.records)} trades")
        for rec in first.records[:5]:
            print(f"  {rec.traded_date or ''}  {rec.politician or '':<25} {rec.trade_type or '':<5} {rec.trade_size or ''}")

        print("\nFetching the same page again (served from cache)...")
        again = await fetcher.get_trades_by_ticker("NVDA", TradeFilter(limit=10))
        print(f"Identical result: {again == first}")

        print("\nFetching page 2...")
        second = await fetcher.get_trades_by_ticker("NVDA", TradeFilter(page=2, limit=10))
        print(f"Got {len(second.records)} trades")

        stats = fetcher.cache_stats()
        print(f"\nCache: {stats['count']} entries, ~{stats['approximate_size_bytes']} bytes")
        for key in stats["keys"]:
            print(f"  {key}")


if __name__ == "__main__":
    asyncio.run(main())
