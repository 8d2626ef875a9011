from __future__ import annotations

import asyncio
import logging
import time

from app.cache import get_snapshot, release_refresh_lock, set_snapshot
from app.market.buckets import AssetBuckets
from app.providers import massive
from app.schemas.market import Asset, MarketSnapshot

logger = logging.getLogger(__name__)


async def _fetch_assets(tickers: tuple[str, ...]) -> list[Asset]:
    quotes = await asyncio.gather(
        *(asyncio.to_thread(massive.fetch_quote, ticker) for ticker in tickers)
    )
    assets: list[Asset] = []
    seen: set[str] = set()
    for quote in quotes:
        if quote is None:
            continue
        asset = massive.to_asset(quote)
        if asset is None or asset.symbol in seen:
            continue
        seen.add(asset.symbol)
        assets.append(asset)
    return assets


def build_snapshot(assets: list[Asset], fetched_at_ms: int) -> MarketSnapshot:
    ordered = AssetBuckets.partition(assets).all_assets
    return MarketSnapshot(assets=ordered, last_fetch_time=fetched_at_ms, stale=False)


def run_market_refresh() -> int:
    """Refresh the cached snapshot from the upstream provider.

    Returns the number of assets stored. When the upstream yields nothing,
    the previous snapshot is kept and flagged stale, and 0 is returned.
    """
    try:
        assets = asyncio.run(_fetch_assets(massive.all_tickers()))
        if assets:
            snapshot = build_snapshot(assets, int(time.time() * 1000))
            set_snapshot(snapshot)
            logger.info("Refreshed market data: %d assets", len(assets))
            return len(assets)

        cached = get_snapshot()
        if cached is not None and not cached.stale:
            set_snapshot(cached.model_copy(update={"stale": True}))
        logger.warning("Upstream returned no market data; serving cached snapshot as stale")
        return 0
    finally:
        release_refresh_lock()
