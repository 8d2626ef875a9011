"""
Client-side market data synchronizer.

Polls a market-data source on a fixed interval and keeps a class-partitioned
view of tradable assets for UI consumers:

- Buckets start from a static seed and are only ever replaced wholesale by a
  non-empty class from a fresh snapshot.
- Failed or empty refreshes leave every bucket untouched.
- Refresh ticks do not wait for the previous call, so requests may overlap.
  By default the last response to resolve wins.

Usage:
    sync = MarketDataSynchronizer.from_settings(settings.synchronizer)
    async with sync:
        ...
        sync.get_asset_by_symbol("BTC/USDT")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.config.settings import SynchronizerSettings
from app.market.buckets import AssetBuckets
from app.market.seed import default_buckets
from app.providers.market_data import HttpMarketDataSource, MarketDataFetchError
from app.schemas.market import Asset, MarketSnapshot

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[MarketSnapshot]]
Listener = Callable[["MarketDataView"], None]


@dataclass(frozen=True)
class MarketDataView:
    """One consistent read of the synchronizer state."""

    crypto_assets: tuple[Asset, ...]
    forex_assets: tuple[Asset, ...]
    stock_assets: tuple[Asset, ...]
    etf_assets: tuple[Asset, ...]
    all_assets: tuple[Asset, ...]
    is_loading: bool
    is_stale: bool
    last_updated: int | None


class MarketDataSynchronizer:
    def __init__(
        self,
        fetcher: Fetcher,
        seed: AssetBuckets | None = None,
        refresh_interval_ms: int = 5000,
        enabled: bool = True,
        drop_superseded_responses: bool = False,
    ) -> None:
        if refresh_interval_ms <= 0:
            raise ValueError("refresh_interval_ms must be positive")
        self._fetch = fetcher
        self._buckets = seed if seed is not None else default_buckets()
        self._refresh_interval_ms = refresh_interval_ms
        self._enabled = enabled
        self._drop_superseded = drop_superseded_responses

        self._is_stale = False
        self._last_updated: int | None = None
        self._in_flight = 0
        self._issued_seq = 0
        self._applied_seq = 0

        self._timer: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(
        cls, config: SynchronizerSettings, seed: AssetBuckets | None = None
    ) -> MarketDataSynchronizer:
        return cls(
            HttpMarketDataSource(config.endpoint_url, config.request_timeout_seconds),
            seed=seed,
            refresh_interval_ms=config.refresh_interval_ms,
            enabled=config.enabled,
            drop_superseded_responses=config.drop_superseded_responses,
        )

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def crypto_assets(self) -> tuple[Asset, ...]:
        return self._buckets.crypto

    @property
    def forex_assets(self) -> tuple[Asset, ...]:
        return self._buckets.forex

    @property
    def stock_assets(self) -> tuple[Asset, ...]:
        return self._buckets.stock

    @property
    def etf_assets(self) -> tuple[Asset, ...]:
        return self._buckets.etf

    @property
    def all_assets(self) -> tuple[Asset, ...]:
        return self._buckets.all_assets

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def is_stale(self) -> bool:
        return self._is_stale

    @property
    def last_updated(self) -> int | None:
        return self._last_updated

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def refresh_interval_ms(self) -> int:
        return self._refresh_interval_ms

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def view(self) -> MarketDataView:
        return MarketDataView(
            crypto_assets=self._buckets.crypto,
            forex_assets=self._buckets.forex,
            stock_assets=self._buckets.stock,
            etf_assets=self._buckets.etf,
            all_assets=self._buckets.all_assets,
            is_loading=self.is_loading,
            is_stale=self._is_stale,
            last_updated=self._last_updated,
        )

    def get_asset_by_symbol(self, symbol: str) -> Asset | None:
        return self._buckets.find(symbol)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new view after every applied update."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refetch(self) -> None:
        if not self._enabled:
            return

        self._issued_seq += 1
        seq = self._issued_seq
        self._in_flight += 1
        try:
            snapshot = await self._fetch()
        except MarketDataFetchError as exc:
            logger.warning("Failed to fetch market data: %s", exc)
        except Exception:
            logger.exception("Market data fetcher raised unexpectedly")
        else:
            self._apply(snapshot, seq)
        finally:
            self._in_flight -= 1

    def _apply(self, snapshot: MarketSnapshot, seq: int) -> None:
        if not snapshot.assets:
            logger.debug("Market data snapshot is empty; keeping current buckets")
            return
        if self._drop_superseded and seq < self._applied_seq:
            logger.debug(
                "Dropping market data response %d; response %d already applied",
                seq,
                self._applied_seq,
            )
            return

        self._buckets = self._buckets.merge(AssetBuckets.partition(snapshot.assets))
        self._is_stale = snapshot.stale
        self._last_updated = snapshot.last_fetch_time
        self._applied_seq = max(self._applied_seq, seq)
        logger.debug(
            "Applied market data snapshot: %d assets (stale=%s)",
            len(snapshot.assets),
            snapshot.stale,
        )
        self._notify()

    def _notify(self) -> None:
        view = self.view()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Market data listener failed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Refetch now, then every ``refresh_interval_ms`` until stopped.

        Must be called from inside a running event loop.
        """
        if not self._enabled or self._timer is not None:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._tick_forever(), name="market-data-refresh")
        logger.info("Market data refresh started every %d ms", self._refresh_interval_ms)

    def stop(self) -> None:
        """Cancel the refresh timer. In-flight refetches keep running."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        logger.info("Market data refresh stopped")

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self.start()
        else:
            self.stop()

    def set_refresh_interval(self, refresh_interval_ms: int) -> None:
        if refresh_interval_ms <= 0:
            raise ValueError("refresh_interval_ms must be positive")
        if refresh_interval_ms == self._refresh_interval_ms:
            return
        self._refresh_interval_ms = refresh_interval_ms
        if self._timer is not None:
            self.stop()
            self.start()

    async def drain(self) -> None:
        """Wait for the timer's refetches that are in flight right now.

        Refetches the timer issues after this call are not waited for.
        """
        pending = list(self._pending)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _tick_forever(self) -> None:
        interval = self._refresh_interval_ms / 1000
        while True:
            task = asyncio.ensure_future(self.refetch())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            await asyncio.sleep(interval)

    async def __aenter__(self) -> MarketDataSynchronizer:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()
