from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import assert_never

from app.schemas.market import Asset, AssetType


@dataclass(frozen=True)
class AssetBuckets:
    """The currently known assets, split by class.

    Buckets are tuples so a bucket carried over by ``merge`` is the same
    object as before the merge.
    """

    crypto: tuple[Asset, ...] = ()
    forex: tuple[Asset, ...] = ()
    stock: tuple[Asset, ...] = ()
    etf: tuple[Asset, ...] = ()

    @classmethod
    def partition(cls, assets: Iterable[Asset]) -> AssetBuckets:
        grouped: dict[AssetType, list[Asset]] = {asset_type: [] for asset_type in AssetType}
        for asset in assets:
            grouped[asset.type].append(asset)
        return cls(
            crypto=tuple(grouped[AssetType.CRYPTO]),
            forex=tuple(grouped[AssetType.FOREX]),
            stock=tuple(grouped[AssetType.STOCK]),
            etf=tuple(grouped[AssetType.ETF]),
        )

    def of_type(self, asset_type: AssetType) -> tuple[Asset, ...]:
        match asset_type:
            case AssetType.CRYPTO:
                return self.crypto
            case AssetType.FOREX:
                return self.forex
            case AssetType.STOCK:
                return self.stock
            case AssetType.ETF:
                return self.etf
            case _:
                assert_never(asset_type)

    def merge(self, incoming: AssetBuckets) -> AssetBuckets:
        """Take every non-empty bucket from ``incoming``, keep ours otherwise."""
        return AssetBuckets(
            crypto=incoming.crypto or self.crypto,
            forex=incoming.forex or self.forex,
            stock=incoming.stock or self.stock,
            etf=incoming.etf or self.etf,
        )

    @property
    def all_assets(self) -> tuple[Asset, ...]:
        return tuple(
            asset for asset_type in AssetType for asset in self.of_type(asset_type)
        )

    def find(self, symbol: str) -> Asset | None:
        for asset in self.all_assets:
            if asset.symbol == symbol:
                return asset
        return None
