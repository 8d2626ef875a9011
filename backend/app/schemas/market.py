from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssetType(str, Enum):
    # Declaration order is the canonical class order of the aggregate view.
    CRYPTO = "crypto"
    FOREX = "forex"
    STOCK = "stock"
    ETF = "etf"


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str = Field(min_length=1)
    name: str
    price: float = Field(ge=0)
    change_24h: float = Field(alias="change24h")
    change_percent_24h: float = Field(alias="changePercent24h")
    volume_24h: float = Field(ge=0, alias="volume24h")
    market_cap: float = Field(default=0, ge=0, alias="marketCap")
    type: AssetType


class MarketSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    assets: tuple[Asset, ...] = ()
    last_fetch_time: int = Field(default=0, alias="lastFetchTime")
    stale: bool = False

    @model_validator(mode="after")
    def _check_unique_symbols(self) -> MarketSnapshot:
        seen: set[str] = set()
        for asset in self.assets:
            if asset.symbol in seen:
                raise ValueError(f"duplicate symbol in snapshot: {asset.symbol}")
            seen.add(asset.symbol)
        return self
