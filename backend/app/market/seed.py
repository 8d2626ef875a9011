from __future__ import annotations

from app.market.buckets import AssetBuckets
from app.schemas.market import Asset, AssetType


def _asset(
    symbol: str,
    name: str,
    price: float,
    change: float,
    change_percent: float,
    volume: float,
    market_cap: float,
    asset_type: AssetType,
) -> Asset:
    return Asset(
        symbol=symbol,
        name=name,
        price=price,
        change_24h=change,
        change_percent_24h=change_percent,
        volume_24h=volume,
        market_cap=market_cap,
        type=asset_type,
    )


CRYPTO_ASSETS: tuple[Asset, ...] = (
    _asset("BTC/USDT", "Bitcoin", 43250.82, 1250.50, 2.98, 28_500_000_000, 847_000_000_000, AssetType.CRYPTO),
    _asset("ETH/USDT", "Ethereum", 2285.45, -45.20, -1.94, 15_200_000_000, 274_000_000_000, AssetType.CRYPTO),
    _asset("SOL/USDT", "Solana", 98.76, 5.32, 5.69, 2_800_000_000, 42_000_000_000, AssetType.CRYPTO),
    _asset("BNB/USDT", "Binance Coin", 312.45, 8.90, 2.93, 1_200_000_000, 48_000_000_000, AssetType.CRYPTO),
    _asset("XRP/USDT", "Ripple", 0.6245, -0.0125, -1.96, 1_500_000_000, 34_000_000_000, AssetType.CRYPTO),
    _asset("ADA/USDT", "Cardano", 0.5823, 0.0245, 4.39, 650_000_000, 20_000_000_000, AssetType.CRYPTO),
    _asset("DOGE/USDT", "Dogecoin", 0.0892, 0.0034, 3.96, 890_000_000, 12_500_000_000, AssetType.CRYPTO),
    _asset("DOT/USDT", "Polkadot", 7.45, -0.23, -2.99, 320_000_000, 9_500_000_000, AssetType.CRYPTO),
)

FOREX_ASSETS: tuple[Asset, ...] = (
    _asset("EUR/USD", "Euro / US Dollar", 1.0845, 0.0025, 0.23, 125_000_000_000, 0, AssetType.FOREX),
    _asset("GBP/USD", "British Pound / US Dollar", 1.2650, -0.0018, -0.14, 85_000_000_000, 0, AssetType.FOREX),
    _asset("USD/JPY", "US Dollar / Japanese Yen", 148.25, 0.45, 0.30, 95_000_000_000, 0, AssetType.FOREX),
    _asset("USD/CHF", "US Dollar / Swiss Franc", 0.8765, -0.0012, -0.14, 45_000_000_000, 0, AssetType.FOREX),
    _asset("AUD/USD", "Australian Dollar / US Dollar", 0.6542, 0.0032, 0.49, 35_000_000_000, 0, AssetType.FOREX),
)

STOCK_ASSETS: tuple[Asset, ...] = (
    _asset("AAPL", "Apple Inc.", 185.92, 2.45, 1.34, 52_000_000, 2_900_000_000_000, AssetType.STOCK),
    _asset("GOOGL", "Alphabet Inc.", 141.80, -1.20, -0.84, 23_000_000, 1_780_000_000_000, AssetType.STOCK),
    _asset("MSFT", "Microsoft Corp.", 378.91, 4.56, 1.22, 18_500_000, 2_810_000_000_000, AssetType.STOCK),
    _asset("AMZN", "Amazon.com Inc.", 155.34, 3.21, 2.11, 41_000_000, 1_610_000_000_000, AssetType.STOCK),
    _asset("NVDA", "NVIDIA Corp.", 495.22, 12.45, 2.58, 45_000_000, 1_220_000_000_000, AssetType.STOCK),
    _asset("TSLA", "Tesla Inc.", 248.48, -5.67, -2.23, 98_000_000, 790_000_000_000, AssetType.STOCK),
    _asset("META", "Meta Platforms", 354.76, 7.89, 2.27, 15_000_000, 920_000_000_000, AssetType.STOCK),
)

ETF_ASSETS: tuple[Asset, ...] = (
    _asset("SPY", "SPDR S&P 500 ETF", 478.92, 3.45, 0.73, 65_000_000, 450_000_000_000, AssetType.ETF),
    _asset("QQQ", "Invesco QQQ Trust", 405.67, 5.12, 1.28, 42_000_000, 210_000_000_000, AssetType.ETF),
    _asset("VTI", "Vanguard Total Stock Market", 242.34, 1.89, 0.79, 4_500_000, 350_000_000_000, AssetType.ETF),
    _asset("IWM", "iShares Russell 2000", 198.45, -2.34, -1.17, 28_000_000, 58_000_000_000, AssetType.ETF),
    _asset("GLD", "SPDR Gold Shares", 189.23, 0.45, 0.24, 8_500_000, 58_000_000_000, AssetType.ETF),
)


def default_buckets() -> AssetBuckets:
    return AssetBuckets(
        crypto=CRYPTO_ASSETS,
        forex=FOREX_ASSETS,
        stock=STOCK_ASSETS,
        etf=ETF_ASSETS,
    )
