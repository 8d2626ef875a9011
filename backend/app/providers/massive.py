from __future__ import annotations

import http.client
import json
import logging
from dataclasses import dataclass
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from app.config.settings import settings
from app.schemas.market import Asset, AssetType

logger = logging.getLogger(__name__)

_SNAPSHOT_PATH = "/v3/snapshot"

STOCK_TICKERS = (
    "AAPL", "GOOGL", "MSFT", "AMZN", "NVDA", "TSLA", "META",
    "AMD", "INTC", "NFLX", "DIS", "BA", "JPM", "V", "MA",
    "WMT", "KO", "XOM", "PG", "CRM",
)
ETF_TICKERS = ("SPY", "QQQ", "VTI", "IWM", "GLD", "DIA", "ARKK", "XLF")
CRYPTO_TICKERS = (
    "X:BTCUSD", "X:ETHUSD", "X:SOLUSD", "X:BNBUSD", "X:XRPUSD", "X:ADAUSD", "X:DOGEUSD",
    "X:DOTUSD", "X:LTCUSD", "X:AVAXUSD", "X:LINKUSD", "X:SHIBUSD", "X:TRXUSD", "X:ATOMUSD",
    "X:UNIUSD",
)
FOREX_TICKERS = (
    "C:EURUSD", "C:GBPUSD", "C:USDJPY", "C:USDCHF", "C:AUDUSD",
    "C:NZDUSD", "C:USDCAD", "C:EURGBP", "C:USDSEK", "C:USDSGD",
)

_NAMES = {
    "AAPL": "Apple Inc.",
    "GOOGL": "Alphabet Inc.",
    "MSFT": "Microsoft Corp.",
    "AMZN": "Amazon.com Inc.",
    "NVDA": "NVIDIA Corp.",
    "TSLA": "Tesla Inc.",
    "META": "Meta Platforms",
    "AMD": "Advanced Micro Devices",
    "INTC": "Intel Corp.",
    "NFLX": "Netflix Inc.",
    "DIS": "Walt Disney Co.",
    "BA": "Boeing Co.",
    "JPM": "JPMorgan Chase & Co.",
    "V": "Visa Inc.",
    "MA": "Mastercard Inc.",
    "WMT": "Walmart Inc.",
    "KO": "Coca-Cola Co.",
    "XOM": "Exxon Mobil Corp.",
    "PG": "Procter & Gamble Co.",
    "CRM": "Salesforce Inc.",
    "SPY": "SPDR S&P 500 ETF",
    "QQQ": "Invesco QQQ Trust",
    "VTI": "Vanguard Total Stock Market",
    "IWM": "iShares Russell 2000",
    "GLD": "SPDR Gold Shares",
    "DIA": "SPDR Dow Jones Industrial Avg ETF",
    "ARKK": "ARK Innovation ETF",
    "XLF": "Financial Select Sector SPDR Fund",
    "X:BTCUSD": "Bitcoin / Tether",
    "X:ETHUSD": "Ethereum / Tether",
    "X:SOLUSD": "Solana / Tether",
    "X:BNBUSD": "Binance Coin / Tether",
    "X:XRPUSD": "Ripple / Tether",
    "X:ADAUSD": "Cardano / Tether",
    "X:DOGEUSD": "Dogecoin / Tether",
    "X:DOTUSD": "Polkadot / Tether",
    "X:LTCUSD": "Litecoin / Tether",
    "X:AVAXUSD": "Avalanche / Tether",
    "X:LINKUSD": "Chainlink / Tether",
    "X:SHIBUSD": "Shiba Inu / Tether",
    "X:TRXUSD": "TRON / Tether",
    "X:ATOMUSD": "Cosmos / Tether",
    "X:UNIUSD": "Uniswap / Tether",
    "C:EURUSD": "Euro / US Dollar",
    "C:GBPUSD": "British Pound / US Dollar",
    "C:USDJPY": "US Dollar / Japanese Yen",
    "C:USDCHF": "US Dollar / Swiss Franc",
    "C:AUDUSD": "Australian Dollar / US Dollar",
    "C:NZDUSD": "New Zealand Dollar / US Dollar",
    "C:USDCAD": "US Dollar / Canadian Dollar",
    "C:EURGBP": "Euro / British Pound",
    "C:USDSEK": "US Dollar / Swedish Krona",
    "C:USDSGD": "US Dollar / Singapore Dollar",
}

_missing_key_logged = False


@dataclass(frozen=True)
class UpstreamQuote:
    ticker: str
    name: str
    price: float
    change: float
    change_percent: float
    volume: float


def all_tickers() -> tuple[str, ...]:
    return STOCK_TICKERS + ETF_TICKERS + CRYPTO_TICKERS + FOREX_TICKERS


def classify_ticker(ticker: str) -> AssetType | None:
    if ticker in STOCK_TICKERS:
        return AssetType.STOCK
    if ticker in ETF_TICKERS:
        return AssetType.ETF
    if ticker.startswith("X:"):
        return AssetType.CRYPTO
    if ticker.startswith("C:"):
        return AssetType.FOREX
    return None


def display_symbol(ticker: str, asset_type: AssetType) -> str:
    if asset_type is AssetType.CRYPTO:
        base = ticker.removeprefix("X:").removesuffix("USD")
        return f"{base}/USDT"
    if asset_type is AssetType.FOREX:
        pair = ticker.removeprefix("C:")
        return f"{pair[:3]}/{pair[3:]}"
    return ticker


def display_name(ticker: str) -> str:
    return _NAMES.get(ticker, ticker)


def to_asset(quote: UpstreamQuote) -> Asset | None:
    asset_type = classify_ticker(quote.ticker)
    if asset_type is None:
        return None
    return Asset(
        symbol=display_symbol(quote.ticker, asset_type),
        name=quote.name,
        price=max(quote.price, 0.0),
        change_24h=quote.change,
        change_percent_24h=quote.change_percent,
        volume_24h=max(quote.volume, 0.0),
        market_cap=0,
        type=asset_type,
    )


def _build_url(params: dict[str, str]) -> str:
    base_url = settings.providers.massive_base_url.rstrip("/")
    return f"{base_url}{_SNAPSHOT_PATH}?{urlencode(params)}"


def _number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _first_number(*values: object) -> float:
    # Zero counts as missing, like the upstream's own fallbacks.
    for value in values:
        number = _number(value)
        if number:
            return number
    return 0.0


def parse_quote(ticker: str, payload: object) -> UpstreamQuote | None:
    if not isinstance(payload, dict):
        return None
    results = payload.get("results")
    if not isinstance(results, list) or not results:
        logger.warning("Massive returned no results for %s", ticker)
        return None
    result = results[0]
    if not isinstance(result, dict):
        return None
    if result.get("error"):
        logger.warning("Massive returned an error for %s: %s", ticker, result["error"])
        return None

    session = result.get("session") or {}
    last_trade = result.get("last_trade") or {}
    if not isinstance(session, dict) or not isinstance(last_trade, dict):
        return None

    resolved_ticker = result.get("ticker") or ticker
    return UpstreamQuote(
        ticker=resolved_ticker,
        name=result.get("name") or display_name(resolved_ticker),
        price=_first_number(session.get("price"), last_trade.get("price"), session.get("close")),
        change=_first_number(session.get("change")),
        change_percent=_first_number(session.get("change_percent")),
        volume=_first_number(session.get("volume")),
    )


def fetch_quote(ticker: str) -> UpstreamQuote | None:
    global _missing_key_logged
    api_key = settings.providers.massive_api_key
    if not api_key:
        if not _missing_key_logged:
            logger.warning("MARKETSYNC_MASSIVE_API_KEY not set; upstream quotes are unavailable")
            _missing_key_logged = True
        return None

    url = _build_url({"ticker": ticker, "limit": "1", "apiKey": api_key})
    request = Request(url)
    try:
        with urlopen(request, timeout=settings.providers.request_timeout_seconds) as response:
            body = response.read().decode("utf-8")
        payload = json.loads(body)
    except HTTPError as exc:
        if exc.code == 429:
            logger.warning("Massive rate limited the request for %s", ticker)
        else:
            logger.warning("Massive request for %s failed: HTTP %s", ticker, exc.code)
        return None
    except (OSError, http.client.HTTPException, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Massive request for %s failed: %s", ticker, type(exc).__name__)
        return None

    return parse_quote(ticker, payload)
