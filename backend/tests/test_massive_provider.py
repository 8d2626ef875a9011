import http.client
import io
import json
from unittest.mock import patch
from urllib.error import HTTPError

from app.config.settings import settings
from app.providers import massive
from app.schemas.market import AssetType


class FakeResponse:
    def __init__(self, payload: dict) -> None:
        self._body = io.BytesIO(json.dumps(payload).encode("utf-8"))

    def read(self) -> bytes:
        return self._body.read()

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *args) -> None:
        return None


def test_display_symbols() -> None:
    assert massive.display_symbol("X:BTCUSD", AssetType.CRYPTO) == "BTC/USDT"
    assert massive.display_symbol("X:DOGEUSD", AssetType.CRYPTO) == "DOGE/USDT"
    assert massive.display_symbol("C:EURUSD", AssetType.FOREX) == "EUR/USD"
    assert massive.display_symbol("AAPL", AssetType.STOCK) == "AAPL"


def test_classify_ticker() -> None:
    assert massive.classify_ticker("AAPL") is AssetType.STOCK
    assert massive.classify_ticker("SPY") is AssetType.ETF
    assert massive.classify_ticker("X:ETHUSD") is AssetType.CRYPTO
    assert massive.classify_ticker("C:USDJPY") is AssetType.FOREX
    assert massive.classify_ticker("UNKNOWN") is None


def test_ticker_universe() -> None:
    tickers = massive.all_tickers()

    assert len(tickers) == 20 + 8 + 15 + 10
    assert len(set(tickers)) == len(tickers)


def test_parse_quote_prefers_session_price() -> None:
    payload = {
        "results": [
            {
                "ticker": "X:BTCUSD",
                "session": {"price": 0, "close": 64000.0, "change": -120.5, "change_percent": -0.2, "volume": 900},
                "last_trade": {"price": 64100.0},
                "market_status": "open",
            }
        ]
    }

    quote = massive.parse_quote("X:BTCUSD", payload)

    assert quote is not None
    assert quote.price == 64100.0
    assert quote.change == -120.5
    assert quote.name == "Bitcoin / Tether"
    asset = massive.to_asset(quote)
    assert asset.symbol == "BTC/USDT"
    assert asset.type is AssetType.CRYPTO
    assert asset.market_cap == 0


def test_parse_quote_rejects_empty_and_error_results() -> None:
    assert massive.parse_quote("AAPL", {"results": []}) is None
    assert massive.parse_quote("AAPL", {"results": [{"error": "NOT_FOUND"}]}) is None
    assert massive.parse_quote("AAPL", ["not", "a", "dict"]) is None


def test_fetch_quote_without_key_returns_none(monkeypatch) -> None:
    monkeypatch.setattr(settings.providers, "massive_api_key", None)

    with patch("app.providers.massive.urlopen") as urlopen_mock:
        assert massive.fetch_quote("AAPL") is None

    urlopen_mock.assert_not_called()


def test_fetch_quote_builds_request(monkeypatch) -> None:
    monkeypatch.setattr(settings.providers, "massive_api_key", "test-key")
    payload = {"results": [{"ticker": "AAPL", "name": "Apple Inc.", "session": {"price": 190.0}}]}

    with patch("app.providers.massive.urlopen", return_value=FakeResponse(payload)) as urlopen_mock:
        quote = massive.fetch_quote("AAPL")

    request = urlopen_mock.call_args.args[0]
    assert request.full_url.startswith(f"{settings.providers.massive_base_url}/v3/snapshot?")
    assert "ticker=AAPL" in request.full_url
    assert "limit=1" in request.full_url
    assert quote is not None
    assert quote.price == 190.0


def test_fetch_quote_http_error_returns_none(monkeypatch) -> None:
    monkeypatch.setattr(settings.providers, "massive_api_key", "test-key")
    error = HTTPError("https://api.massive.com", 429, "rate limited", None, None)

    with patch("app.providers.massive.urlopen", side_effect=error):
        assert massive.fetch_quote("AAPL") is None


def test_fetch_quote_connection_errors_return_none(monkeypatch) -> None:
    monkeypatch.setattr(settings.providers, "massive_api_key", "test-key")
    errors = [
        ConnectionResetError("reset by peer"),
        http.client.RemoteDisconnected("closed"),
        http.client.IncompleteRead(b"{"),
        UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
    ]

    for error in errors:
        with patch("app.providers.massive.urlopen", side_effect=error):
            assert massive.fetch_quote("AAPL") is None
