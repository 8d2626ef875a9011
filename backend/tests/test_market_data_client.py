import asyncio
import http.client
import io
import json
from unittest.mock import patch
from urllib.error import HTTPError, URLError

import pytest

from app.providers.market_data import (
    HttpMarketDataSource,
    MarketDataFetchError,
    fetch_market_data,
)
from app.schemas.market import AssetType

URL = "http://localhost:5000/api/market-data"


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self.status = status
        self._body = io.BytesIO(body)

    def read(self) -> bytes:
        return self._body.read()

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *args) -> None:
        return None


def wire_payload() -> dict:
    return {
        "assets": [
            {
                "symbol": "BTC/USDT",
                "name": "Bitcoin / Tether",
                "price": 43250.82,
                "change24h": 1250.5,
                "changePercent24h": 2.98,
                "volume24h": 28500000000,
                "marketCap": 0,
                "type": "crypto",
            },
            {
                "symbol": "AAPL",
                "name": "Apple Inc.",
                "price": 185.92,
                "change24h": -2.45,
                "changePercent24h": -1.34,
                "volume24h": 52000000,
                "marketCap": 0,
                "type": "stock",
            },
        ],
        "lastFetchTime": 1700000000000,
        "stale": True,
    }


def test_fetch_parses_wire_shape() -> None:
    body = json.dumps(wire_payload()).encode("utf-8")
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(body)) as urlopen_mock:
        snapshot = fetch_market_data(URL, timeout=3)

    assert urlopen_mock.call_args.kwargs["timeout"] == 3
    assert snapshot.stale is True
    assert snapshot.last_fetch_time == 1700000000000
    assert [asset.symbol for asset in snapshot.assets] == ["BTC/USDT", "AAPL"]
    assert snapshot.assets[0].type is AssetType.CRYPTO
    assert snapshot.assets[1].change_24h == -2.45


def test_http_error_raises_fetch_error() -> None:
    error = HTTPError(URL, 503, "unavailable", None, None)
    with patch("app.providers.market_data.urlopen", side_effect=error):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_network_error_raises_fetch_error() -> None:
    with patch("app.providers.market_data.urlopen", side_effect=URLError("refused")):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_non_200_status_raises_fetch_error() -> None:
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(b"", status=204)):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_invalid_json_raises_fetch_error() -> None:
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(b"<html>")):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_unknown_asset_type_raises_fetch_error() -> None:
    payload = wire_payload()
    payload["assets"][0]["type"] = "bond"
    body = json.dumps(payload).encode("utf-8")
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(body)):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_duplicate_symbols_raise_fetch_error() -> None:
    payload = wire_payload()
    payload["assets"][1]["symbol"] = "BTC/USDT"
    body = json.dumps(payload).encode("utf-8")
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(body)):
        with pytest.raises(MarketDataFetchError):
            fetch_market_data(URL)


def test_http_source_is_awaitable() -> None:
    body = json.dumps(wire_payload()).encode("utf-8")
    source = HttpMarketDataSource(URL)
    with patch("app.providers.market_data.urlopen", return_value=FakeResponse(body)):
        snapshot = asyncio.run(source())

    assert len(snapshot.assets) == 2


def test_dropped_connection_raises_fetch_error() -> None:
    for error in (
        ConnectionResetError("reset by peer"),
        http.client.RemoteDisconnected("closed"),
        http.client.IncompleteRead(b"{"),
    ):
        with patch("app.providers.market_data.urlopen", side_effect=error):
            with pytest.raises(MarketDataFetchError):
                fetch_market_data(URL)
