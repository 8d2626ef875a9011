from __future__ import annotations

import asyncio
import http.client
import json
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from pydantic import ValidationError

from app.schemas.market import MarketSnapshot


class MarketDataFetchError(Exception):
    """The market-data endpoint could not produce a usable snapshot."""


def fetch_market_data(url: str, timeout: float | None = None) -> MarketSnapshot:
    request = Request(url, headers={"Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                raise MarketDataFetchError(f"Unexpected status {response.status} from {url}")
            body = response.read().decode("utf-8")
        payload = json.loads(body)
    except HTTPError as exc:
        raise MarketDataFetchError(f"HTTP {exc.code} from {url}") from exc
    except (OSError, http.client.HTTPException, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MarketDataFetchError(f"Could not read market data from {url}: {exc}") from exc

    if not isinstance(payload, dict):
        raise MarketDataFetchError("Market data payload is not an object")
    try:
        return MarketSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise MarketDataFetchError("Malformed market data payload") from exc


class HttpMarketDataSource:
    """Awaitable fetcher bound to one endpoint.

    The blocking request runs in a worker thread so the event loop keeps
    ticking while it is in flight.
    """

    def __init__(self, url: str, timeout: float | None = None) -> None:
        self.url = url
        self.timeout = timeout

    async def __call__(self) -> MarketSnapshot:
        return await asyncio.to_thread(fetch_market_data, self.url, self.timeout)
