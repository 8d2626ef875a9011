from __future__ import annotations

import logging

from pydantic import ValidationError
from redis import Redis

from app.config.settings import settings
from app.schemas.market import MarketSnapshot

logger = logging.getLogger(__name__)


def _get_client() -> Redis:
    return Redis.from_url(settings.redis_url)


def get_snapshot() -> MarketSnapshot | None:
    try:
        client = _get_client()
        raw = client.get(settings.cache.snapshot_key)
    except Exception:
        logger.warning("Could not read the market snapshot from redis", exc_info=True)
        return None

    if not raw:
        return None

    try:
        return MarketSnapshot.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding unreadable market snapshot in redis")
        return None


def set_snapshot(snapshot: MarketSnapshot) -> None:
    # No expiry: this is the last known good snapshot.
    try:
        client = _get_client()
        client.set(settings.cache.snapshot_key, snapshot.model_dump_json(by_alias=True))
    except Exception:
        logger.warning("Could not store the market snapshot in redis", exc_info=True)
        return None


def acquire_refresh_lock() -> bool:
    try:
        client = _get_client()
        acquired = client.set(
            settings.cache.refresh_lock_key,
            "1",
            nx=True,
            ex=settings.cache.refresh_lock_seconds,
        )
    except Exception:
        logger.warning("Could not take the market refresh lock", exc_info=True)
        return False
    return bool(acquired)


def release_refresh_lock() -> None:
    try:
        client = _get_client()
        client.delete(settings.cache.refresh_lock_key)
    except Exception:
        logger.warning("Could not release the market refresh lock", exc_info=True)
        return None
