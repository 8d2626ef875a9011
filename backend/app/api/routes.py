import logging
import time

from fastapi import APIRouter

from app.cache import get_snapshot
from app.config.settings import settings
from app.jobs.queue import enqueue_market_refresh
from app.schemas.market import MarketSnapshot

logger = logging.getLogger(__name__)

router = APIRouter()


def _needs_refresh(snapshot: MarketSnapshot | None, now_ms: int) -> bool:
    if snapshot is None:
        return True
    return now_ms - snapshot.last_fetch_time > settings.cache.ttl_seconds * 1000


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/api/market-data", response_model=MarketSnapshot)
def market_data_endpoint() -> MarketSnapshot:
    snapshot = get_snapshot()
    if _needs_refresh(snapshot, int(time.time() * 1000)):
        try:
            job = enqueue_market_refresh()
        except Exception:
            logger.warning("Could not enqueue a market data refresh", exc_info=True)
        else:
            if job is not None:
                logger.debug("Enqueued market data refresh job %s", job.id)
    if snapshot is None:
        return MarketSnapshot()
    return snapshot
