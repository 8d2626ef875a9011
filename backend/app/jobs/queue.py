from __future__ import annotations

from redis import Redis
from rq import Queue
from rq.job import Job

from app.cache import acquire_refresh_lock, release_refresh_lock
from app.config.settings import settings
from app.jobs.market_refresh import run_market_refresh


def get_redis_connection() -> Redis:
    return Redis.from_url(settings.redis_url)


def get_queue(name: str | None = None) -> Queue:
    queue_name = name or settings.refresh_queue_name
    return Queue(name=queue_name, connection=get_redis_connection())


def enqueue_market_refresh() -> Job | None:
    """Queue one refresh; returns None if another is already pending."""
    if not acquire_refresh_lock():
        return None
    try:
        queue = get_queue()
        return queue.enqueue(run_market_refresh)
    except Exception:
        release_refresh_lock()
        raise
