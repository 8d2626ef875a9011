"""
Application entry point.

Creates the FastAPI application, configures logging and mounts the
market-data router. Refreshes run in an rq worker:

    rq worker market-refresh
"""

from fastapi import FastAPI

from app.api.routes import router
from app.config.settings import settings
from app.logging import configure_logging

configure_logging(settings.log_level)

app = FastAPI(title="marketsync")
app.include_router(router)
