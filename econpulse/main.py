from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from econpulse.api.health import router as health_router
from econpulse.api.routes_countries import router as countries_router
from econpulse.api.routes_dashboard import router as dashboard_router
from econpulse.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one shared HTTP client for all upstream lookups
    settings = get_settings()

    from econpulse.ingest.country_cache import CountryListCache
    from econpulse.jobs.registry import RefreshRegistry
    from econpulse.service import HealthService

    client = httpx.AsyncClient(timeout=settings.request_timeout)
    service = HealthService.from_settings(client, settings)
    logger.info(
        "Loaded %d override sets, %d narratives",
        len(service.overrides), len(service.narratives),
    )

    app.state.health_service = service
    app.state.refresh_registry = RefreshRegistry(max_sets=settings.max_refresh_sets)
    app.state.country_cache = CountryListCache(service.lookup.list_countries)

    yield

    # Shutdown
    await client.aclose()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(title="EconPulse", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app_url, "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(countries_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
