"""FastAPI dependencies: shared objects created in the app lifespan."""
from __future__ import annotations

from fastapi import HTTPException, Request

from econpulse.ingest.country_cache import CountryListCache
from econpulse.jobs.registry import RefreshRegistry
from econpulse.service import HealthService


def _state(request: Request, name: str):
    obj = getattr(request.app.state, name, None)
    if obj is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return obj


def get_health_service(request: Request) -> HealthService:
    return _state(request, "health_service")


def get_refresh_registry(request: Request) -> RefreshRegistry:
    return _state(request, "refresh_registry")


def get_country_cache(request: Request) -> CountryListCache:
    return _state(request, "country_cache")
