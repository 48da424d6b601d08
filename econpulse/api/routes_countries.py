"""Country API endpoints."""
from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException

from econpulse.api.deps import get_country_cache, get_health_service
from econpulse.ingest.country_cache import CountryListCache
from econpulse.schemas import CountryOption, HealthRecord
from econpulse.service import HealthService

router = APIRouter(prefix="/v1", tags=["countries"])

_CODE_RE = re.compile(r"^[A-Za-z0-9]{2,3}$")


def validate_country_code(code: str) -> str:
    code = code.strip()
    if not _CODE_RE.match(code):
        raise HTTPException(status_code=422, detail=f"Invalid country code '{code}'")
    return code.upper()


@router.get("/countries", response_model=list[CountryOption])
async def list_countries(cache: CountryListCache = Depends(get_country_cache)):
    """Return all selectable countries (aggregates excluded), sorted by name."""
    return await cache.get()


@router.get("/country/{code}/health", response_model=HealthRecord)
async def country_health(
    code: str,
    service: HealthService = Depends(get_health_service),
):
    """Return a fresh health record. Unknown countries come back degraded, not 404."""
    return await service.get_health_record(validate_country_code(code))
