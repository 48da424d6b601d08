"""Dashboard refresh endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from econpulse.api.deps import get_health_service, get_refresh_registry
from econpulse.api.routes_countries import validate_country_code
from econpulse.config import get_settings
from econpulse.jobs.registry import RefreshRegistry
from econpulse.jobs.runner import run_refresh
from econpulse.schemas import DashboardSnapshot, RefreshRequest
from econpulse.service import HealthService

router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])


def _parse_codes(raw: list[str]) -> list[str]:
    codes = [validate_country_code(c) for c in raw if c.strip()]
    if not codes:
        raise HTTPException(status_code=422, detail="At least one country code is required")
    return codes


@router.post("/refresh")
async def refresh_dashboard(
    body: RefreshRequest,
    registry: RefreshRegistry = Depends(get_refresh_registry),
    service: HealthService = Depends(get_health_service),
):
    """Refetch a country set. A newer refresh of the same set wins."""
    codes = _parse_codes(body.codes)
    refresh = await run_refresh(registry, service, codes)
    snapshot = registry.latest(codes)
    return {
        "refresh": refresh.to_dict(),
        "snapshot": snapshot.model_dump(mode="json") if snapshot else None,
    }


@router.get("", response_model=DashboardSnapshot)
async def get_dashboard(
    codes: str | None = Query(None, description="Comma-separated country codes"),
    registry: RefreshRegistry = Depends(get_refresh_registry),
):
    """Return the latest applied snapshot for a country set."""
    raw = codes.split(",") if codes else get_settings().default_countries
    parsed = _parse_codes(raw)
    snapshot = registry.latest(parsed)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No refresh has completed for these countries")
    return snapshot


@router.delete("")
async def discard_dashboard(
    codes: str = Query(..., description="Comma-separated country codes"),
    registry: RefreshRegistry = Depends(get_refresh_registry),
):
    """Drop a country set; refreshes still in flight for it are discarded on arrival."""
    parsed = _parse_codes(codes.split(","))
    if not registry.discard(parsed):
        raise HTTPException(status_code=404, detail="Unknown country set")
    return {"ok": True}
