"""Tests for the HTTP API routes."""
from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from econpulse.api.deps import get_country_cache, get_health_service, get_refresh_registry
from econpulse.ingest.country_cache import CountryListCache
from econpulse.jobs.registry import RefreshRegistry
from econpulse.main import app
from econpulse.schemas import CountryMetadata, CountryOption, IndicatorSample
from econpulse.service import HealthService


class FakeLookup:
    async def lookup_country_metadata(self, country_code):
        if country_code != "SWE":
            return None
        return CountryMetadata(code="SWE", name="Sweden", flag_code="SE")

    async def lookup_indicator(self, country_code, indicator_code, year_range):
        values = {
            "NY.GDP.MKTP.KD.ZG": 3.0,
            "FP.CPI.TOTL.ZG": 2.0,
            "GC.DOD.TOTL.GD.ZS": 40.0,
            "FI.RES.TOTL.MO": 6.0,
            "BN.CAB.XOKA.GD.ZS": 5.0,
        }
        return IndicatorSample(
            value=values[indicator_code], period="2024", source="World Bank", indicator_code=indicator_code,
        )


def _override_deps(registry: RefreshRegistry | None = None, cache: CountryListCache | None = None):
    service = HealthService(FakeLookup(), as_of=date(2026, 1, 1))
    registry = registry or RefreshRegistry()
    cache = cache or CountryListCache(AsyncMock(return_value=[
        CountryOption(code="ARG", name="Argentina", region="Latin America & Caribbean"),
        CountryOption(code="SWE", name="Sweden", region="Europe & Central Asia"),
    ]))
    app.dependency_overrides[get_health_service] = lambda: service
    app.dependency_overrides[get_refresh_registry] = lambda: registry
    app.dependency_overrides[get_country_cache] = lambda: cache
    return registry


client = TestClient(app)


def test_healthz():
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_not_initialised_without_lifespan():
    r = client.get("/v1/country/SWE/health")
    assert r.status_code == 503


def test_list_countries():
    _override_deps()
    try:
        r = client.get("/v1/countries")
        assert r.status_code == 200
        assert [c["code"] for c in r.json()] == ["ARG", "SWE"]
    finally:
        app.dependency_overrides.clear()


def test_country_health():
    _override_deps()
    try:
        r = client.get("/v1/country/swe/health")
        assert r.status_code == 200
        body = r.json()
        assert body["id"] == "SWE"
        assert body["health_index"] == 90.5
        assert body["status"] == "Success"
        assert body["pillars"]["burn_rate"] == 90
        assert body["metrics"]["debt_to_gdp"]["source"] == "World Bank"
        assert body["metrics"]["credit_to_gdp_gap"] is None
    finally:
        app.dependency_overrides.clear()


def test_unknown_country_is_degraded_not_404():
    _override_deps()
    try:
        r = client.get("/v1/country/XYZ/health")
        assert r.status_code == 200
        body = r.json()
        assert body["degraded"] is True
        assert body["status"] == "Warning"
        assert body["narrative"] == "Data fetch failed."
    finally:
        app.dependency_overrides.clear()


def test_invalid_country_code():
    _override_deps()
    try:
        r = client.get("/v1/country/not-a-code/health")
        assert r.status_code == 422
    finally:
        app.dependency_overrides.clear()


def test_refresh_then_get_dashboard():
    registry = _override_deps()
    try:
        r = client.post("/v1/dashboard/refresh", json={"codes": ["swe", "xyz"]})
        assert r.status_code == 200
        body = r.json()
        assert body["refresh"]["status"] == "applied"
        assert body["refresh"]["generation"] == 1
        assert [rec["id"] for rec in body["snapshot"]["records"]] == ["SWE", "XYZ"]

        r = client.get("/v1/dashboard", params={"codes": "SWE,XYZ"})
        assert r.status_code == 200
        assert r.json()["generation"] == 1
        assert registry.current_generation(["SWE", "XYZ"]) == 1
    finally:
        app.dependency_overrides.clear()


def test_dashboard_without_refresh_is_404():
    _override_deps()
    try:
        r = client.get("/v1/dashboard", params={"codes": "NOR"})
        assert r.status_code == 404
    finally:
        app.dependency_overrides.clear()


def test_refresh_requires_codes():
    _override_deps()
    try:
        r = client.post("/v1/dashboard/refresh", json={"codes": []})
        assert r.status_code == 422
    finally:
        app.dependency_overrides.clear()


def test_discard_dashboard():
    _override_deps()
    try:
        client.post("/v1/dashboard/refresh", json={"codes": ["SWE"]})
        r = client.delete("/v1/dashboard", params={"codes": "SWE"})
        assert r.status_code == 200
        assert client.get("/v1/dashboard", params={"codes": "SWE"}).status_code == 404
    finally:
        app.dependency_overrides.clear()
