"""World Bank Indicators API client."""
from __future__ import annotations

import logging

import httpx

from econpulse.ingest.lookup import LookupFailed
from econpulse.schemas import CountryMetadata, CountryOption, IndicatorSample, YearRange
from econpulse.score.versions import PRIMARY_SOURCE

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.worldbank.org/v2"

# Transport errors plus payloads that do not have the expected shape
_LOOKUP_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError)


async def fetch_world_bank_indicator(
    client: httpx.AsyncClient,
    country_code: str,
    indicator: str,
    start_year: int,
    end_year: int,
    base_url: str = _BASE_URL,
    timeout: float = 30,
) -> tuple[list[dict], str]:
    """Fetch indicator data from World Bank API.

    Returns (parsed data points newest first, raw response text).
    """
    url = f"{base_url}/country/{country_code}/indicator/{indicator}"
    params = {"date": f"{start_year}:{end_year}", "format": "json", "per_page": "500"}
    resp = await client.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    raw = resp.text
    data = resp.json()

    # World Bank returns [metadata, data_array]; errors come back as [{"message": [...]}]
    if not isinstance(data, list) or len(data) < 2 or data[1] is None:
        return [], raw

    points = []
    for item in data[1]:
        if item.get("value") is not None:
            points.append({"date": str(item["date"]), "value": float(item["value"])})
    points.sort(key=lambda p: p["date"], reverse=True)
    return points, raw


async def fetch_country_details(
    client: httpx.AsyncClient,
    country_code: str,
    base_url: str = _BASE_URL,
    timeout: float = 30,
) -> dict | None:
    """Fetch the country record (name, iso2Code, region...) or None if unknown."""
    resp = await client.get(
        f"{base_url}/country/{country_code}",
        params={"format": "json"},
        timeout=timeout,
    )
    resp.raise_for_status()
    data = resp.json()

    if isinstance(data, list) and len(data) > 1 and data[1]:
        return data[1][0]
    return None


async def fetch_country_list(
    client: httpx.AsyncClient,
    base_url: str = _BASE_URL,
    timeout: float = 30,
) -> list[dict]:
    """Fetch every economy the API knows, aggregates included."""
    resp = await client.get(
        f"{base_url}/country",
        params={"format": "json", "per_page": "300"},
        timeout=timeout,
    )
    resp.raise_for_status()
    data = resp.json()

    if not isinstance(data, list) or len(data) < 2 or data[1] is None:
        return []
    return data[1]


def _is_aggregate(item: dict) -> bool:
    # Regions and income groups have no region of their own and no capital
    return (item.get("region") or {}).get("iso2code") == "NA" or not item.get("capitalCity")


class WorldBankClient:
    """Indicator and metadata lookups backed by the World Bank API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
        timeout: float = 30,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def lookup_indicator(
        self,
        country_code: str,
        indicator_code: str,
        year_range: YearRange,
    ) -> IndicatorSample | None:
        try:
            points, _ = await fetch_world_bank_indicator(
                self._client,
                country_code,
                indicator_code,
                year_range.start,
                year_range.end,
                base_url=self._base_url,
                timeout=self._timeout,
            )
        except _LOOKUP_ERRORS as e:
            raise LookupFailed(f"{indicator_code} for {country_code}", e) from e

        if not points:
            return None

        latest = points[0]
        return IndicatorSample(
            value=latest["value"],
            period=latest["date"],
            source=PRIMARY_SOURCE,
            indicator_code=indicator_code,
        )

    async def lookup_country_metadata(self, country_code: str) -> CountryMetadata | None:
        try:
            details = await fetch_country_details(
                self._client, country_code, base_url=self._base_url, timeout=self._timeout,
            )
            if details is None:
                return None
            return CountryMetadata(
                code=details.get("id") or country_code,
                name=details["name"],
                flag_code=details.get("iso2Code") or None,
                region=(details.get("region") or {}).get("value"),
            )
        except _LOOKUP_ERRORS as e:
            raise LookupFailed(f"country details for {country_code}", e) from e

    async def list_countries(self) -> list[CountryOption]:
        """Return real countries (aggregates filtered out), sorted by name."""
        try:
            items = await fetch_country_list(self._client, base_url=self._base_url, timeout=self._timeout)
            options = [
                CountryOption(
                    code=item["id"],
                    name=item["name"],
                    region=(item.get("region") or {}).get("value", ""),
                )
                for item in items
                if not _is_aggregate(item)
            ]
        except _LOOKUP_ERRORS as e:
            raise LookupFailed("country list", e) from e

        options.sort(key=lambda c: c.name)
        logger.info("Loaded %d countries from World Bank", len(options))
        return options
