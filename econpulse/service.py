"""Per-country pipeline: metadata → resolve → score → record."""
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone

import httpx

from econpulse.config import Settings
from econpulse.ingest.curated import load_narrative_table, load_override_table
from econpulse.ingest.lookup import CountryLookup, LookupFailed
from econpulse.ingest.resolver import resolve
from econpulse.ingest.world_bank import WorldBankClient
from econpulse.packets.health_record import build_degraded_record, build_health_record
from econpulse.schemas import HealthRecord, NarrativeTable, OverrideTable, YearRange
from econpulse.score.health import score

logger = logging.getLogger(__name__)


def _current_year() -> int:
    return datetime.now(tz=timezone.utc).year


class HealthService:
    """Builds one HealthRecord per requested country. Never raises."""

    def __init__(
        self,
        lookup: CountryLookup,
        overrides: OverrideTable | None = None,
        narratives: NarrativeTable | None = None,
        primary_window_years: int = 5,
        alternate_window_years: int = 25,
        max_concurrent: int = 8,
        as_of: date | None = None,
    ) -> None:
        self.lookup = lookup
        self.overrides = overrides or {}
        self.narratives = narratives or {}
        self.primary_window_years = primary_window_years
        self.alternate_window_years = alternate_window_years
        self.max_concurrent = max_concurrent
        self.as_of = as_of

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "HealthService":
        lookup = WorldBankClient(client, settings.world_bank_base_url, settings.request_timeout)
        return cls(
            lookup=lookup,
            overrides=load_override_table(settings.overrides_path),
            narratives=load_narrative_table(settings.narratives_path),
            primary_window_years=settings.primary_window_years,
            alternate_window_years=settings.alternate_window_years,
            max_concurrent=settings.max_concurrent_countries,
        )

    def year_ranges(self) -> tuple[YearRange, YearRange]:
        end = self.as_of.year if self.as_of else _current_year()
        return (
            YearRange(end - self.primary_window_years, end),
            YearRange(end - self.alternate_window_years, end),
        )

    async def get_health_record(self, country_code: str) -> HealthRecord:
        code = country_code.strip().upper()
        try:
            return await self._build(code)
        except Exception:
            logger.exception("Health record for %s failed", code)
            return build_degraded_record(code)

    async def _build(self, code: str) -> HealthRecord:
        try:
            metadata = await self.lookup.lookup_country_metadata(code)
        except LookupFailed as e:
            logger.warning("Country %s metadata lookup failed: %s", code, e)
            return build_degraded_record(code)

        if metadata is None:
            logger.warning("Country %s not found", code)
            return build_degraded_record(code)

        # ISO2 requests resolve to the ISO3 id; curated tables are keyed by it
        code = metadata.code.upper()
        primary_range, alternate_range = self.year_ranges()
        logger.info("Resolving %s (%s) for %d:%d", code, metadata.name, *primary_range)
        resolved = await resolve(
            code,
            self.lookup,
            self.overrides,
            primary_range,
            alternate_range,
            log_fn=logger.info,
        )
        health = score(resolved.indicators, country_code=code, narratives=self.narratives)
        logger.info(
            "  %s: index=%s status=%s period=%s",
            code, health.health_index, health.status.value, resolved.data_period,
        )
        return build_health_record(metadata, resolved, health)

    async def get_health_records(self, country_codes: list[str]) -> list[HealthRecord]:
        """Fetch countries in parallel; output order follows the request."""
        sem = asyncio.Semaphore(self.max_concurrent)

        async def _one(code: str) -> HealthRecord:
            async with sem:
                return await self.get_health_record(code)

        return list(await asyncio.gather(*(_one(c) for c in country_codes)))
