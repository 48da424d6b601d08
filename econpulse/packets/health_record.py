"""HealthRecord assembly.

Assembled strictly from resolved indicators and the score; the only
narrative is the one the scorer chose.
"""
from __future__ import annotations

from econpulse.ingest.resolver import ResolvedIndicators, unavailable_sample
from econpulse.schemas import (
    CountryMetadata,
    EconomicMetrics,
    HealthRecord,
    HealthStatus,
    IndicatorKey,
    Pillars,
)
from econpulse.score.health import HealthScore
from econpulse.score.versions import DEGRADED_NARRATIVE, HEALTH_CALC_VERSION, INDICATOR_CODES


def build_health_record(
    metadata: CountryMetadata,
    resolved: ResolvedIndicators,
    health: HealthScore,
) -> HealthRecord:
    return HealthRecord(
        id=metadata.code.upper(),
        name=metadata.name,
        flag_code=metadata.flag_code,
        data_period=resolved.data_period,
        health_index=health.health_index,
        status=health.status,
        pillars=health.pillars,
        metrics=EconomicMetrics(**dict(resolved.indicators)),
        narrative=health.narrative,
        calc_version=HEALTH_CALC_VERSION,
    )


def build_degraded_record(country_code: str) -> HealthRecord:
    """Placeholder for a country whose metadata could not be resolved.

    Keeps the country visible with every value unavailable.
    """
    code = country_code.upper()
    metrics = EconomicMetrics(**{
        key.value: unavailable_sample(INDICATOR_CODES[key]) for key in IndicatorKey
    })
    return HealthRecord(
        id=code,
        name=code,
        flag_code=None,
        data_period=None,
        health_index=None,
        status=HealthStatus.WARNING,
        pillars=Pillars(),
        metrics=metrics,
        narrative=DEGRADED_NARRATIVE,
        calc_version=HEALTH_CALC_VERSION,
        degraded=True,
    )
