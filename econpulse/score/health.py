"""Deterministic health scoring engine.

Pure functions: an IndicatorSet goes in, pillars, a composite index, a
status and a narrative come out. Missing inputs propagate as None.
"""
from __future__ import annotations

import math
from typing import NamedTuple

from econpulse.schemas import (
    HealthStatus,
    IndicatorKey,
    IndicatorSet,
    NarrativeTable,
    Pillars,
)
from econpulse.score.versions import (
    DEMOGRAPHICS_PLACEHOLDER,
    HEALTH_WEIGHTS,
    OVERHEATING_CLAUSE,
    OVERHEATING_THRESHOLD,
    REQUIRED_PILLARS,
    STATUS_NARRATIVES,
    STRONG_GROWTH_CLAUSE,
    STRONG_GROWTH_THRESHOLD,
    SUCCESS_THRESHOLD,
    WARNING_THRESHOLD,
)


class HealthScore(NamedTuple):
    pillars: Pillars
    health_index: float | None
    status: HealthStatus
    narrative: str


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(value, high))


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _pillar(value: float | None) -> int | None:
    if value is None:
        return None
    return int(_round_half_up(clamp(value)))


def liquidity_score(reserve_months: float | None) -> int | None:
    """Reserves in months of imports; six months or more scores 100."""
    if reserve_months is None:
        return None
    return _pillar(reserve_months / 6 * 100)


def burn_rate_score(inflation: float | None) -> int | None:
    """Each point of inflation costs five points; 20% inflation scores 0."""
    if inflation is None:
        return None
    return _pillar(100 - inflation * 5)


def debt_structure_score(debt_to_gdp: float | None) -> int | None:
    """Debt up to 40% of GDP is free, every point above costs one point."""
    if debt_to_gdp is None:
        return None
    return _pillar(100 - max(0.0, debt_to_gdp - 40))


def real_growth_score(gdp_growth: float | None) -> int | None:
    """-2% growth scores 0, +3% or better scores 100."""
    if gdp_growth is None:
        return None
    return _pillar((gdp_growth + 2) * 20)


def compute_pillars(indicators: IndicatorSet) -> Pillars:
    return Pillars(
        liquidity=liquidity_score(indicators.value(IndicatorKey.RESERVE_MONTHS)),
        burn_rate=burn_rate_score(indicators.value(IndicatorKey.INFLATION)),
        debt_structure=debt_structure_score(indicators.value(IndicatorKey.DEBT_TO_GDP)),
        real_growth=real_growth_score(indicators.value(IndicatorKey.GDP_GROWTH)),
        # No demographic series yet; neutral midpoint
        demographics=DEMOGRAPHICS_PLACEHOLDER,
    )


def calculate_health_index(pillars: Pillars) -> float | None:
    """Weighted sum of the pillars, rounded to one decimal.

    Returns None if any data-backed pillar is missing. Weights are never
    renormalised over the pillars that happen to be present.
    """
    values = pillars.model_dump()
    if any(values[name] is None for name in REQUIRED_PILLARS):
        return None

    if values["demographics"] is None:
        values["demographics"] = DEMOGRAPHICS_PLACEHOLDER

    index = sum(HEALTH_WEIGHTS[name] * values[name] for name in HEALTH_WEIGHTS)
    return _round_half_up(index, 1)


def get_health_status(index: float | None) -> HealthStatus:
    if index is None:
        return HealthStatus.UNKNOWN
    if index >= SUCCESS_THRESHOLD:
        return HealthStatus.SUCCESS
    if index >= WARNING_THRESHOLD:
        return HealthStatus.WARNING
    return HealthStatus.DANGER


def build_narrative(
    status: HealthStatus,
    indicators: IndicatorSet,
    country_code: str | None = None,
    narratives: NarrativeTable | None = None,
) -> str:
    """Pick the canned sentence for a status and append signal clauses.

    A curated narrative for the country replaces the whole text.
    """
    if narratives and country_code and country_code.upper() in narratives:
        return narratives[country_code.upper()]

    parts = [STATUS_NARRATIVES[status]]

    growth = indicators.value(IndicatorKey.GDP_GROWTH)
    if growth is not None and growth > STRONG_GROWTH_THRESHOLD:
        parts.append(STRONG_GROWTH_CLAUSE)

    inflation = indicators.value(IndicatorKey.INFLATION)
    if inflation is not None and inflation > OVERHEATING_THRESHOLD:
        parts.append(OVERHEATING_CLAUSE)

    return " ".join(parts)


def score(
    indicators: IndicatorSet,
    country_code: str | None = None,
    narratives: NarrativeTable | None = None,
) -> HealthScore:
    pillars = compute_pillars(indicators)
    health_index = calculate_health_index(pillars)
    status = get_health_status(health_index)
    narrative = build_narrative(status, indicators, country_code, narratives)
    return HealthScore(pillars, health_index, status, narrative)
