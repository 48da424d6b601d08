"""Indicator resolution: primary lookups, alternate debt series, overrides."""
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Callable, Iterable, NamedTuple

from econpulse.ingest.lookup import IndicatorLookup, LookupFailed
from econpulse.schemas import (
    IndicatorKey,
    IndicatorSample,
    IndicatorSet,
    OverrideTable,
    SampleOrigin,
    YearRange,
)
from econpulse.score.versions import ALTERNATE_DEBT_CODES, INDICATOR_CODES, PRIMARY_SOURCE


class ResolvedIndicators(NamedTuple):
    indicators: IndicatorSet
    data_period: str | None


def unavailable_sample(indicator_code: str | None = None) -> IndicatorSample:
    return IndicatorSample(source=PRIMARY_SOURCE, indicator_code=indicator_code)


def most_common_period(periods: Iterable[str | None]) -> str | None:
    """Majority vote over the non-missing periods.

    Ties go to the period that sorts last, i.e. the most recent label.
    """
    counts = Counter(p for p in periods if p)
    if not counts:
        return None
    return max(counts.items(), key=lambda item: (item[1], item[0]))[0]


async def _lookup(
    lookup: IndicatorLookup,
    country_code: str,
    indicator_code: str,
    year_range: YearRange,
    log_fn: Callable[[str], None],
) -> IndicatorSample:
    try:
        sample = await lookup.lookup_indicator(country_code, indicator_code, year_range)
    except LookupFailed as e:
        log_fn(f"    WARN: Failed to fetch {indicator_code} for {country_code}: {e}")
        return unavailable_sample(indicator_code)

    if sample is None or sample.value is None:
        log_fn(f"    No data for {indicator_code} ({year_range.start}:{year_range.end})")
        return unavailable_sample(indicator_code)
    return sample


async def _probe_alternate_debt(
    lookup: IndicatorLookup,
    country_code: str,
    year_range: YearRange,
    log_fn: Callable[[str], None],
) -> IndicatorSample | None:
    """Try the alternate debt series in priority order; first value wins."""
    for code in ALTERNATE_DEBT_CODES:
        sample = await _lookup(lookup, country_code, code, year_range, log_fn)
        if sample.available:
            log_fn(f"    Debt from alternate {code}: {sample.value} ({sample.period})")
            return sample.model_copy(update={
                "source": f"{sample.source} (alternate {code})",
                "indicator_code": code,
                "origin": SampleOrigin.ALTERNATE,
            })
    return None


async def resolve(
    country_code: str,
    lookup: IndicatorLookup,
    overrides: OverrideTable,
    primary_range: YearRange,
    alternate_range: YearRange,
    log_fn: Callable[[str], None],
) -> ResolvedIndicators:
    """Resolve all five indicators for one country.

    Precedence per indicator: curated override > alternate series (debt
    only) > primary lookup. The primary lookups run concurrently.
    """
    code = country_code.upper()
    country_overrides = overrides.get(code, {})

    keys = list(IndicatorKey)
    primary = await asyncio.gather(*(
        _lookup(lookup, code, INDICATOR_CODES[key], primary_range, log_fn)
        for key in keys
    ))
    samples: dict[IndicatorKey, IndicatorSample] = dict(zip(keys, primary))

    debt = samples[IndicatorKey.DEBT_TO_GDP]
    if not debt.available and IndicatorKey.DEBT_TO_GDP not in country_overrides:
        alternate = await _probe_alternate_debt(lookup, code, alternate_range, log_fn)
        if alternate is not None:
            samples[IndicatorKey.DEBT_TO_GDP] = alternate

    data_period = most_common_period(
        sample.period for key, sample in zip(keys, primary) if key not in country_overrides
    )

    for key, entry in country_overrides.items():
        log_fn(f"    Override {code}/{key.value}: {entry.value} ({entry.source})")
        samples[key] = IndicatorSample(
            value=entry.value,
            period=entry.period,
            source=entry.source,
            indicator_code=INDICATOR_CODES[key],
            origin=SampleOrigin.OVERRIDE,
        )

    indicators = IndicatorSet(**{key.value: sample for key, sample in samples.items()})
    return ResolvedIndicators(indicators, data_period)
