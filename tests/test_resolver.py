"""Tests for indicator resolution: precedence, alternate debt series, period vote."""
from __future__ import annotations

import pytest

from econpulse.ingest.lookup import LookupFailed
from econpulse.ingest.resolver import most_common_period, resolve
from econpulse.schemas import (
    IndicatorKey,
    IndicatorSample,
    OverrideEntry,
    SampleOrigin,
    YearRange,
)
from econpulse.score.health import score
from econpulse.score.versions import ALTERNATE_DEBT_CODES, INDICATOR_CODES

PRIMARY = YearRange(2020, 2025)
ALTERNATE = YearRange(2000, 2025)


class FakeLookup:
    """Serves canned samples keyed by indicator code; records every call."""

    def __init__(self, responses: dict[str, object]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, str, YearRange]] = []

    async def lookup_indicator(self, country_code, indicator_code, year_range):
        self.calls.append((country_code, indicator_code, year_range))
        response = self.responses.get(indicator_code)
        if isinstance(response, Exception):
            raise response
        return response


def _wb(value: float, period: str = "2024", code: str | None = None) -> IndicatorSample:
    return IndicatorSample(value=value, period=period, source="World Bank", indicator_code=code)


def _full_responses(**overrides) -> dict[str, object]:
    responses = {
        INDICATOR_CODES[IndicatorKey.GDP_GROWTH]: _wb(3.0),
        INDICATOR_CODES[IndicatorKey.INFLATION]: _wb(2.0),
        INDICATOR_CODES[IndicatorKey.DEBT_TO_GDP]: _wb(40.0),
        INDICATOR_CODES[IndicatorKey.RESERVE_MONTHS]: _wb(6.0, "2023"),
        INDICATOR_CODES[IndicatorKey.CURRENT_ACCOUNT]: _wb(1.5),
    }
    for key, value in overrides.items():
        responses[INDICATOR_CODES[IndicatorKey(key)]] = value
    return responses


async def _resolve(lookup, overrides=None, logs=None):
    return await resolve(
        "swe",
        lookup,
        overrides or {},
        PRIMARY,
        ALTERNATE,
        log_fn=(logs.append if logs is not None else lambda msg: None),
    )


# ---------------------------------------------------------------------------
# Primary lookups
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_resolves_all_five_indicators():
    lookup = FakeLookup(_full_responses())
    resolved = await _resolve(lookup)

    assert resolved.indicators.value(IndicatorKey.GDP_GROWTH) == 3.0
    assert resolved.indicators.value(IndicatorKey.RESERVE_MONTHS) == 6.0
    assert resolved.indicators.value(IndicatorKey.CURRENT_ACCOUNT) == 1.5
    assert all(c[0] == "SWE" and c[2] == PRIMARY for c in lookup.calls)
    assert len(lookup.calls) == 5


@pytest.mark.asyncio
async def test_missing_value_is_unavailable_with_attribution():
    lookup = FakeLookup(_full_responses(inflation=None))
    resolved = await _resolve(lookup)

    sample = resolved.indicators.get(IndicatorKey.INFLATION)
    assert sample.value is None
    assert sample.period is None
    assert sample.source == "World Bank"
    assert sample.indicator_code == INDICATOR_CODES[IndicatorKey.INFLATION]


@pytest.mark.asyncio
async def test_failed_lookup_does_not_abort_other_indicators():
    failure = LookupFailed("FP.CPI.TOTL.ZG for SWE", RuntimeError("boom"))
    lookup = FakeLookup(_full_responses(inflation=failure))
    logs: list[str] = []

    resolved = await _resolve(lookup, logs=logs)

    assert resolved.indicators.value(IndicatorKey.INFLATION) is None
    assert resolved.indicators.value(IndicatorKey.GDP_GROWTH) == 3.0
    assert any("WARN" in line for line in logs)


# ---------------------------------------------------------------------------
# Alternate debt series
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_alternate_debt_fallback():
    responses = _full_responses(debt_to_gdp=None)
    responses[ALTERNATE_DEBT_CODES[0]] = _wb(55.0, "2019")
    lookup = FakeLookup(responses)

    resolved = await _resolve(lookup)

    debt = resolved.indicators.get(IndicatorKey.DEBT_TO_GDP)
    assert debt.value == 55.0
    assert debt.period == "2019"
    assert debt.origin == SampleOrigin.ALTERNATE
    assert "alternate" in debt.source
    assert debt.indicator_code == ALTERNATE_DEBT_CODES[0]
    assert score(resolved.indicators).pillars.debt_structure == 85

    alt_calls = [c for c in lookup.calls if c[1] == ALTERNATE_DEBT_CODES[0]]
    assert alt_calls == [("SWE", ALTERNATE_DEBT_CODES[0], ALTERNATE)]


@pytest.mark.asyncio
async def test_alternate_codes_probed_in_order():
    responses = _full_responses(debt_to_gdp=None)
    responses[ALTERNATE_DEBT_CODES[0]] = None
    responses[ALTERNATE_DEBT_CODES[1]] = _wb(72.0, "2018Q4")
    lookup = FakeLookup(responses)

    resolved = await _resolve(lookup)

    assert resolved.indicators.value(IndicatorKey.DEBT_TO_GDP) == 72.0
    probed = [c[1] for c in lookup.calls if c[1] in ALTERNATE_DEBT_CODES]
    assert probed == list(ALTERNATE_DEBT_CODES)


@pytest.mark.asyncio
async def test_alternate_not_probed_when_primary_debt_present():
    lookup = FakeLookup(_full_responses())
    await _resolve(lookup)
    assert not any(c[1] in ALTERNATE_DEBT_CODES for c in lookup.calls)


@pytest.mark.asyncio
async def test_no_alternate_for_other_indicators():
    lookup = FakeLookup(_full_responses(gdp_growth=None, reserve_months=None))
    resolved = await _resolve(lookup)

    assert resolved.indicators.value(IndicatorKey.GDP_GROWTH) is None
    assert len(lookup.calls) == 5


@pytest.mark.asyncio
async def test_all_alternates_missing_leaves_debt_unavailable():
    lookup = FakeLookup(_full_responses(debt_to_gdp=None))
    resolved = await _resolve(lookup)

    debt = resolved.indicators.get(IndicatorKey.DEBT_TO_GDP)
    assert debt.value is None
    assert debt.origin == SampleOrigin.PRIMARY


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_override_wins_over_successful_lookup():
    overrides = {
        "SWE": {
            IndicatorKey.DEBT_TO_GDP: OverrideEntry(value=33.5, source="Statistics Sweden (SCB)", period="2024Q3"),
        },
    }
    lookup = FakeLookup(_full_responses(debt_to_gdp=_wb(48.0)))

    resolved = await _resolve(lookup, overrides)

    debt = resolved.indicators.get(IndicatorKey.DEBT_TO_GDP)
    assert debt.value == 33.5
    assert debt.source == "Statistics Sweden (SCB)"
    assert debt.period == "2024Q3"
    assert debt.origin == SampleOrigin.OVERRIDE


@pytest.mark.asyncio
async def test_override_wins_over_alternate_and_skips_probe():
    overrides = {"SWE": {IndicatorKey.DEBT_TO_GDP: OverrideEntry(value=30.0, source="Riksgälden")}}
    responses = _full_responses(debt_to_gdp=None)
    responses[ALTERNATE_DEBT_CODES[0]] = _wb(55.0, "2019")
    lookup = FakeLookup(responses)

    resolved = await _resolve(lookup, overrides)

    assert resolved.indicators.value(IndicatorKey.DEBT_TO_GDP) == 30.0
    assert resolved.indicators.get(IndicatorKey.DEBT_TO_GDP).source == "Riksgälden"
    assert not any(c[1] in ALTERNATE_DEBT_CODES for c in lookup.calls)


@pytest.mark.asyncio
async def test_override_fills_failed_lookup():
    overrides = {"SWE": {IndicatorKey.INFLATION: OverrideEntry(value=2.8, source="SCB", period="2024")}}
    lookup = FakeLookup(_full_responses(inflation=LookupFailed("inflation")))

    resolved = await _resolve(lookup, overrides)

    assert resolved.indicators.value(IndicatorKey.INFLATION) == 2.8


@pytest.mark.asyncio
async def test_overrides_for_other_country_ignored():
    overrides = {"NOR": {IndicatorKey.INFLATION: OverrideEntry(value=99.0, source="SSB")}}
    lookup = FakeLookup(_full_responses())

    resolved = await _resolve(lookup, overrides)

    assert resolved.indicators.value(IndicatorKey.INFLATION) == 2.0


# ---------------------------------------------------------------------------
# Period reconciliation
# ---------------------------------------------------------------------------

class TestMostCommonPeriod:
    def test_majority(self):
        assert most_common_period(["2023", "2024", "2023", None]) == "2023"

    def test_tie_goes_to_most_recent(self):
        assert most_common_period(["2022", "2023", "2023", "2022"]) == "2023"
        assert most_common_period(["2021", "2024"]) == "2024"

    def test_all_missing(self):
        assert most_common_period([None, None]) is None
        assert most_common_period([]) is None

    def test_order_independent(self):
        periods = ["2022", "2024", "2023", "2024", "2022"]
        assert most_common_period(periods) == most_common_period(reversed(periods)) == "2024"


@pytest.mark.asyncio
async def test_data_period_from_primary_lookups():
    lookup = FakeLookup(_full_responses())
    resolved = await _resolve(lookup)
    # four lookups report 2024, reserves report 2023
    assert resolved.data_period == "2024"


@pytest.mark.asyncio
async def test_data_period_ignores_overridden_indicators():
    responses = _full_responses(
        gdp_growth=_wb(1.0, "2022"),
        inflation=_wb(1.0, "2022"),
        debt_to_gdp=_wb(1.0, "2024"),
        reserve_months=_wb(1.0, "2024"),
        current_account=_wb(1.0, "2024"),
    )
    overrides = {
        "SWE": {
            IndicatorKey.DEBT_TO_GDP: OverrideEntry(value=1.0, source="SCB", period="2025"),
            IndicatorKey.RESERVE_MONTHS: OverrideEntry(value=1.0, source="Riksbank", period="2025"),
        },
    }
    resolved = await _resolve(FakeLookup(responses), overrides)
    assert resolved.data_period == "2022"


@pytest.mark.asyncio
async def test_data_period_none_when_nothing_available():
    lookup = FakeLookup({})
    resolved = await _resolve(lookup)
    assert resolved.data_period is None
    assert score(resolved.indicators).health_index is None
