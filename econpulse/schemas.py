"""Value types shared by the resolver, scorer and API.

``None`` is the only marker for "unavailable" data.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict


class IndicatorKey(str, Enum):
    GDP_GROWTH = "gdp_growth"
    INFLATION = "inflation"
    DEBT_TO_GDP = "debt_to_gdp"
    RESERVE_MONTHS = "reserve_months"
    CURRENT_ACCOUNT = "current_account"


class SampleOrigin(str, Enum):
    PRIMARY = "primary"
    ALTERNATE = "alternate"
    OVERRIDE = "override"


class HealthStatus(str, Enum):
    SUCCESS = "Success"
    WARNING = "Warning"
    DANGER = "Danger"
    UNKNOWN = "Unknown"


class YearRange(NamedTuple):
    start: int
    end: int


class IndicatorSample(BaseModel):
    """One observed data point, or an unavailable one with its attribution."""

    model_config = ConfigDict(frozen=True)

    value: float | None = None
    period: str | None = None
    source: str
    indicator_code: str | None = None
    origin: SampleOrigin = SampleOrigin.PRIMARY

    @property
    def available(self) -> bool:
        return self.value is not None


class IndicatorSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    gdp_growth: IndicatorSample
    inflation: IndicatorSample
    debt_to_gdp: IndicatorSample
    reserve_months: IndicatorSample
    current_account: IndicatorSample

    def get(self, key: IndicatorKey) -> IndicatorSample:
        return getattr(self, key.value)

    def value(self, key: IndicatorKey) -> float | None:
        return self.get(key).value


class OverrideEntry(BaseModel):
    value: float
    source: str
    period: str | None = None


# country code -> indicator -> curated value
OverrideTable = dict[str, dict[IndicatorKey, OverrideEntry]]

# country code -> narrative replacing the generated one
NarrativeTable = dict[str, str]


class Pillars(BaseModel):
    model_config = ConfigDict(frozen=True)

    liquidity: int | None = None
    burn_rate: int | None = None
    debt_structure: int | None = None
    real_growth: int | None = None
    demographics: int | None = None


class EconomicMetrics(IndicatorSet):
    # "Invisible warning" slots: no upstream series yet
    credit_to_gdp_gap: float | None = None
    debt_service_ratio: float | None = None
    reer_misalignment: float | None = None


class CountryMetadata(BaseModel):
    code: str
    name: str
    flag_code: str | None = None
    region: str | None = None


class CountryOption(BaseModel):
    code: str
    name: str
    region: str


class HealthRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    flag_code: str | None
    data_period: str | None
    health_index: float | None
    status: HealthStatus
    pillars: Pillars
    metrics: EconomicMetrics
    narrative: str
    calc_version: str
    degraded: bool = False


class DashboardSnapshot(BaseModel):
    key: str
    generation: int
    completed_at: datetime
    records: list[HealthRecord]


class RefreshRequest(BaseModel):
    codes: list[str]
