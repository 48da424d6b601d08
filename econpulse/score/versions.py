"""Scoring version constants, weights and indicator tables."""
from econpulse.schemas import HealthStatus, IndicatorKey

HEALTH_CALC_VERSION = "health_v2"

HEALTH_WEIGHTS = {
    "liquidity": 0.25,
    "burn_rate": 0.20,
    "debt_structure": 0.25,
    "real_growth": 0.15,
    "demographics": 0.15,
}

# Pillars backed by live data; any of these missing voids the index
REQUIRED_PILLARS = ("liquidity", "burn_rate", "debt_structure", "real_growth")

DEMOGRAPHICS_PLACEHOLDER = 50

SUCCESS_THRESHOLD = 75.0
WARNING_THRESHOLD = 50.0

# World Bank series per indicator
INDICATOR_CODES = {
    IndicatorKey.GDP_GROWTH: "NY.GDP.MKTP.KD.ZG",     # GDP growth, annual %
    IndicatorKey.INFLATION: "FP.CPI.TOTL.ZG",         # consumer prices, annual %
    IndicatorKey.DEBT_TO_GDP: "GC.DOD.TOTL.GD.ZS",    # central government debt, % of GDP
    IndicatorKey.RESERVE_MONTHS: "FI.RES.TOTL.MO",    # reserves in months of imports
    IndicatorKey.CURRENT_ACCOUNT: "BN.CAB.XOKA.GD.ZS",  # current account, % of GDP
}

# Probed in order, only for government debt
ALTERNATE_DEBT_CODES = (
    "DP.DOD.DECN.CR.GG.Z1",  # QPSD gross general government debt, nominal, % of GDP
    "DP.DOD.DECT.CR.GG.Z1",  # QPSD gross general government debt, face value, % of GDP
)

PRIMARY_SOURCE = "World Bank"

STATUS_NARRATIVES = {
    HealthStatus.SUCCESS: "A well-oiled machine.",
    HealthStatus.WARNING: "Warning lights are flashing.",
    HealthStatus.DANGER: "Critical system level.",
    HealthStatus.UNKNOWN: "Status unknown.",
}

STRONG_GROWTH_THRESHOLD = 5.0
STRONG_GROWTH_CLAUSE = "Strong growth engine."

OVERHEATING_THRESHOLD = 10.0
OVERHEATING_CLAUSE = "Overheating."

DEGRADED_NARRATIVE = "Data fetch failed."
