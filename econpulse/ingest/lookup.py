"""Collaborator interfaces the resolver and service depend on.

Any transport can sit behind these; the World Bank client is one.
"""
from __future__ import annotations

from typing import Protocol

from econpulse.schemas import CountryMetadata, IndicatorSample, YearRange


class LookupFailed(Exception):
    """The upstream call failed outright (transport error, bad payload)."""

    def __init__(self, what: str, cause: Exception | None = None) -> None:
        super().__init__(f"{what}: {cause}" if cause else what)
        self.what = what
        self.cause = cause


class IndicatorLookup(Protocol):
    async def lookup_indicator(
        self,
        country_code: str,
        indicator_code: str,
        year_range: YearRange,
    ) -> IndicatorSample | None:
        """Most recent non-missing value in range, or None."""
        ...


class MetadataLookup(Protocol):
    async def lookup_country_metadata(self, country_code: str) -> CountryMetadata | None:
        ...


class CountryLookup(IndicatorLookup, MetadataLookup, Protocol):
    pass
