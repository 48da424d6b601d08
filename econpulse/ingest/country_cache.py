"""Init-once cache for the country picker list."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from econpulse.ingest.lookup import LookupFailed
from econpulse.schemas import CountryOption

logger = logging.getLogger(__name__)


class CountryListCache:
    """Loads the country list at most once and serves it thereafter.

    Failed or empty loads are not cached, so the next caller retries.
    """

    def __init__(self, loader: Callable[[], Awaitable[list[CountryOption]]]) -> None:
        self._loader = loader
        self._lock = asyncio.Lock()
        self._countries: list[CountryOption] | None = None

    @property
    def loaded(self) -> bool:
        return self._countries is not None

    async def get(self) -> list[CountryOption]:
        if self._countries is not None:
            return self._countries

        async with self._lock:
            if self._countries is not None:
                return self._countries
            try:
                countries = await self._loader()
            except LookupFailed as e:
                logger.warning("Failed to fetch country list: %s", e)
                return []
            if countries:
                self._countries = countries
            return countries
