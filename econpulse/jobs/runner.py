"""Refresh runner: fetch a country set and apply it unless superseded."""
from __future__ import annotations

import logging

from econpulse.jobs.registry import LiveRefresh, RefreshRegistry
from econpulse.service import HealthService

logger = logging.getLogger(__name__)


def _log(refresh: LiveRefresh, msg: str) -> None:
    refresh.log_lines.append(msg)
    logger.info(msg)


async def run_refresh(
    registry: RefreshRegistry,
    service: HealthService,
    codes: list[str],
) -> LiveRefresh:
    """Fetch every requested country and apply the result if still current.

    In-flight lookups of an older refresh are not cancelled; their results
    are simply dropped on arrival.
    """
    refresh = registry.begin(codes)
    _log(refresh, f"Refresh {refresh.key} generation {refresh.generation}: {len(refresh.codes)} countries")

    records = await service.get_health_records(refresh.codes)

    if registry.complete(refresh, records):
        degraded = sum(1 for r in records if r.degraded)
        _log(refresh, f"Refresh {refresh.key} generation {refresh.generation} applied ({degraded} degraded)")
    else:
        _log(
            refresh,
            f"Refresh {refresh.key} generation {refresh.generation} superseded "
            f"by {registry.current_generation(refresh.codes)}, discarded",
        )
    return refresh
