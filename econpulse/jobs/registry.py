"""Refresh registry: generation tokens + latest applied snapshot per country set.

Same thread-safe in-memory cache pattern as a job registry, but results
from a superseded refresh are dropped instead of stored.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from econpulse.schemas import DashboardSnapshot, HealthRecord


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def country_set_key(codes: list[str]) -> str:
    """Normalise a requested country list into a registry key."""
    return ",".join(c.strip().upper() for c in codes if c.strip())


@dataclass
class LiveRefresh:
    """In-memory representation of an in-flight or finished refresh."""
    key: str
    codes: list[str]
    generation: int
    status: str  # running | applied | stale
    started_at: datetime
    finished_at: datetime | None = None
    # Registry-wide sequence number; survives eviction of the set
    token: int = field(default=0, repr=False)
    log_lines: list[str] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "codes": self.codes,
            "generation": self.generation,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class RefreshRegistry:
    """Last-requester-wins bookkeeping for dashboard refreshes.

    At most ``max_sets`` country sets are tracked; starting a refresh for a
    new set evicts the least recently refreshed one.
    """

    def __init__(self, max_sets: int = 256) -> None:
        self._lock = threading.Lock()
        self._max_sets = max_sets
        self._sequence = 0
        self._generations: dict[str, int] = {}
        self._tokens: dict[str, int] = {}
        self._snapshots: dict[str, DashboardSnapshot] = {}

    def _next_token(self) -> int:
        self._sequence += 1
        return self._sequence

    def begin(self, codes: list[str]) -> LiveRefresh:
        """Start a refresh; any earlier refresh of the same set becomes stale."""
        key = country_set_key(codes)
        with self._lock:
            # Re-inserted so dict order runs from least to most recently refreshed
            generation = self._generations.pop(key, 0) + 1
            self._generations[key] = generation
            token = self._tokens[key] = self._next_token()
            while len(self._generations) > self._max_sets:
                oldest = next(iter(self._generations))
                del self._generations[oldest]
                del self._tokens[oldest]
                self._snapshots.pop(oldest, None)
        return LiveRefresh(
            key=key,
            codes=key.split(",") if key else [],
            generation=generation,
            status="running",
            started_at=_utcnow(),
            token=token,
        )

    def current_generation(self, codes: list[str]) -> int:
        with self._lock:
            return self._generations.get(country_set_key(codes), 0)

    def tracked_sets(self) -> int:
        with self._lock:
            return len(self._generations)

    def complete(self, refresh: LiveRefresh, records: list[HealthRecord]) -> bool:
        """Apply results if the refresh is still the newest. Returns True if applied."""
        with self._lock:
            refresh.finished_at = _utcnow()
            if self._tokens.get(refresh.key) != refresh.token:
                refresh.status = "stale"
                return False
            self._snapshots[refresh.key] = DashboardSnapshot(
                key=refresh.key,
                generation=refresh.generation,
                completed_at=refresh.finished_at,
                records=records,
            )
            refresh.status = "applied"
        return True

    def latest(self, codes: list[str]) -> DashboardSnapshot | None:
        with self._lock:
            return self._snapshots.get(country_set_key(codes))

    def discard(self, codes: list[str]) -> bool:
        """Forget a country set (deselected). In-flight results become stale."""
        key = country_set_key(codes)
        with self._lock:
            if key not in self._generations:
                return False
            self._generations[key] += 1
            self._tokens[key] = self._next_token()
            self._snapshots.pop(key, None)
        return True
