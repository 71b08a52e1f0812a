from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from skillpath.schemas.weights import SkillWeight


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_entries: int
    hits: int
    misses: int
    hit_rate: float
    average_age_seconds: float


@dataclass
class _Entry:
    weight: SkillWeight
    job_count: int
    stored_at: float


class WeightCache:
    """Bounded in-memory cache of per-skill market weights.

    An entry is dropped on read when it is older than `ttl_seconds` or when the corpus size
    has drifted by more than `drift_tolerance` relative to the size it was computed against.
    On overflow the entry with the oldest insertion time is evicted; reads do not refresh it.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 3600.0,
        max_entries: int = 1000,
        drift_tolerance: float = 0.20,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.drift_tolerance = drift_tolerance
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _key(skill: str) -> str:
        return (skill or "").strip().lower()

    def _is_stale(self, entry: _Entry, current_job_count: int, now: float) -> str | None:
        if now - entry.stored_at > self.ttl_seconds:
            return "ttl"
        if entry.job_count == 0:
            return None if current_job_count == 0 else "drift"
        drift = abs(current_job_count - entry.job_count) / entry.job_count
        if drift > self.drift_tolerance:
            return "drift"
        return None

    def get(self, skill: str, current_job_count: int) -> SkillWeight | None:
        key = self._key(skill)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            reason = self._is_stale(entry, current_job_count, self._clock())
            if reason is not None:
                del self._entries[key]
                self._misses += 1
                logger.debug("weights.cache_invalidated skill=%s reason=%s", key, reason)
                return None
            self._hits += 1
            return entry.weight

    def set(self, skill: str, weight: SkillWeight, job_count: int) -> None:
        key = self._key(skill)
        if not key:
            return
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k].stored_at)
                del self._entries[oldest]
                logger.debug("weights.cache_evicted skill=%s", oldest)
            self._entries[key] = _Entry(weight=weight, job_count=job_count, stored_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            size = len(self._entries)
            total = self._hits + self._misses
            avg_age = sum(now - e.stored_at for e in self._entries.values()) / size if size else 0.0
            return CacheStats(
                size=size,
                max_entries=self.max_entries,
                hits=self._hits,
                misses=self._misses,
                hit_rate=self._hits / total if total else 0.0,
                average_age_seconds=avg_age,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, skill: object) -> bool:
        if not isinstance(skill, str):
            return False
        with self._lock:
            return self._key(skill) in self._entries
