"""
Score Cache

Caller-side cache of composite scores keyed by (site_id, metrics_version).
Entries are replaced only by an explicit recalculation or invalidation; the
engine itself never reads from here.
"""

import logging
import threading
from collections import OrderedDict
from typing import Optional, Sequence, Tuple

from site_feasibility.config import Config
from site_feasibility.engine import FeasibilityEngine
from site_feasibility.errors import ConfigError
from site_feasibility.models import CompositeScore, RawMetric, metrics_version

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


class ScoreCache:
    """
    Keeps the most recent composite score per (site, metrics version).
    Oldest entries are evicted once max_entries is reached.
    """

    def __init__(self, engine: Optional[FeasibilityEngine] = None, max_entries: Optional[int] = None):
        self.engine = engine if engine is not None else FeasibilityEngine()
        self.max_entries = max_entries if max_entries is not None else Config.SCORE_CACHE_MAX_ENTRIES
        if self.max_entries < 0:
            raise ConfigError(f"Score cache size must be 0 or more, got {self.max_entries}")
        self._entries: "OrderedDict[CacheKey, CompositeScore]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def get(self, site_id: str, version: str) -> Optional[CompositeScore]:
        with self._lock:
            return self._entries.get((site_id, version))

    def _store(self, key: CacheKey, score: CompositeScore):
        with self._lock:
            self._entries[key] = score
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cached score for site {evicted[0]} version {evicted[1]}")

    def get_or_compute(self, site_id: str, metrics: Sequence[RawMetric],
                       version: Optional[str] = None) -> CompositeScore:
        """Return the cached score for this metrics version, computing it once if absent."""
        version = version or metrics_version(metrics)
        cached = self.get(site_id, version)
        if cached is not None:
            return cached
        score = self.engine.compute_score(metrics, site_id=site_id)
        self._store((site_id, version), score)
        return score

    def recalculate(self, site_id: str, metrics: Sequence[RawMetric],
                    version: Optional[str] = None) -> CompositeScore:
        """Explicit recalculation: drop every cached entry for the site, then score fresh."""
        version = version or metrics_version(metrics)
        self.invalidate(site_id)
        score = self.engine.compute_score(metrics, site_id=site_id)
        self._store((site_id, version), score)
        logger.info(f"Recalculated site {site_id}: {score.overall_score}/100 (Grade {score.grade})")
        return score

    def invalidate(self, site_id: Optional[str] = None) -> int:
        """Remove every cached version for a site (all sites when None). Returns the count removed."""
        with self._lock:
            doomed = [key for key in self._entries if site_id is None or key[0] == site_id]
            for key in doomed:
                del self._entries[key]
        return len(doomed)
