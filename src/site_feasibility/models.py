"""
Data model for the Site Feasibility Scoring Engine.

RawMetric records come from the metrics store and are read-only here.
Everything else (category scores, the composite score, recommendations) is
derived on every call and never persisted by this package.
"""

import hashlib
import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


NEUTRAL_SCORE = 50


# ============================================================================
# ENUMS
# ============================================================================

class RecommendationTier(Enum):
    """Priority tiers, in display order."""
    HIGH = "High"
    MEDIUM = "Medium"
    FUTURE = "Future"


# ============================================================================
# INPUT RECORDS
# ============================================================================

@dataclass(frozen=True)
class RawMetric:
    """One metric row for a site, as supplied by the metrics repository."""
    site_id: str
    metric_type: str  # demographics, location, market, ...
    metric_name: str  # e.g. "Population Growth", "Median Income"
    value: Optional[float]
    unit: Optional[str] = None  # percentage, dollars, count, ...
    source: Optional[str] = None  # census_acs, hud_fmr, bls, ...


@dataclass(frozen=True)
class CategoryWeight:
    """Portfolio weight of one scoring category (weights sum to 100)."""
    category_key: str
    weight: int
    name: str = ""
    factors: Tuple[str, ...] = ()


# ============================================================================
# DERIVED RECORDS
# ============================================================================

@dataclass(frozen=True)
class DataQualityWarning:
    """Non-fatal problem found while normalizing a metric."""
    site_id: Optional[str]
    metric_type: str
    metric_name: str
    message: str


@dataclass
class CategoryScore:
    """Aggregated 0-100 score for one category."""
    category_key: str
    score: int
    metric_count: int = 0
    has_data: bool = False


@dataclass
class CompositeScore:
    """Overall feasibility result for one site."""
    site_id: Optional[str]
    overall_score: int
    grade: str
    label: str
    color_token: str
    category_scores: Dict[str, CategoryScore] = field(default_factory=dict)
    contributions: Dict[str, int] = field(default_factory=dict)
    low_confidence: bool = False
    warnings: List[DataQualityWarning] = field(default_factory=list)
    # Excluded from equality so recomputing identical input compares equal
    computed_at: datetime = field(default_factory=datetime.now, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary for JSON serialization"""
        return {
            "site_id": self.site_id,
            "overall_score": self.overall_score,
            "grade": self.grade,
            "label": self.label,
            "color_token": self.color_token,
            "low_confidence": self.low_confidence,
            "computed_at": self.computed_at.isoformat(),
            "categories": {
                key: {
                    "score": cat.score,
                    "metric_count": cat.metric_count,
                    "has_data": cat.has_data,
                    "contribution": self.contributions.get(key, 0),
                }
                for key, cat in self.category_scores.items()
            },
            "warnings": [
                {
                    "metric_type": w.metric_type,
                    "metric_name": w.metric_name,
                    "message": w.message,
                }
                for w in self.warnings
            ],
        }


@dataclass(frozen=True)
class Recommendation:
    """One prioritized action item."""
    tier: RecommendationTier
    text: str
    category_key: Optional[str] = None  # None for baseline items


# ============================================================================
# HELPERS
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (dashboard rounding)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def metrics_version(metrics: Sequence[RawMetric]) -> str:
    """Stable digest of a metric list, independent of row order."""
    rows = sorted(
        [str(m.site_id), m.metric_type, m.metric_name, repr(m.value)]
        for m in metrics
    )
    payload = json.dumps(rows, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]
