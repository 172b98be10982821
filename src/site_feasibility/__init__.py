"""
Site Feasibility Scoring Engine

Turns a site's raw metrics into a 0-100 composite score, a letter grade and a
prioritized recommendation list.
"""

from site_feasibility.engine import FeasibilityEngine, classify, compute_score, recommend
from site_feasibility.errors import ConfigError, FeasibilityError, MetricsFetchError
from site_feasibility.models import (
    CategoryScore,
    CategoryWeight,
    CompositeScore,
    DataQualityWarning,
    RawMetric,
    Recommendation,
    RecommendationTier,
)

__all__ = [
    "FeasibilityEngine",
    "compute_score",
    "recommend",
    "classify",
    "ConfigError",
    "FeasibilityError",
    "MetricsFetchError",
    "CategoryScore",
    "CategoryWeight",
    "CompositeScore",
    "DataQualityWarning",
    "RawMetric",
    "Recommendation",
    "RecommendationTier",
]
