"""
Category Aggregator

Groups a site's metrics into the fixed scoring categories and averages their
normalized scores. A category with no metrics scores neutral (50) so that a
site is not penalized for data that simply has not been collected.

Metrics are matched to a category when their metric_type contains the
category key (case-insensitive). Duplicate metric names are not collapsed:
a metric reported twice counts twice in the mean.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from site_feasibility.metric_normalizer import normalize_metric
from site_feasibility.models import (
    NEUTRAL_SCORE,
    CategoryScore,
    CategoryWeight,
    DataQualityWarning,
    RawMetric,
    round_half_up,
)

logger = logging.getLogger(__name__)


def metrics_for_category(category_key: str, metrics: Iterable[RawMetric]) -> List[RawMetric]:
    """Metrics whose type contains the category key."""
    key = category_key.lower()
    return [m for m in metrics if key in (m.metric_type or "").lower()]


def aggregate(category_key: str, metrics: Sequence[RawMetric],
              warnings: Optional[List[DataQualityWarning]] = None) -> CategoryScore:
    """
    Calculate one category score from a site's metrics.

    Args:
        category_key: Category to score (e.g. "demographics")
        metrics: All metrics for the site; filtered here
        warnings: Optional list that collects data-quality warnings

    Returns:
        CategoryScore with the rounded mean, or the neutral default when no
        metric belongs to the category
    """
    matched = metrics_for_category(category_key, metrics)

    if not matched:
        logger.debug(f"No metrics for category '{category_key}', using neutral {NEUTRAL_SCORE}")
        return CategoryScore(category_key, NEUTRAL_SCORE, metric_count=0, has_data=False)

    total = 0.0
    for metric in matched:
        result = normalize_metric(metric)
        total += result.score
        if result.warning is not None and warnings is not None:
            warnings.append(result.warning)

    score = round_half_up(total / len(matched))
    return CategoryScore(category_key, score, metric_count=len(matched), has_data=True)


def aggregate_all(metrics: Sequence[RawMetric], weights: Iterable[CategoryWeight],
                  warnings: Optional[List[DataQualityWarning]] = None) -> Dict[str, CategoryScore]:
    """Score every category in the weight table, in table order."""
    return {
        entry.category_key: aggregate(entry.category_key, metrics, warnings)
        for entry in weights
    }
