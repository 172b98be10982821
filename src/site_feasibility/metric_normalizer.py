"""
Metric Normalizer

Maps one raw metric onto a 0-100 sub-score. The metric name is resolved once
to a MetricKind, and each kind has exactly one normalizer:

- GROWTH: growth rate band [-2%, +2%] onto [0, 100]; 0% -> 50, saturates outside
- INCOME: raw currency units / 1000; 100,000 -> 100
- RATE: value is already a percentage
- UNKNOWN: neutral 50, so unknown metrics do not pull a site either way

Missing, NaN or non-numeric values score neutral and produce a
DataQualityWarning. Normalization never raises.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from site_feasibility.models import NEUTRAL_SCORE, DataQualityWarning, RawMetric, clamp

logger = logging.getLogger(__name__)


class MetricKind(Enum):
    """Metric kinds, in dispatch order (first matching keyword wins)."""
    GROWTH = "growth"
    INCOME = "income"
    RATE = "rate"
    UNKNOWN = "unknown"

    @classmethod
    def from_metric_name(cls, metric_name: str) -> "MetricKind":
        name = (metric_name or "").lower()
        for kind in (cls.GROWTH, cls.INCOME, cls.RATE):
            if kind.value in name:
                return kind
        return cls.UNKNOWN


@dataclass(frozen=True)
class NormalizedMetric:
    """Normalizer output for a single metric."""
    metric: RawMetric
    kind: MetricKind
    score: float
    warning: Optional[DataQualityWarning] = None


# ============================================================================
# NORMALIZERS BY KIND
# ============================================================================

def _score_growth(value: float) -> float:
    # TODO: revisit the +/-2% band for high-growth markets once product confirms the range
    return clamp((value + 2) * 25)


def _score_income(value: float) -> float:
    return clamp(value / 1000)


def _score_rate(value: float) -> float:
    return clamp(value)


def _score_unknown(value: float) -> float:
    return NEUTRAL_SCORE


NORMALIZERS: Dict[MetricKind, Callable[[float], float]] = {
    MetricKind.GROWTH: _score_growth,
    MetricKind.INCOME: _score_income,
    MetricKind.RATE: _score_rate,
    MetricKind.UNKNOWN: _score_unknown,
}

_missing = set(MetricKind) - set(NORMALIZERS)
if _missing:
    raise RuntimeError(f"No normalizer registered for metric kinds: {sorted(k.name for k in _missing)}")


def _coerce_value(value) -> Optional[float]:
    """Return value as a float, or None when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def normalize_metric(metric: RawMetric) -> NormalizedMetric:
    """
    Normalize one metric and report any data-quality problem.

    Args:
        metric: Raw metric from the metrics repository

    Returns:
        NormalizedMetric with the resolved kind, a score in [0, 100] and an
        optional warning
    """
    kind = MetricKind.from_metric_name(metric.metric_name)
    value = _coerce_value(metric.value)

    if value is None:
        warning = DataQualityWarning(
            site_id=metric.site_id,
            metric_type=metric.metric_type,
            metric_name=metric.metric_name,
            message=f"Missing or non-numeric value {metric.value!r}; scored as neutral {NEUTRAL_SCORE}",
        )
        logger.warning(
            f"Data quality: site {metric.site_id} metric '{metric.metric_name}' "
            f"({metric.metric_type}) has value {metric.value!r}, using neutral score"
        )
        return NormalizedMetric(metric, kind, float(NEUTRAL_SCORE), warning)

    score = float(NORMALIZERS[kind](value))
    logger.debug(f"Normalized '{metric.metric_name}' as {kind.name}: {value} -> {score}")
    return NormalizedMetric(metric, kind, score)


def normalize(metric: RawMetric) -> float:
    """Score one metric on a 0-100 scale."""
    return normalize_metric(metric).score
