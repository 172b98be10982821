"""
Feasibility Engine

Single entry point for site scoring:

    RawMetric[] -> normalize (per metric) -> aggregate (per category)
                -> composite (overall) -> classify / recommend

The engine holds only its validated weight table, so one instance can score
any number of sites concurrently.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from site_feasibility.categories import DEFAULT_CATEGORY_WEIGHTS, validate_weights
from site_feasibility.category_aggregator import aggregate_all
from site_feasibility.composite_scorer import composite, contributions
from site_feasibility.grade_classifier import GradeResult
from site_feasibility.grade_classifier import classify as classify_score
from site_feasibility.models import (
    CategoryScore,
    CategoryWeight,
    CompositeScore,
    DataQualityWarning,
    RawMetric,
    Recommendation,
)
from site_feasibility.recommendation_engine import recommend as recommend_actions

logger = logging.getLogger(__name__)


class FeasibilityEngine:
    """
    Scores development sites against a fixed category weight table.

    Raises:
        ConfigError: at construction, if the weight table is invalid
    """

    def __init__(self, weights: Optional[Iterable[CategoryWeight]] = None):
        self.weights = validate_weights(DEFAULT_CATEGORY_WEIGHTS if weights is None else weights)

    def compute_score(self, metrics: Sequence[RawMetric], site_id: Optional[str] = None) -> CompositeScore:
        """
        Calculate the composite feasibility score for one site.

        Args:
            metrics: All metrics for the site
            site_id: Site identifier; defaults to the site_id of the first metric

        Returns:
            CompositeScore with grade, category breakdown and any data-quality
            warnings. Never raises on bad metric values.
        """
        metrics = list(metrics)
        if site_id is None and metrics:
            site_id = metrics[0].site_id

        warnings: List[DataQualityWarning] = []
        category_scores = aggregate_all(metrics, self.weights, warnings)
        overall = composite(category_scores, self.weights)
        grade = classify_score(overall)

        low_confidence = not any(cat.has_data for cat in category_scores.values())
        if low_confidence:
            logger.warning(
                f"Site {site_id}: no usable category data ({len(metrics)} metrics), "
                f"all categories scored neutral; result flagged low confidence"
            )

        return CompositeScore(
            site_id=site_id,
            overall_score=overall,
            grade=grade.grade,
            label=grade.label,
            color_token=grade.color_token,
            category_scores=category_scores,
            contributions=contributions(category_scores, self.weights),
            low_confidence=low_confidence,
            warnings=warnings,
        )

    def recommend(self, composite_score: CompositeScore,
                  category_scores: Optional[Mapping[str, Union[CategoryScore, float]]] = None) -> List[Recommendation]:
        return recommend_actions(composite_score, category_scores)

    def classify(self, score: float) -> GradeResult:
        return classify_score(score)


_default_engine = FeasibilityEngine()


def compute_score(metrics: Sequence[RawMetric], weights: Optional[Iterable[CategoryWeight]] = None,
                  site_id: Optional[str] = None) -> CompositeScore:
    """Score a site with the default weight table, or a custom one if given."""
    engine = _default_engine if weights is None else FeasibilityEngine(weights)
    return engine.compute_score(metrics, site_id=site_id)


def recommend(composite_score: CompositeScore,
              category_scores: Optional[Mapping[str, Union[CategoryScore, float]]] = None) -> List[Recommendation]:
    return recommend_actions(composite_score, category_scores)


def classify(score: float) -> GradeResult:
    return classify_score(score)
