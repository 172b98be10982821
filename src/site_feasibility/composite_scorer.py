"""
Composite Scorer

overall = round( sum(score[c] * weight[c]) / 100 )

The weight table is validated once when the engine is built, not here.
A category missing from the score map, or scored NaN or inf, counts as neutral.
"""

import math
from typing import Dict, Iterable, Mapping, Union

from site_feasibility.models import NEUTRAL_SCORE, CategoryScore, CategoryWeight, clamp, round_half_up

ScoreValue = Union[CategoryScore, int, float]


def _score_of(category_scores: Mapping[str, ScoreValue], key: str) -> float:
    value = category_scores.get(key)
    if value is None:
        return NEUTRAL_SCORE
    score = value.score if isinstance(value, CategoryScore) else value
    # NaN and inf count as no data
    if not math.isfinite(score):
        return NEUTRAL_SCORE
    return score


def composite(category_scores: Mapping[str, ScoreValue], weights: Iterable[CategoryWeight]) -> int:
    """
    Combine category scores into one 0-100 overall score.

    Args:
        category_scores: category_key -> CategoryScore (or a bare number)
        weights: Validated category weight table

    Returns:
        Integer overall score
    """
    weighted_sum = sum(_score_of(category_scores, w.category_key) * w.weight for w in weights)
    return int(clamp(round_half_up(weighted_sum / 100)))


def contributions(category_scores: Mapping[str, ScoreValue],
                  weights: Iterable[CategoryWeight]) -> Dict[str, int]:
    """Points each category contributes to the overall score (rounded for display)."""
    return {
        w.category_key: round_half_up(_score_of(category_scores, w.category_key) * w.weight / 100)
        for w in weights
    }
