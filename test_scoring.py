"""
Tests for category aggregation, the weight table and composite scoring
"""

import pytest

from site_feasibility.categories import DEFAULT_CATEGORY_WEIGHTS, validate_weights, weight_map
from site_feasibility.category_aggregator import aggregate, aggregate_all, metrics_for_category
from site_feasibility.composite_scorer import composite, contributions
from site_feasibility.errors import ConfigError
from site_feasibility.models import CategoryScore, CategoryWeight, RawMetric, round_half_up


def metric(metric_type, name, value):
    return RawMetric(site_id="site-9", metric_type=metric_type, metric_name=name, value=value)


# === WEIGHT TABLE ===

def test_default_weights_sum_to_100():
    assert sum(w.weight for w in DEFAULT_CATEGORY_WEIGHTS) == 100


def test_default_weight_values():
    assert weight_map(DEFAULT_CATEGORY_WEIGHTS) == {
        "demographics": 25,
        "location": 20,
        "market": 20,
        "development": 15,
        "financial": 12,
        "risk": 8,
    }


def test_every_category_lists_its_factors():
    for entry in DEFAULT_CATEGORY_WEIGHTS:
        assert entry.name
        assert len(entry.factors) == 4


def test_weights_not_summing_to_100_are_rejected():
    with pytest.raises(ConfigError):
        validate_weights([CategoryWeight("demographics", 60), CategoryWeight("market", 30)])


def test_duplicate_and_negative_weights_are_rejected():
    with pytest.raises(ConfigError):
        validate_weights([CategoryWeight("market", 50), CategoryWeight("Market", 50)])
    with pytest.raises(ConfigError):
        validate_weights([CategoryWeight("market", 110), CategoryWeight("risk", -10)])
    with pytest.raises(ConfigError):
        validate_weights([])


# === CATEGORY AGGREGATION ===

def test_empty_category_is_neutral():
    result = aggregate("risk", [])
    assert result.score == 50
    assert result.has_data is False
    assert result.metric_count == 0


def test_category_match_is_substring_and_case_insensitive():
    metrics = [
        metric("Market_Data", "Occupancy Rate", 90),
        metric("demographics", "Median Income", 80000),
    ]
    matched = metrics_for_category("market", metrics)
    assert [m.metric_name for m in matched] == ["Occupancy Rate"]


def test_category_score_is_rounded_mean():
    metrics = [
        metric("market", "Occupancy Rate", 91),
        metric("market", "Absorption Rate", 60),
    ]
    result = aggregate("market", metrics)
    # (91 + 60) / 2 = 75.5 -> 76
    assert result.score == 76
    assert result.metric_count == 2
    assert result.has_data is True


def test_duplicate_metrics_are_counted_twice():
    metrics = [
        metric("market", "Occupancy Rate", 90),
        metric("market", "Occupancy Rate", 90),
        metric("market", "Rent Survey", 0),  # unknown -> 50
    ]
    # (90 + 90 + 50) / 3 = 76.67 -> 77
    assert aggregate("market", metrics).score == 77


def test_aggregate_collects_warnings():
    warnings = []
    metrics = [
        metric("financial", "IRR Rate", None),
        metric("financial", "IRR Rate", 20),
    ]
    result = aggregate("financial", metrics, warnings)
    assert result.score == 35
    assert len(warnings) == 1


def test_aggregate_all_covers_every_category_in_order():
    scores = aggregate_all([metric("demographics", "Population Growth", 1.0)], DEFAULT_CATEGORY_WEIGHTS)
    assert list(scores) == [w.category_key for w in DEFAULT_CATEGORY_WEIGHTS]
    assert scores["demographics"].score == 75
    assert all(scores[k].score == 50 for k in scores if k != "demographics")


# === COMPOSITE ===

@pytest.mark.parametrize("v", [0, 37, 50, 62.5, 85, 100])
def test_uniform_scores_compose_to_themselves(v):
    scores = {w.category_key: v for w in DEFAULT_CATEGORY_WEIGHTS}
    assert composite(scores, DEFAULT_CATEGORY_WEIGHTS) == round_half_up(v)


def test_worked_example_composite():
    scores = {w.category_key: CategoryScore(w.category_key, 50) for w in DEFAULT_CATEGORY_WEIGHTS}
    scores["demographics"] = CategoryScore("demographics", 75, 1, True)
    # 75*0.25 + 50*0.75 = 56.25
    assert composite(scores, DEFAULT_CATEGORY_WEIGHTS) == 56


def test_missing_category_counts_as_neutral():
    assert composite({"demographics": 100}, DEFAULT_CATEGORY_WEIGHTS) == round_half_up(25 + 50 * 0.75)


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_category_score_counts_as_neutral(bad):
    assert composite({"demographics": bad}, DEFAULT_CATEGORY_WEIGHTS) == 50
    assert contributions({"demographics": bad}, DEFAULT_CATEGORY_WEIGHTS)["demographics"] == 13  # 12.5

    scores = {"demographics": CategoryScore("demographics", bad), "market": 100}
    assert composite(scores, DEFAULT_CATEGORY_WEIGHTS) == 60


def test_contributions():
    scores = {w.category_key: 80 for w in DEFAULT_CATEGORY_WEIGHTS}
    points = contributions(scores, DEFAULT_CATEGORY_WEIGHTS)
    assert points == {
        "demographics": 20,
        "location": 16,
        "market": 16,
        "development": 12,
        "financial": 10,   # 9.6
        "risk": 6,         # 6.4
    }


def test_round_half_up():
    assert round_half_up(56.5) == 57
    assert round_half_up(56.49) == 56
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
