"""
End-to-end tests for FeasibilityEngine / compute_score
"""

import pytest

from site_feasibility import (
    CategoryWeight,
    ConfigError,
    FeasibilityEngine,
    RawMetric,
    classify,
    compute_score,
)


def test_worked_example():
    metrics = [RawMetric("site-42", "demographics", "Population Growth", 1.0)]
    result = compute_score(metrics)

    assert result.site_id == "site-42"
    assert result.category_scores["demographics"].score == 75
    for key in ("location", "market", "development", "financial", "risk"):
        assert result.category_scores[key].score == 50
        assert result.category_scores[key].has_data is False
    assert result.overall_score == 56
    assert result.grade == "C"
    assert result.label == "Moderate Opportunity"
    assert result.color_token == "yellow"
    assert result.low_confidence is False
    assert result.warnings == []


def test_compute_score_is_idempotent():
    metrics = [
        RawMetric("site-7", "demographics", "Median Income", 82000),
        RawMetric("site-7", "market", "Occupancy Rate", 93),
        RawMetric("site-7", "risk", "Flood Rate", None),
    ]
    first = compute_score(metrics)
    second = compute_score(metrics)
    assert first == second
    assert first.to_dict()["overall_score"] == second.to_dict()["overall_score"]


def test_zero_metrics_is_low_confidence_neutral():
    result = compute_score([], site_id="site-empty")
    assert result.overall_score == 50
    assert result.grade == "D"
    assert result.low_confidence is True
    assert all(cat.score == 50 for cat in result.category_scores.values())


def test_unmatched_metrics_are_low_confidence():
    result = compute_score([RawMetric("site-x", "zoning_notes", "Parcel Count", 4)])
    assert result.low_confidence is True
    assert result.overall_score == 50


def test_missing_values_become_warnings_not_errors():
    metrics = [
        RawMetric("site-3", "market", "Occupancy Rate", float("nan")),
        RawMetric("site-3", "market", "Absorption Rate", 70),
    ]
    result = compute_score(metrics)
    assert result.category_scores["market"].score == 60
    assert len(result.warnings) == 1
    assert result.warnings[0].metric_name == "Occupancy Rate"


def test_overall_matches_weighted_formula():
    metrics = [
        RawMetric("s", "demographics", "Population Growth", 2.0),   # 100
        RawMetric("s", "location", "Transit Access Rate", 63),      # 63
        RawMetric("s", "market", "Occupancy Rate", 88),             # 88
        RawMetric("s", "development", "Entitlement Rate", 40),      # 40
        RawMetric("s", "financial", "Median Income", 71000),        # 71
        RawMetric("s", "risk", "Flood Risk Rate", 22),              # 22
    ]
    result = compute_score(metrics)
    expected = (100 * 25 + 63 * 20 + 88 * 20 + 40 * 15 + 71 * 12 + 22 * 8) / 100
    assert result.overall_score == int(expected + 0.5)


def test_custom_weights():
    weights = [CategoryWeight("market", 50), CategoryWeight("risk", 50)]
    engine = FeasibilityEngine(weights)
    result = engine.compute_score([RawMetric("s", "market", "Occupancy Rate", 90)])
    assert set(result.category_scores) == {"market", "risk"}
    assert result.overall_score == 70
    assert result.grade == "B"


def test_invalid_weights_refuse_construction():
    with pytest.raises(ConfigError):
        FeasibilityEngine([CategoryWeight("market", 40), CategoryWeight("risk", 40)])
    with pytest.raises(ConfigError):
        compute_score([], weights=[CategoryWeight("market", 99)])


def test_site_id_argument_wins():
    result = compute_score([RawMetric("from-metric", "market", "Occupancy Rate", 90)], site_id="explicit")
    assert result.site_id == "explicit"


def test_to_dict_shape():
    result = compute_score([RawMetric("site-d", "demographics", "Population Growth", 1.0)])
    data = result.to_dict()
    assert data["overall_score"] == 56
    assert data["grade"] == "C"
    assert data["categories"]["demographics"] == {
        "score": 75,
        "metric_count": 1,
        "has_data": True,
        "contribution": 19,
    }
    assert isinstance(data["computed_at"], str)


def test_classify_matches_composite_grade():
    result = compute_score([RawMetric("s", "market", "Occupancy Rate", 100)])
    assert classify(result.overall_score).grade == result.grade
