"""
Recommendation Engine

Static rule table evaluated against the composite result. Rules are not
learned and carry no history: identical inputs always produce the identical
list. Any tier for which no rule fires is filled with that tier's baseline
items, so the output is never empty.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

from site_feasibility.categories import DEFAULT_CATEGORY_WEIGHTS
from site_feasibility.grade_classifier import band_for
from site_feasibility.models import (
    NEUTRAL_SCORE,
    CategoryScore,
    CompositeScore,
    Recommendation,
    RecommendationTier,
)


@dataclass(frozen=True)
class RecommendationRule:
    """
    Fires when the watched score is below `below` or at least `at_least`.
    category_key None watches the overall score.
    """
    tier: RecommendationTier
    text: str
    category_key: Optional[str] = None
    below: Optional[float] = None
    at_least: Optional[float] = None

    def fires(self, score: float) -> bool:
        if self.below is not None and score < self.below:
            return True
        if self.at_least is not None and score >= self.at_least:
            return True
        return False


RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    # High priority
    RecommendationRule(RecommendationTier.HIGH,
                       "Conduct detailed demographic analysis for target market validation",
                       "demographics", below=55),
    RecommendationRule(RecommendationTier.HIGH,
                       "Commission environmental and regulatory review before committing capital",
                       "risk", below=50),
    RecommendationRule(RecommendationTier.HIGH,
                       "Complete traffic impact assessment for access planning",
                       "location", below=55),
    RecommendationRule(RecommendationTier.HIGH,
                       "Re-evaluate the acquisition thesis; overall feasibility is in the high-risk band",
                       None, below=40),

    # Medium priority
    RecommendationRule(RecommendationTier.MEDIUM,
                       "Confirm zoning compliance and density allowance with the local planning office",
                       "development", below=55),
    RecommendationRule(RecommendationTier.MEDIUM,
                       "Analyze competitive landscape within 3-mile radius",
                       "market", below=55),
    RecommendationRule(RecommendationTier.MEDIUM,
                       "Re-run the pro forma against current land and construction cost assumptions",
                       "financial", below=55),
    RecommendationRule(RecommendationTier.MEDIUM,
                       "Advance to letter of intent and secure site control",
                       None, at_least=85),

    # Future considerations
    RecommendationRule(RecommendationTier.FUTURE,
                       "Track rent growth and absorption to time the lease-up",
                       "market", at_least=70),
    RecommendationRule(RecommendationTier.FUTURE,
                       "Monitor density bonus and zoning variance opportunities",
                       "development", at_least=70),
)


BASELINE_RECOMMENDATIONS: Dict[RecommendationTier, Tuple[str, ...]] = {
    RecommendationTier.HIGH: (
        "Conduct detailed demographic analysis for target market validation",
        "Perform geotechnical soil study for foundation requirements",
        "Complete traffic impact assessment for access planning",
    ),
    RecommendationTier.MEDIUM: (
        "Evaluate utility capacity and connection costs",
        "Research local development incentives and tax benefits",
        "Analyze competitive landscape within 3-mile radius",
    ),
    RecommendationTier.FUTURE: (
        "Monitor proposed infrastructure improvements",
        "Track zoning variance opportunities",
        "Assess climate resilience requirements",
    ),
}


def _category_value(category_scores: Mapping[str, Union[CategoryScore, float]], key: str) -> float:
    value = category_scores.get(key)
    if value is None:
        return NEUTRAL_SCORE
    if isinstance(value, CategoryScore):
        return value.score
    return value


def recommend(composite: CompositeScore,
              category_scores: Optional[Mapping[str, Union[CategoryScore, float]]] = None) -> List[Recommendation]:
    """
    Build the prioritized recommendation list for a scored site.

    Args:
        composite: Result of compute_score
        category_scores: Category scores to evaluate; defaults to the ones
            carried on the composite

    Returns:
        Recommendations ordered High, Medium, Future
    """
    if category_scores is None:
        category_scores = composite.category_scores

    fired: Dict[RecommendationTier, List[Recommendation]] = {tier: [] for tier in RecommendationTier}
    for rule in RECOMMENDATION_RULES:
        if rule.category_key is None:
            score = composite.overall_score
        else:
            score = _category_value(category_scores, rule.category_key)
        if rule.fires(score):
            fired[rule.tier].append(Recommendation(rule.tier, rule.text, rule.category_key))

    results = []
    for tier in RecommendationTier:
        items = fired[tier] or [Recommendation(tier, text) for text in BASELINE_RECOMMENDATIONS[tier]]
        seen = set()
        for item in items:
            if item.text not in seen:
                seen.add(item.text)
                results.append(item)
    return results


def build_rationale(composite: CompositeScore) -> str:
    """
    Narrative summary of a composite score: grade, key strengths (categories
    in the A/B bands) and areas of concern (categories in the D/F bands).
    """
    names = {w.category_key: (w.name or w.category_key) for w in DEFAULT_CATEGORY_WEIGHTS}
    strengths = []
    concerns = []
    for key, category in composite.category_scores.items():
        grade = band_for(category.score).grade
        if grade in ("A", "B"):
            strengths.append(names.get(key, key).lower())
        elif grade in ("D", "F"):
            concerns.append(names.get(key, key).lower())

    subject = f"Site {composite.site_id}" if composite.site_id else "This site"
    rationale = (
        f"{subject} scores {composite.overall_score}/100 "
        f"(Grade {composite.grade}, {composite.label})."
    )
    if strengths:
        rationale += f" Key strengths include {', '.join(strengths)}."
    if concerns:
        rationale += f" Areas of concern include {', '.join(concerns)}."
    if composite.low_confidence:
        rationale += " Confidence is low: no usable metrics were available, so every category uses the neutral default."
    return rationale
