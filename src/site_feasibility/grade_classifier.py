"""
Grade Classifier

Score bands (lower bound inclusive):
- 85-100: A - Exceptional Opportunity (green)
- 70-84:  B - Strong Development Potential (lime)
- 55-69:  C - Moderate Opportunity (yellow)
- 40-54:  D - Challenges Present (orange)
- 0-39:   F - High Risk Development (red)

GRADE_BANDS is the single source of truth for every badge, map marker and
legend that renders a score.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from site_feasibility.models import clamp


class ColorToken(Enum):
    """Color tokens with the hex used for markers and progress bars."""
    GREEN = ("green", "#22c55e")
    LIME = ("lime", "#84cc16")
    YELLOW = ("yellow", "#eab308")
    ORANGE = ("orange", "#f97316")
    RED = ("red", "#ef4444")

    @property
    def token(self) -> str:
        return self.value[0]

    @property
    def hex(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class GradeBand:
    lower: float
    upper: float  # exclusive, except for the top band
    grade: str
    label: str
    color: ColorToken


@dataclass(frozen=True)
class GradeResult:
    grade: str
    label: str
    color_token: str


GRADE_BANDS: Tuple[GradeBand, ...] = (
    GradeBand(85, 100, "A", "Exceptional Opportunity", ColorToken.GREEN),
    GradeBand(70, 85, "B", "Strong Development Potential", ColorToken.LIME),
    GradeBand(55, 70, "C", "Moderate Opportunity", ColorToken.YELLOW),
    GradeBand(40, 55, "D", "Challenges Present", ColorToken.ORANGE),
    GradeBand(0, 40, "F", "High Risk Development", ColorToken.RED),
)


def band_for(score: float) -> GradeBand:
    """Band containing the score; out-of-range scores are clamped first."""
    if math.isnan(score):
        return GRADE_BANDS[-1]
    score = clamp(score)
    for band in GRADE_BANDS:
        if score >= band.lower:
            return band
    return GRADE_BANDS[-1]


def classify(score: float) -> GradeResult:
    """Letter grade, label and color token for a 0-100 score."""
    band = band_for(score)
    return GradeResult(band.grade, band.label, band.color.token)


def marker_color(score: float) -> str:
    """Hex color for map markers and score bars."""
    return band_for(score).color.hex


def legend() -> List[dict]:
    """Ordered band descriptions for map and chart legends, best grade first."""
    return [
        {
            "grade": band.grade,
            "label": band.label,
            "range": f"{band.lower:g}-{band.upper:g}" if band.upper == 100 else f"{band.lower:g}-{band.upper - 1:g}",
            "color_token": band.color.token,
            "hex": band.color.hex,
        }
        for band in GRADE_BANDS
    ]
