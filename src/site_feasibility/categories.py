"""
Scoring categories and their portfolio weights.

    - Demographics: 25
    - Location & Access: 20
    - Market Conditions: 20
    - Development Potential: 15
    - Financial Metrics: 12
    - Risk Assessment: 8
    TOTAL: 100

This is the only weight table in the application. Badges, map markers and the
scorecard all score through it; do not re-declare weights elsewhere.
"""

from typing import Dict, Iterable, Tuple

from site_feasibility.errors import ConfigError
from site_feasibility.models import CategoryWeight


TOTAL_WEIGHT = 100


DEFAULT_CATEGORY_WEIGHTS: Tuple[CategoryWeight, ...] = (
    CategoryWeight(
        "demographics", 25, "Demographics",
        ("Population Growth", "Median Income", "Age Distribution", "Employment Rate"),
    ),
    CategoryWeight(
        "location", 20, "Location & Access",
        ("Transportation Access", "Downtown Distance", "Amenities Proximity", "Traffic Patterns"),
    ),
    CategoryWeight(
        "market", 20, "Market Conditions",
        ("Rental Rates", "Occupancy Rates", "Competition Analysis", "Absorption Rates"),
    ),
    CategoryWeight(
        "development", 15, "Development Potential",
        ("Zoning Compliance", "Density Allowance", "Development Costs", "Timeline to Market"),
    ),
    CategoryWeight(
        "financial", 12, "Financial Metrics",
        ("Land Cost", "Construction Cost", "IRR Projection", "NOI Potential"),
    ),
    CategoryWeight(
        "risk", 8, "Risk Assessment",
        ("Regulatory Risk", "Environmental Risk", "Market Risk", "Construction Risk"),
    ),
)


def validate_weights(weights: Iterable[CategoryWeight]) -> Tuple[CategoryWeight, ...]:
    """
    Check a category weight table and return it as a tuple.

    Raises:
        ConfigError: empty table, duplicate or blank keys, negative weights,
            or weights that do not sum to exactly 100
    """
    table = tuple(weights)
    if not table:
        raise ConfigError("Category weight table is empty")

    seen = set()
    for entry in table:
        key = entry.category_key.strip().lower()
        if not key:
            raise ConfigError("Category weight table contains a blank category key")
        if key in seen:
            raise ConfigError(f"Duplicate category key in weight table: {entry.category_key!r}")
        if entry.weight < 0:
            raise ConfigError(f"Negative weight for category {entry.category_key!r}: {entry.weight}")
        seen.add(key)

    total = sum(entry.weight for entry in table)
    if total != TOTAL_WEIGHT:
        raise ConfigError(f"Category weights must sum to {TOTAL_WEIGHT}, got {total}")

    return table


def weight_map(weights: Iterable[CategoryWeight]) -> Dict[str, int]:
    """category_key -> weight"""
    return {entry.category_key: entry.weight for entry in weights}


# Startup invariant: the built-in table is checked once at import.
validate_weights(DEFAULT_CATEGORY_WEIGHTS)
