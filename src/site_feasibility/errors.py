"""
Exceptions raised by the feasibility scoring package.

Per-metric problems never raise: they are recorded as DataQualityWarning
entries on the resulting CompositeScore. Only engine construction (bad weight
table) and the metrics repository client raise.
"""


class FeasibilityError(Exception):
    """Base class for all site feasibility errors."""


class ConfigError(FeasibilityError):
    """Category weight table is invalid; the engine refuses to initialize."""


class MetricsFetchError(FeasibilityError):
    """The metrics repository could not be reached or returned bad data."""

    def __init__(self, site_id: str, message: str):
        self.site_id = site_id
        super().__init__(f"Could not load metrics for site {site_id}: {message}")
