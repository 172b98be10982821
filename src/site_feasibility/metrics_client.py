"""
Metrics Repository Client

Loads RawMetric records for a site from the metrics repository (HTTP JSON
array of {siteId, metricType, metricName, value}) or from tabular exports
loaded with pandas. The scoring engine only ever sees the parsed RawMetric
list; timeouts belong here, not to the engine.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd
import requests

from site_feasibility.config import Config
from site_feasibility.errors import MetricsFetchError
from site_feasibility.models import RawMetric

logger = logging.getLogger(__name__)

# Canonical field -> accepted header spellings (compared lowercased, underscores removed)
FIELD_ALIASES = {
    "site_id": ("siteid", "site"),
    "metric_type": ("metrictype", "type", "category"),
    "metric_name": ("metricname", "name", "metric"),
    "value": ("value", "metricvalue"),
    "unit": ("unit", "units"),
    "source": ("source", "datasource"),
}

REQUIRED_FIELDS = ("metric_type", "metric_name", "value")


def _header_key(header: Any) -> str:
    return str(header).strip().lower().replace("_", "").replace(" ", "")


def _resolve_headers(headers: Iterable[Any]) -> Dict[str, Any]:
    """Map canonical field names to the actual headers present."""
    available = {_header_key(h): h for h in headers}
    resolved = {}
    for field_name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias in available:
                resolved[field_name] = available[alias]
                break
    return resolved


def _parse_value(raw: Any) -> Optional[float]:
    """Numeric value, or None so the normalizer flags it as a data-quality issue."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(str(raw).replace(",", "").replace("$", "").replace("%", "").strip())
    except ValueError:
        return None


def _optional_text(raw: Any) -> Optional[str]:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return None
    return str(raw)


def metrics_from_records(records: Sequence[Dict[str, Any]], site_id: Optional[str] = None) -> List[RawMetric]:
    """
    Parse metric records (camelCase or snake_case keys) into RawMetric objects.

    Args:
        records: List of dicts, e.g. the repository's JSON array
        site_id: Fallback site id for records that do not carry one

    Returns:
        List of RawMetric; records missing a metric type or name are skipped
    """
    metrics = []
    for index, record in enumerate(records):
        fields = _resolve_headers(record.keys())
        metric_type = _optional_text(record.get(fields.get("metric_type")))
        metric_name = _optional_text(record.get(fields.get("metric_name")))
        if not metric_type or not metric_name:
            logger.warning(f"Skipping metric record {index}: missing metric type or name ({record})")
            continue

        record_site = _optional_text(record.get(fields.get("site_id"))) or site_id
        metrics.append(RawMetric(
            site_id=record_site,
            metric_type=metric_type,
            metric_name=metric_name,
            value=_parse_value(record.get(fields.get("value"))),
            unit=_optional_text(record.get(fields.get("unit"))),
            source=_optional_text(record.get(fields.get("source"))),
        ))
    return metrics


def metrics_from_frame(df: pd.DataFrame, site_id: Optional[str] = None) -> List[RawMetric]:
    """
    Convert a DataFrame of metric rows (e.g. a CSV export) into RawMetric objects.

    Raises:
        ValueError: if the frame lacks a metric type, name or value column
    """
    fields = _resolve_headers(df.columns)
    missing = [name for name in REQUIRED_FIELDS if name not in fields]
    if missing:
        raise ValueError(f"Metrics table is missing required columns: {', '.join(missing)}")

    rows = df.to_dict('records')
    return metrics_from_records(rows, site_id=site_id)


class MetricsRepository:
    """
    HTTP client for the site metrics store.
    No retry policy: callers decide whether to try again.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or Config.METRICS_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.METRICS_API_TIMEOUT

    def fetch_site_metrics(self, site_id: str) -> List[RawMetric]:
        """
        Fetch every metric recorded for a site.

        Raises:
            MetricsFetchError: network failure, non-2xx status or a payload
                that is not a JSON array
        """
        url = f"{self.base_url}/sites/{site_id}/metrics"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise MetricsFetchError(site_id, str(e)) from e
        except ValueError as e:
            raise MetricsFetchError(site_id, f"invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise MetricsFetchError(site_id, f"expected a JSON array, got {type(payload).__name__}")

        metrics = metrics_from_records(payload, site_id=site_id)
        logger.info(f"Loaded {len(metrics)} metrics for site {site_id}")
        return metrics
