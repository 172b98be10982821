import logging
import sys
from collections import defaultdict
from pathlib import Path

import pandas as pd

from site_feasibility.categories import DEFAULT_CATEGORY_WEIGHTS
from site_feasibility.config import Config
from site_feasibility.errors import FeasibilityError
from site_feasibility.metrics_client import MetricsRepository, metrics_from_frame
from site_feasibility.recommendation_engine import build_rationale, recommend
from site_feasibility.score_cache import ScoreCache

# Configure logging
logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)


class ScoreRecalculator:
    def __init__(self, repository=None, cache=None):
        self.repository = repository if repository is not None else MetricsRepository()
        self.cache = cache if cache is not None else ScoreCache()

    def recalculate_site(self, site_id):
        """Fetch a site's metrics and recalculate its score (explicit, bypasses the cache)."""
        metrics = self.repository.fetch_site_metrics(site_id)
        return self.cache.recalculate(site_id, metrics)

    def recalculate_file(self, path):
        """Score every site found in a CSV or JSON metrics export."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            df = pd.read_json(path, dtype=False)
        else:
            # Keep ids like "007" as text
            df = pd.read_csv(path, dtype=str)

        by_site = defaultdict(list)
        for metric in metrics_from_frame(df):
            by_site[metric.site_id].append(metric)

        results = []
        for site_id, metrics in by_site.items():
            try:
                results.append(self.cache.recalculate(site_id, metrics))
            except Exception as e:
                logger.error(f"Scoring failed for site {site_id}: {e}")
        logger.info(f"Recalculated {len(results)} of {len(by_site)} sites from {path.name}")
        return results


def format_scorecard(score):
    """Plain-text scorecard for terminal output."""
    names = {w.category_key: (w.name, w.weight) for w in DEFAULT_CATEGORY_WEIGHTS}
    lines = [
        "=" * 50,
        f"Site: {score.site_id}",
        f"TOTAL SCORE: {score.overall_score}/100",
        f"GRADE: {score.grade} - {score.label}",
    ]
    if score.low_confidence:
        lines.append("CONFIDENCE: Low (no usable metrics)")
    lines.append("")
    for key, category in score.category_scores.items():
        name, weight = names.get(key, (key, 0))
        source = f"{category.metric_count} metrics" if category.has_data else "neutral default"
        lines.append(
            f"  {name} ({weight}%): {category.score}/100 - "
            f"contributes {score.contributions.get(key, 0)} pts ({source})"
        )
    lines.append("")
    lines.append(build_rationale(score))
    lines.append("")
    for item in recommend(score):
        lines.append(f"  [{item.tier.value}] {item.text}")
    for warning in score.warnings:
        lines.append(f"  ! {warning.metric_name}: {warning.message}")
    lines.append("=" * 50)
    return "\n".join(lines)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python main.py <metrics.csv|metrics.json|site_id> [...]")
        sys.exit(1)

    recalculator = ScoreRecalculator()
    for target in sys.argv[1:]:
        try:
            if Path(target).exists():
                scores = recalculator.recalculate_file(target)
            else:
                scores = [recalculator.recalculate_site(target)]
        except FeasibilityError as e:
            logger.error(str(e))
            continue
        for score in scores:
            print(format_scorecard(score))
