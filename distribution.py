"""
Per-tier distribution statistics over a keyword population
"""
import logging
from typing import Any, Dict, Iterable, Optional

from models import DistributionReport, PredictedPerformance, PriorityTier, TierAIOStats
from priority_classifier import PriorityClassifier
from utils import timed

logger = logging.getLogger(__name__)


def format_percentage(count: int, total: int) -> str:
    if total == 0:
        return "0%"
    return f"{count / total * 100:.2f}%"


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


class DistributionAggregator:
    """Counts keywords per priority tier"""

    def __init__(self, classifier: Optional[PriorityClassifier] = None):
        self.classifier = classifier or PriorityClassifier()

    def _tier_of(self, item: Any) -> PriorityTier:
        priority = _field(item, "priority")
        if isinstance(priority, PriorityTier):
            return priority
        if isinstance(priority, str):
            return PriorityTier(priority.upper())
        # No stored tier, classify from the volume
        return self.classifier.classify(_field(item, "search_volume", 0) or 0)

    @timed("distribution aggregate")
    def aggregate(self, keywords: Iterable[Any]) -> DistributionReport:
        counts = {tier: 0 for tier in PriorityTier.ordered()}
        total = 0
        for item in keywords:
            counts[self._tier_of(item)] += 1
            total += 1

        percentages = {tier: format_percentage(count, total) for tier, count in counts.items()}
        logger.debug(f"Aggregated {total} keywords into {sum(1 for c in counts.values() if c)} tiers")
        return DistributionReport(counts=counts, total=total, percentages=percentages)

    def aio_stats_by_tier(self, keywords: Iterable[Any]) -> Dict[PriorityTier, TierAIOStats]:
        """Average AIO score and high-potential count for each tier"""
        buckets = {tier: [] for tier in PriorityTier.ordered()}
        for item in keywords:
            buckets[self._tier_of(item)].append(item)

        stats = {}
        for tier, items in buckets.items():
            scores = [_field(item, "aio_score", 0) or 0 for item in items]
            high = 0
            for item in items:
                analysis = _field(item, "aio_analysis")
                if analysis is not None and analysis.predicted_performance is PredictedPerformance.HIGH:
                    high += 1
            average = round(sum(scores) / len(scores), 1) if scores else 0.0
            stats[tier] = TierAIOStats(count=len(items), average_aio_score=average, high_potential=high)
        return stats
