"""
Entry point bundling the classifier, scorer and aggregator
"""
import logging
from typing import Any, Iterable, Optional, Tuple, Union

from aio_scorer import AIOScorer, AIOScoringConfig, DEFAULT_AIO_CONFIG
from distribution import DistributionAggregator
from models import AIOAnalysis, CompetitorSignal, DistributionReport, PriorityTier, PriorityTierConfig
from priority_classifier import DEFAULT_PRIORITY_CONFIG, PriorityClassifier, PriorityConfig

logger = logging.getLogger(__name__)


class KeywordEngine:
    """Pure operations exposed to the keyword catalog and transport layers"""

    def __init__(self, priority_config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
                 scoring_config: AIOScoringConfig = DEFAULT_AIO_CONFIG):
        self.classifier = PriorityClassifier(priority_config)
        self.scorer = AIOScorer(scoring_config)
        self.aggregator = DistributionAggregator(self.classifier)

    def classify(self, volume: float) -> PriorityTier:
        return self.classifier.classify(volume)

    def tier_info(self, tier: Union[PriorityTier, str]) -> PriorityTierConfig:
        return self.classifier.get_tier_info(tier)

    def score(self, text: str, competitor: Optional[CompetitorSignal] = None) -> AIOAnalysis:
        return self.scorer.score(text, competitor)

    def aggregate(self, keywords: Iterable[Any]) -> DistributionReport:
        return self.aggregator.aggregate(keywords)

    def list_configuration(self) -> Tuple[PriorityTierConfig, ...]:
        return self.classifier.list_configuration()
