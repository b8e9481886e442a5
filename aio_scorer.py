"""
AI-Overview adaptability scoring for keyword phrases

The score estimates how likely a keyword is to be answered inline by an
AI-generated overview panel. Four independent factors are computed from the
keyword text alone (optionally refined by caller-supplied competitor data),
each in [0, 100], and combined with configurable weights:

    question_type_match      interrogative markers and specificity
    search_intent_clarity    one dominant, recognisable intent
    content_structure        maps onto a list / FAQ / how-to answer shape
    competitive_environment  long, specific phrases face less competition

Scoring is deterministic and never raises.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from exceptions import InvalidScoringConfigError, InvalidWeightsError
from models import AIOAnalysis, AIOFactors, CompetitorSignal, PredictedPerformance
from text_signals import TextSignalExtractor, TextSignals
from utils import clamp_score

logger = logging.getLogger(__name__)

FACTOR_NAMES = (
    "question_type_match",
    "search_intent_clarity",
    "content_structure",
    "competitive_environment",
)

QUESTION_TYPE_SCORES = {
    "how_to": 100,
    "comparison": 85,
    "interrogative": 70,
    "evaluative": 60,
    "definition": 50,
}

INTENT_CLASS_SCORES = {
    "informational": 100,
    "comparative": 85,
    "transactional": 55,
    "navigational": 35,
}

STRUCTURE_SCORES = {
    "how_to": 100,
    "troubleshooting": 90,
    "faq": 90,
    "list": 80,
    "comparison": 80,
}

# Competition proxy by token count, the last entry covers longer phrases
LENGTH_COMPETITION_SCORES = (15, 35, 55, 70, 80, 90)

EMPTY_TEXT_RECOMMENDATION = "Keyword needs more descriptive text before it can be assessed"
AIO_PRESENT_RECOMMENDATION = (
    "This keyword already shows an AI overview, target long-tail variants or more specific questions"
)

RECOMMENDATIONS = {
    "question_type_match": 'Rephrase the keyword as a question, e.g. "How to ..." or "What is ..."',
    "search_intent_clarity": 'Add informational terms such as "guide", "tutorial" or "tips" to clarify intent',
    "content_structure": "Plan structured content: numbered lists, step-by-step sections or an FAQ",
    "competitive_environment": "Go deeper and more accurate than competing content, or narrow to a longer phrase",
}


@dataclass(frozen=True)
class AIOWeights:
    """Factor weights, non-negative and summing to 1"""
    question_type_match: float = 0.25
    search_intent_clarity: float = 0.25
    content_structure: float = 0.25
    competitive_environment: float = 0.25

    def __post_init__(self):
        values = self.as_tuple()
        if any(w < 0 for w in values):
            raise InvalidWeightsError(f"Weights cannot be negative: {values}")
        if not math.isclose(sum(values), 1.0, abs_tol=1e-6):
            raise InvalidWeightsError(f"Weights must sum to 1, got {sum(values):.6f}")

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.question_type_match, self.search_intent_clarity,
                self.content_structure, self.competitive_environment)


@dataclass(frozen=True)
class AIOScoringConfig:
    """Weights, recommendation thresholds and performance bands"""
    weights: AIOWeights = field(default_factory=AIOWeights)
    thresholds: Tuple[int, int, int, int] = (60, 60, 60, 50)
    high_band: int = 70
    medium_band: int = 40
    floor: int = 0
    question_baseline: int = 20
    specificity_bonus: int = 15
    structure_baseline: int = 40

    def __post_init__(self):
        if len(self.thresholds) != len(FACTOR_NAMES):
            raise InvalidScoringConfigError(
                f"Expected {len(FACTOR_NAMES)} thresholds, got {len(self.thresholds)}"
            )


DEFAULT_AIO_CONFIG = AIOScoringConfig()


class AIOScorer:
    """Scores keyword text for AI-Overview adaptability"""

    def __init__(self, config: AIOScoringConfig = DEFAULT_AIO_CONFIG,
                 extractor: Optional[TextSignalExtractor] = None):
        self.config = config
        self.extractor = extractor or TextSignalExtractor()

    def score(self, text: Optional[str], competitor: Optional[CompetitorSignal] = None) -> AIOAnalysis:
        signals = self.extractor.extract(text or "")

        if signals.is_empty:
            floor = self.config.floor
            factors = AIOFactors(floor, floor, floor, floor)
            recommendations = [EMPTY_TEXT_RECOMMENDATION] + self._recommendations(factors, competitor)
        else:
            factors = AIOFactors(
                question_type_match=self._question_type_match(signals),
                search_intent_clarity=self._search_intent_clarity(signals),
                content_structure=self._content_structure(signals),
                competitive_environment=self._competitive_environment(signals, competitor),
            )
            recommendations = self._recommendations(factors, competitor)

        total = sum(w * f for w, f in zip(self.config.weights.as_tuple(), self._factor_values(factors)))
        score = clamp_score(total)

        analysis = AIOAnalysis(
            score=score,
            factors=factors,
            recommendations=tuple(recommendations),
            predicted_performance=self._predict_performance(score),
        )
        logger.debug(f"AIO score for '{signals.normalized}': {score} ({analysis.predicted_performance.value})")
        return analysis

    def score_many(self, items: Iterable[Tuple[str, str]]) -> List[Dict]:
        """Score (id, text) pairs, keeping input order"""
        return [
            {"id": item_id, "keyword": text, "analysis": self.score(text)}
            for item_id, text in items
        ]

    def _question_type_match(self, signals: TextSignals) -> int:
        matched = [QUESTION_TYPE_SCORES[m] for m in signals.question_markers if m in QUESTION_TYPE_SCORES]
        if not matched:
            return clamp_score(self.config.question_baseline)

        value = max(matched)
        if signals.token_count >= 3:
            value += self.config.specificity_bonus
        return clamp_score(value)

    def _search_intent_clarity(self, signals: TextSignals) -> int:
        intents = signals.intent_classes
        if len(intents) == 1:
            value = INTENT_CLASS_SCORES[next(iter(intents))]
        elif intents:
            value = 50
        else:
            value = 45

        if signals.token_count < 2:
            value = min(value, 20)
        elif signals.token_count > 8:
            value -= 25
        return clamp_score(value)

    def _content_structure(self, signals: TextSignals) -> int:
        shapes = set(signals.structure_cues)
        if signals.has_number:
            shapes.add("list")
        scores = [STRUCTURE_SCORES[s] for s in shapes if s in STRUCTURE_SCORES]
        return clamp_score(max(scores + [self.config.structure_baseline]))

    def _competitive_environment(self, signals: TextSignals, competitor: Optional[CompetitorSignal]) -> int:
        if competitor is not None:
            if competitor.has_ai_overview:
                return 0
            if not competitor.top_competitors_cover:
                return 100
            if competitor.average_content_quality < 70:
                return 75
            return 50

        index = min(signals.token_count, len(LENGTH_COMPETITION_SCORES)) - 1
        value = LENGTH_COMPETITION_SCORES[index]
        if signals.is_question or signals.has_number:
            value += 10
        return clamp_score(value)

    def _recommendations(self, factors: AIOFactors, competitor: Optional[CompetitorSignal]) -> List[str]:
        recommendations = []
        for name, value, threshold in zip(FACTOR_NAMES, self._factor_values(factors), self.config.thresholds):
            if value >= threshold:
                continue
            if name == "competitive_environment" and competitor is not None and competitor.has_ai_overview:
                recommendations.append(AIO_PRESENT_RECOMMENDATION)
            else:
                recommendations.append(RECOMMENDATIONS[name])
        return recommendations

    def _predict_performance(self, score: int) -> PredictedPerformance:
        if score >= self.config.high_band:
            return PredictedPerformance.HIGH
        if score >= self.config.medium_band:
            return PredictedPerformance.MEDIUM
        return PredictedPerformance.LOW

    @staticmethod
    def _factor_values(factors: AIOFactors) -> Tuple[int, int, int, int]:
        return (factors.question_type_match, factors.search_intent_clarity,
                factors.content_structure, factors.competitive_environment)
