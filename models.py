"""
Data models for the keyword classification and scoring engine
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class PriorityTier(Enum):
    """Priority tiers, P0 is the most urgent"""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"
    P5 = "P5"

    @property
    def rank(self) -> int:
        return int(self.value[1:])

    @classmethod
    def ordered(cls) -> List["PriorityTier"]:
        return sorted(cls, key=lambda tier: tier.rank)


class PredictedPerformance(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class KeywordStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DRAFT = "DRAFT"


@dataclass(frozen=True)
class PriorityTierConfig:
    """Volume band and resourcing guidance for one priority tier"""
    tier: PriorityTier
    min_volume: int
    max_volume: Optional[int]  # exclusive, None for the unbounded top tier
    description: str
    resource_allocation: str

    def contains(self, volume: float) -> bool:
        if volume < self.min_volume:
            return False
        return self.max_volume is None or volume < self.max_volume

    def to_dict(self) -> Dict:
        return {
            "level": self.tier.value,
            "min_volume": self.min_volume,
            "max_volume": self.max_volume,
            "description": self.description,
            "resource_allocation": self.resource_allocation,
        }


@dataclass(frozen=True)
class CompetitorSignal:
    """Caller-supplied view of the current result page for a keyword"""
    has_ai_overview: bool = False
    top_competitors_cover: bool = True
    average_content_quality: float = 100.0


@dataclass(frozen=True)
class AIOFactors:
    """Independent sub-scores in [0, 100], in declaration order"""
    question_type_match: int
    search_intent_clarity: int
    content_structure: int
    competitive_environment: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "question_type_match": self.question_type_match,
            "search_intent_clarity": self.search_intent_clarity,
            "content_structure": self.content_structure,
            "competitive_environment": self.competitive_environment,
        }


@dataclass(frozen=True)
class AIOAnalysis:
    """Result of scoring a keyword for AI-Overview adaptability"""
    score: int
    factors: AIOFactors
    recommendations: Tuple[str, ...]
    predicted_performance: PredictedPerformance

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "factors": self.factors.as_dict(),
            "recommendations": list(self.recommendations),
            "predicted_performance": self.predicted_performance.value,
        }


@dataclass
class KeywordRecord:
    """A keyword together with the annotations computed by the engine"""
    id: str
    text: str
    search_volume: int
    cpc: float
    priority: PriorityTier
    priority_info: PriorityTierConfig
    aio_score: int
    aio_analysis: AIOAnalysis
    status: KeywordStatus = KeywordStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self, include_analysis: bool = True) -> Dict:
        return {
            "id": self.id,
            "text": self.text,
            "search_volume": self.search_volume,
            "cpc": self.cpc,
            "priority": self.priority.value,
            "priority_info": self.priority_info.to_dict() if include_analysis else None,
            "aio_score": self.aio_score,
            "aio_analysis": self.aio_analysis.to_dict() if include_analysis else None,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class DistributionReport:
    """Per-tier keyword counts and formatted percentages"""
    counts: Dict[PriorityTier, int]
    total: int
    percentages: Dict[PriorityTier, str]

    def numeric_percentages(self) -> Dict[PriorityTier, float]:
        return {tier: float(value.rstrip("%")) for tier, value in self.percentages.items()}

    def to_dict(self) -> Dict:
        return {
            "counts": {tier.value: count for tier, count in self.counts.items()},
            "total": self.total,
            "percentages": {tier.value: value for tier, value in self.percentages.items()},
        }


@dataclass(frozen=True)
class TierAIOStats:
    """AIO score summary for the keywords of one tier"""
    count: int
    average_aio_score: float
    high_potential: int

    def to_dict(self) -> Dict:
        return {
            "count": self.count,
            "average_aio_score": self.average_aio_score,
            "high_potential": self.high_potential,
        }


@dataclass
class BatchRecomputeResult:
    """Records refreshed by a batch recompute plus the ids that were not found"""
    updated: List[KeywordRecord] = field(default_factory=list)
    skipped_ids: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[KeywordRecord]:
        return iter(self.updated)

    def __len__(self) -> int:
        return len(self.updated)


@dataclass
class KeywordPage:
    """One page of a filtered keyword listing"""
    items: List[Dict]
    total: int
    page: int
    limit: int
