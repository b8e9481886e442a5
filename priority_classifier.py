"""
Priority tier configuration and search-volume classification
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple, Union

from exceptions import InvalidPriorityConfigError, UnknownTierError
from models import PriorityTier, PriorityTierConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityConfig:
    """Immutable tier table, ordered from P0 down to P5"""
    tiers: Tuple[PriorityTierConfig, ...]

    def __post_init__(self):
        tiers = tuple(self.tiers)
        object.__setattr__(self, "tiers", tiers)
        self._validate(tiers)

    @staticmethod
    def _validate(tiers: Tuple[PriorityTierConfig, ...]):
        expected = PriorityTier.ordered()
        if [t.tier for t in tiers] != expected:
            raise InvalidPriorityConfigError(
                f"Tiers must be listed exactly once in order {[t.value for t in expected]}"
            )

        if tiers[0].max_volume is not None:
            raise InvalidPriorityConfigError(f"Top tier {tiers[0].tier.value} must be unbounded")

        for upper, lower in zip(tiers, tiers[1:]):
            if lower.min_volume >= upper.min_volume:
                raise InvalidPriorityConfigError(
                    f"{lower.tier.value} min_volume must be below {upper.tier.value} min_volume"
                )
            if lower.max_volume != upper.min_volume:
                raise InvalidPriorityConfigError(
                    f"{lower.tier.value} must end where {upper.tier.value} starts "
                    f"({lower.max_volume} != {upper.min_volume})"
                )

        if tiers[-1].min_volume != 0:
            raise InvalidPriorityConfigError(f"Lowest tier {tiers[-1].tier.value} must start at 0")

    @classmethod
    def from_thresholds(cls, thresholds: Dict[PriorityTier, int],
                        descriptions: Dict[PriorityTier, Tuple[str, str]] = None) -> "PriorityConfig":
        """Build a contiguous table from per-tier minimum volumes"""
        descriptions = descriptions or {}
        tiers = []
        upper = None
        for tier in PriorityTier.ordered():
            if tier not in thresholds:
                raise InvalidPriorityConfigError(f"Missing threshold for {tier.value}")
            description, allocation = descriptions.get(tier, ("", ""))
            tiers.append(PriorityTierConfig(tier, thresholds[tier], upper, description, allocation))
            upper = thresholds[tier]
        return cls(tuple(tiers))


DEFAULT_PRIORITY_CONFIG = PriorityConfig((
    PriorityTierConfig(PriorityTier.P0, 100000, None,
                       "Ultra-high traffic, strategic core",
                       "Top priority, full investment"),
    PriorityTierConfig(PriorityTier.P1, 50000, 100000,
                       "High traffic, key investment",
                       "High priority, focused investment"),
    PriorityTierConfig(PriorityTier.P2, 20000, 50000,
                       "Upper-mid traffic, steady growth",
                       "Upper-mid priority, steady investment"),
    PriorityTierConfig(PriorityTier.P3, 10000, 20000,
                       "Mid traffic, selective investment",
                       "Medium priority, selective investment"),
    PriorityTierConfig(PriorityTier.P4, 5000, 10000,
                       "Low traffic, long-tail opportunity",
                       "Low priority, opportunistic investment"),
    PriorityTierConfig(PriorityTier.P5, 0, 5000,
                       "Micro traffic, precise targeting",
                       "Lowest priority, long-tail strategy"),
))


class PriorityClassifier:
    """Maps a search volume onto a priority tier"""

    def __init__(self, config: PriorityConfig = DEFAULT_PRIORITY_CONFIG):
        self.config = config
        self._by_tier = {tier_config.tier: tier_config for tier_config in config.tiers}

    def classify(self, search_volume: float) -> PriorityTier:
        """Return the most urgent tier whose minimum volume is reached"""
        if search_volume < 0:
            logger.warning(f"Negative search volume {search_volume}, using lowest tier")
            return self.config.tiers[-1].tier

        for tier_config in self.config.tiers:
            if tier_config.min_volume <= search_volume:
                return tier_config.tier

        # Unreachable for a validated table, the lowest tier starts at 0
        return self.config.tiers[-1].tier

    def get_tier_info(self, tier: Union[PriorityTier, str]) -> PriorityTierConfig:
        if isinstance(tier, str):
            try:
                tier = PriorityTier(tier.upper())
            except ValueError:
                raise UnknownTierError(f"Unknown priority tier: {tier}")
        try:
            return self._by_tier[tier]
        except KeyError:
            raise UnknownTierError(f"Unknown priority tier: {tier}")

    def list_configuration(self) -> Tuple[PriorityTierConfig, ...]:
        return self.config.tiers

    def classify_many(self, volumes: Iterable[float]) -> List[PriorityTier]:
        return [self.classify(volume) for volume in volumes]
