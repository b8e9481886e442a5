"""
Tests for tier distribution aggregation
"""
from collections import Counter

import pytest

from distribution import DistributionAggregator, format_percentage
from models import PriorityTier
from priority_classifier import PriorityClassifier


class TestAggregate:
    """Tests for DistributionAggregator.aggregate"""

    def test_empty_collection(self, aggregator):
        """No keywords gives zero counts and 0% without dividing by zero"""
        report = aggregator.aggregate([])
        assert report.total == 0
        assert sum(report.counts.values()) == 0
        assert set(report.counts) == set(PriorityTier)
        assert all(value == "0%" for value in report.percentages.values())

    def test_sample_keywords_match_independent_classification(self, aggregator, classifier, sample_keywords):
        """Counts agree with classifying each sample on its own"""
        report = aggregator.aggregate(sample_keywords)
        expected = Counter(classifier.classify(k["search_volume"]) for k in sample_keywords)

        assert report.total == 10
        assert sum(report.counts.values()) == report.total
        for tier in PriorityTier:
            assert report.counts[tier] == expected.get(tier, 0)

    def test_sample_distribution_values(self, seeded_catalog):
        report = seeded_catalog.distribution()
        assert report.counts == {
            PriorityTier.P0: 1,
            PriorityTier.P1: 2,
            PriorityTier.P2: 2,
            PriorityTier.P3: 2,
            PriorityTier.P4: 1,
            PriorityTier.P5: 2,
        }
        assert report.percentages[PriorityTier.P0] == "10.00%"
        assert report.percentages[PriorityTier.P1] == "20.00%"

    def test_percentages_sum_to_hundred(self, aggregator):
        keywords = [{"priority": tier} for tier in (PriorityTier.P0, PriorityTier.P1, PriorityTier.P1)]
        report = aggregator.aggregate(keywords)
        assert report.percentages[PriorityTier.P0] == "33.33%"
        assert report.percentages[PriorityTier.P1] == "66.67%"
        assert sum(report.numeric_percentages().values()) == pytest.approx(100, abs=0.05)

    def test_accepts_records_mappings_and_names(self, aggregator, seeded_catalog):
        """Stored tiers win, tier names are parsed, bare volumes are classified"""
        records = seeded_catalog.list_keywords(limit=100).items
        items = [seeded_catalog.get(records[0]["id"]), {"priority": "P3"}, {"search_volume": 60000}]
        report = aggregator.aggregate(items)
        assert report.total == 3
        assert report.counts[PriorityTier.P0] == 1
        assert report.counts[PriorityTier.P3] == 1
        assert report.counts[PriorityTier.P1] == 1

    def test_accepts_generators(self, aggregator):
        report = aggregator.aggregate({"priority": PriorityTier.P5} for _ in range(4))
        assert report.total == 4
        assert report.percentages[PriorityTier.P5] == "100.00%"

    def test_to_dict(self, aggregator):
        data = aggregator.aggregate([{"priority": PriorityTier.P2}]).to_dict()
        assert data["counts"]["P2"] == 1
        assert data["total"] == 1
        assert data["percentages"]["P0"] == "0.00%"

    def test_uses_injected_classifier(self, small_tier_table):
        aggregator = DistributionAggregator(PriorityClassifier(small_tier_table))
        report = aggregator.aggregate([{"search_volume": 2000}, {"search_volume": 20}])
        assert report.counts[PriorityTier.P0] == 1
        assert report.counts[PriorityTier.P4] == 1


class TestFormatPercentage:

    def test_zero_total(self):
        assert format_percentage(0, 0) == "0%"

    def test_two_decimals(self):
        assert format_percentage(1, 8) == "12.50%"


class TestAIOStats:
    """Tests for per-tier AIO statistics"""

    def test_sample_stats(self, seeded_catalog):
        stats = seeded_catalog.aio_stats()
        assert sum(s.count for s in stats.values()) == 10
        p0 = stats[PriorityTier.P0]
        assert p0.count == 1
        assert p0.average_aio_score == 100.0
        assert p0.high_potential == 1

    def test_empty_tier(self, aggregator):
        stats = aggregator.aio_stats_by_tier([])
        assert stats[PriorityTier.P3].count == 0
        assert stats[PriorityTier.P3].average_aio_score == 0.0
