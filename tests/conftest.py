"""
Pytest configuration and shared fixtures
"""
import pytest
import os

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aio_scorer import AIOScorer
from catalog import KeywordCatalog, SAMPLE_KEYWORDS
from distribution import DistributionAggregator
from engine import KeywordEngine
from models import PriorityTier
from monitoring import MetricsCollector
from priority_classifier import PriorityClassifier, PriorityConfig
from text_signals import TextSignalExtractor


@pytest.fixture
def classifier():
    """Classifier with the default tier table"""
    return PriorityClassifier()


@pytest.fixture
def extractor():
    return TextSignalExtractor()


@pytest.fixture
def scorer():
    """Scorer with equal factor weights"""
    return AIOScorer()


@pytest.fixture
def aggregator(classifier):
    return DistributionAggregator(classifier)


@pytest.fixture
def engine():
    return KeywordEngine()


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def catalog(engine, metrics):
    """Empty catalog wired to a metrics collector"""
    return KeywordCatalog(engine, metrics)


@pytest.fixture
def seeded_catalog(catalog):
    """Catalog holding the ten sample keywords"""
    catalog.seed_sample_data()
    return catalog


@pytest.fixture
def sample_keywords():
    """Raw sample keyword payloads"""
    return [dict(sample) for sample in SAMPLE_KEYWORDS]


@pytest.fixture
def small_tier_table():
    """Alternate thresholds for injecting a custom configuration"""
    return PriorityConfig.from_thresholds({
        PriorityTier.P0: 1000,
        PriorityTier.P1: 500,
        PriorityTier.P2: 100,
        PriorityTier.P3: 50,
        PriorityTier.P4: 10,
        PriorityTier.P5: 0,
    })
