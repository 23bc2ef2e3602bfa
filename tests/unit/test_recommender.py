"""Tests for strategy recommendation and its cache."""

import threading
from datetime import timedelta
from unittest.mock import Mock

import pytest

from casepilot.core.strategy.cache import RecommendationCache
from casepilot.core.strategy.recommender import StrategyRecommender
from casepilot.models.complexity import ComplexityScore
from casepilot.models.config import RecommendationConfig
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.recommendation import StrategyRecommendation
from casepilot.models.taxonomy import StrategyCategory, StrategyType, strategy_profile


class FakeClock:
    """Manually advanced time source."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRecommendationCache:
    """Test TTL cache behaviour."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.cache = RecommendationCache(ttl=10, clock=self.clock)
        self.recommendation = StrategyRecommendation(primary_strategy=StrategyType.FUNCTIONAL_BASIC)

    def test_miss(self):
        """Test lookup of an unknown key."""
        assert self.cache.get("missing") is None
        assert self.cache.misses == 1
        assert self.cache.hits == 0

    def test_put_and_get(self):
        """Test storing and retrieving an entry."""
        self.cache.put("key", self.recommendation)

        assert self.cache.get("key") is self.recommendation
        assert self.cache.hits == 1
        assert len(self.cache) == 1

    def test_expiry(self):
        """Test entries expire after the TTL."""
        self.cache.put("key", self.recommendation)

        self.clock.now += 9.9
        assert self.cache.get("key") is self.recommendation

        self.clock.now += 0.1
        assert self.cache.get("key") is None
        assert len(self.cache) == 0

    def test_clear(self):
        """Test clearing the cache."""
        self.cache.put("a", self.recommendation)
        self.cache.put("b", self.recommendation)

        self.cache.clear()

        assert len(self.cache) == 0

    def test_concurrent_access(self):
        """Test concurrent puts and gets from several threads."""
        cache = RecommendationCache(ttl=3600)

        def worker(index):
            for i in range(200):
                key = f"key-{i % 10}"
                cache.put(key, self.recommendation)
                assert cache.get(key) is self.recommendation

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 10


class TestStrategyRecommender:
    """Test strategy recommendation rules."""

    def setup_method(self):
        """Set up test fixtures."""
        self.recommender = StrategyRecommender()
        self.uncached = StrategyRecommender(config=RecommendationConfig(cache_enabled=False))

    def test_trivial_endpoint(self, health_endpoint):
        """Test low complexity endpoint without parameters."""
        rec = self.recommender.recommend(health_endpoint)

        assert rec.primary_strategy == StrategyType.FUNCTIONAL_BASIC
        assert rec.complementary_strategies == []
        assert rec.confidence == pytest.approx(0.9)
        assert rec.estimated_effort == timedelta(minutes=1)
        assert rec.estimated_test_cases == 1
        assert rec.is_fallback is False
        assert rec.complexity.total == 2

    def test_threshold_is_exclusive(self, get_item_endpoint):
        """Test total of exactly 20 stays FunctionalBasic."""
        rec = self.recommender.recommend(get_item_endpoint)

        assert rec.complexity.total == 20
        assert rec.primary_strategy == StrategyType.FUNCTIONAL_BASIC
        assert rec.complementary_strategies == [
            StrategyType.FUNCTIONAL_BOUNDARY,
            StrategyType.FUNCTIONAL_EDGE_CASE,
        ]
        assert rec.confidence == 1.0
        assert rec.estimated_effort == timedelta(minutes=1 + 2 + 3)

    @pytest.mark.parametrize("total,primary,load", [
        (20, StrategyType.FUNCTIONAL_BASIC, False),
        (21, StrategyType.FUNCTIONAL_COMPREHENSIVE, False),
        (30, StrategyType.FUNCTIONAL_COMPREHENSIVE, False),
        (31, StrategyType.FUNCTIONAL_COMPREHENSIVE, True),
        (50, StrategyType.FUNCTIONAL_COMPREHENSIVE, True),
        (51, StrategyType.PERFORMANCE_BASIC, True),
    ])
    def test_complexity_thresholds(self, health_endpoint, total, primary, load):
        """Test primary selection and load testing by total complexity."""
        rec = self.uncached.recommend(health_endpoint, ComplexityScore(business_logic=total))

        assert rec.primary_strategy == primary
        assert (StrategyType.PERFORMANCE_LOAD in rec.complementary_strategies) is load

    def test_authentication_selects_security(self, create_user_endpoint):
        """Test authenticated endpoint gets a security primary strategy."""
        rec = self.recommender.recommend(create_user_endpoint)

        assert rec.primary_strategy == StrategyType.SECURITY_BASIC
        assert strategy_profile(rec.primary_strategy).category == StrategyCategory.SECURITY
        assert rec.complementary_strategies == [
            StrategyType.FUNCTIONAL_BOUNDARY,
            StrategyType.FUNCTIONAL_EDGE_CASE,
            StrategyType.SECURITY_INJECTION,
            StrategyType.SECURITY_XSS,
            StrategyType.PERFORMANCE_LOAD,
        ]
        assert rec.estimated_effort == timedelta(minutes=1 + 2 + 3 + 2 + 2 + 3)

    def test_authentication_wins_over_complexity(self, create_user_endpoint):
        """Test that authentication is checked before complexity."""
        rec = self.uncached.recommend(create_user_endpoint, ComplexityScore(security=500))

        assert rec.primary_strategy == StrategyType.SECURITY_BASIC

    def test_put_adds_injection_checks(self):
        """Test PUT endpoints get injection and XSS strategies."""
        endpoint = EndpointDescriptor(method="PUT", path="/settings")
        rec = self.recommender.recommend(endpoint)

        assert StrategyType.SECURITY_INJECTION in rec.complementary_strategies
        assert StrategyType.SECURITY_XSS in rec.complementary_strategies

    def test_confidence_without_documentation(self):
        """Test base confidence when nothing is documented."""
        rec = self.recommender.recommend(EndpointDescriptor(method="GET", path="/ping"))
        assert rec.confidence == pytest.approx(0.8)

    def test_custom_thresholds(self, health_endpoint):
        """Test configured thresholds."""
        config = RecommendationConfig(
            performance_threshold=5, comprehensive_threshold=1, load_threshold=1
        )
        rec = StrategyRecommender(config=config).recommend(health_endpoint)

        assert rec.primary_strategy == StrategyType.FUNCTIONAL_COMPREHENSIVE
        assert StrategyType.PERFORMANCE_LOAD in rec.complementary_strategies

    def test_empty_path_falls_back(self):
        """Test fallback for an endpoint without a path."""
        rec = self.recommender.recommend(EndpointDescriptor(method="GET", path=""))

        assert rec.is_fallback is True
        assert rec.primary_strategy == StrategyType.FUNCTIONAL_BASIC
        assert rec.complementary_strategies == []
        assert rec.confidence == 0.5
        assert "Fallback" in rec.reasoning
        assert self.recommender.get_metrics()["failed"] == 1

    def test_scorer_failure_falls_back(self, health_endpoint):
        """Test fallback when scoring raises."""
        scorer = Mock()
        scorer.score.side_effect = RuntimeError("boom")
        recommender = StrategyRecommender(scorer=scorer)

        rec = recommender.recommend(health_endpoint)

        assert rec.is_fallback is True
        assert "boom" in rec.reasoning
        assert len(recommender.cache) == 0

    def test_fallback_confidence_configurable(self):
        """Test fallback confidence taken from configuration."""
        recommender = StrategyRecommender(config=RecommendationConfig(fallback_confidence=0.6))
        assert recommender.fallback().confidence == 0.6

    def test_cached_recommendation_reused(self, health_endpoint):
        """Test cache hit returns the stored recommendation."""
        first = self.recommender.recommend(health_endpoint)
        second = self.recommender.recommend(health_endpoint)

        assert second is first
        metrics = self.recommender.get_metrics()
        assert metrics["recommended"] == 2
        assert metrics["successful"] == 2
        assert metrics["cache_hits"] == 1
        assert metrics["cache_size"] == 1

    def test_cache_expiry_recomputes(self, health_endpoint):
        """Test expired entries are recomputed."""
        clock = FakeClock()
        recommender = StrategyRecommender(cache=RecommendationCache(ttl=3600, clock=clock))

        first = recommender.recommend(health_endpoint)
        clock.now += 3600
        second = recommender.recommend(health_endpoint)

        assert second is not first
        assert second.execution_id != first.execution_id
        assert second.primary_strategy == first.primary_strategy

    def test_shared_cache(self, health_endpoint):
        """Test recommenders built on one cache reuse each other's entries."""
        shared = RecommendationCache(ttl=3600)
        scorer = Mock(wraps=StrategyRecommender().scorer)
        first_worker = StrategyRecommender(scorer=scorer, cache=shared)
        second_worker = StrategyRecommender(scorer=scorer, cache=shared)

        assert first_worker.cache is shared
        assert second_worker.cache is shared

        first = first_worker.recommend(health_endpoint)
        second = second_worker.recommend(health_endpoint)

        assert second is first
        assert len(shared) == 1
        assert shared.hits == 1
        assert scorer.score.call_count == 1

    def test_cache_disabled(self, health_endpoint):
        """Test recommendations are not stored when caching is off."""
        first = self.uncached.recommend(health_endpoint)
        second = self.uncached.recommend(health_endpoint)

        assert second is not first
        assert len(self.uncached.cache) == 0

    def test_clear_cache(self, health_endpoint):
        """Test clearing cached recommendations."""
        self.recommender.recommend(health_endpoint)
        self.recommender.clear_cache()

        assert self.recommender.get_metrics()["cache_size"] == 0

    def test_all_strategies(self, create_user_endpoint):
        """Test primary strategy comes first."""
        rec = self.recommender.recommend(create_user_endpoint)

        assert rec.all_strategies[0] == StrategyType.SECURITY_BASIC
        assert len(rec.all_strategies) == 6


class TestRecommenderConfig:
    """Test recommendation configuration validation."""

    def test_threshold_order_enforced(self):
        """Test performance threshold below comprehensive threshold is rejected."""
        with pytest.raises(ValueError):
            RecommendationConfig(performance_threshold=10, comprehensive_threshold=20)
