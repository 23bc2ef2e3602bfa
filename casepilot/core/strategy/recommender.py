"""Strategy recommendation."""

import threading
from datetime import timedelta
from typing import Dict, List, Optional

from casepilot.core.analysis.complexity_scorer import ComplexityScorer
from casepilot.models.complexity import ComplexityScore
from casepilot.models.config import RecommendationConfig
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.recommendation import StrategyRecommendation
from casepilot.models.taxonomy import StrategyCategory, StrategyType, strategy_profile
from casepilot.utils.exceptions import RecommendationError
from casepilot.utils.logging import get_logger
from .cache import RecommendationCache

INJECTION_METHODS = {"POST", "PUT"}


class StrategyRecommender:
    """Chooses a primary strategy and complementary strategies for an endpoint."""

    def __init__(
        self,
        config: Optional[RecommendationConfig] = None,
        scorer: Optional[ComplexityScorer] = None,
        cache: Optional[RecommendationCache] = None
    ):
        """Initialize recommender.

        Args:
            config: Thresholds, confidence and cache settings
            scorer: Complexity scorer used when no score is supplied
            cache: Shared recommendation cache
        """
        self.config = config or RecommendationConfig()
        self.scorer = scorer if scorer is not None else ComplexityScorer()
        self.cache = cache if cache is not None else RecommendationCache(ttl=self.config.cache_ttl)
        self.logger = get_logger("strategy.recommender")

        self._counter_lock = threading.Lock()
        self._counters: Dict[str, int] = {
            "recommended": 0,
            "successful": 0,
            "failed": 0,
        }

    def recommend(
        self,
        endpoint: EndpointDescriptor,
        complexity: Optional[ComplexityScore] = None
    ) -> StrategyRecommendation:
        """Recommend strategies for an endpoint.

        Never raises: any failure is logged and the fallback recommendation
        is returned instead.

        Args:
            endpoint: Endpoint descriptor
            complexity: Precomputed complexity score

        Returns:
            Strategy recommendation with a primary strategy set
        """
        self._count("recommended")

        try:
            self._validate(endpoint)

            key = endpoint.cache_key()
            if self.config.cache_enabled:
                cached = self.cache.get(key)
                if cached is not None:
                    self.logger.debug("Recommendation cache hit", key=key)
                    self._count("successful")
                    return cached

            if complexity is None:
                complexity = self.scorer.score(endpoint)

            recommendation = self._build(endpoint, complexity)

            if self.config.cache_enabled:
                self.cache.put(key, recommendation)

            self._count("successful")
            self.logger.info(
                "Recommended strategies",
                endpoint=endpoint.get_endpoint_id(),
                primary=recommendation.primary_strategy.value,
                complementary=[s.value for s in recommendation.complementary_strategies],
                confidence=recommendation.confidence,
            )
            return recommendation

        except Exception as e:
            self._count("failed")
            self.logger.warning(
                "Recommendation failed, using fallback",
                endpoint=getattr(endpoint, "path", None),
                error=str(e),
                error_type=type(e).__name__,
            )
            return self.fallback(reason=str(e), complexity=complexity)

    def fallback(
        self,
        reason: str = "",
        complexity: Optional[ComplexityScore] = None
    ) -> StrategyRecommendation:
        """Low-confidence FunctionalBasic recommendation."""
        primary = StrategyType.FUNCTIONAL_BASIC
        reasoning = "Fallback recommendation"
        if reason:
            reasoning += f": {reason}"
        return StrategyRecommendation(
            primary_strategy=primary,
            complementary_strategies=[],
            confidence=self.config.fallback_confidence,
            estimated_effort=timedelta(minutes=strategy_profile(primary).complexity),
            estimated_test_cases=1,
            reasoning=reasoning,
            is_fallback=True,
            complexity=complexity,
        )

    def get_metrics(self) -> Dict[str, int]:
        """Recommendation counters plus cache statistics."""
        with self._counter_lock:
            metrics = dict(self._counters)
        metrics["cache_hits"] = self.cache.hits
        metrics["cache_size"] = len(self.cache)
        return metrics

    def clear_cache(self) -> None:
        self.cache.clear()

    def _count(self, name: str) -> None:
        with self._counter_lock:
            self._counters[name] += 1

    def _validate(self, endpoint: EndpointDescriptor) -> None:
        if endpoint is None:
            raise RecommendationError("Endpoint is missing")
        if not endpoint.method or not endpoint.path:
            raise RecommendationError(
                "Endpoint method and path are required",
                details={"method": endpoint.method, "path": endpoint.path},
            )

    def _build(
        self,
        endpoint: EndpointDescriptor,
        complexity: ComplexityScore
    ) -> StrategyRecommendation:
        reasons: List[str] = []
        primary = self._select_primary(endpoint, complexity, reasons)
        complementary = self._select_complementary(endpoint, complexity, primary, reasons)

        confidence = self.config.base_confidence
        if endpoint.has_parameters:
            confidence += 0.1
        if endpoint.responses:
            confidence += 0.1
        confidence = max(0.0, min(1.0, confidence))

        minutes = sum(strategy_profile(s).complexity for s in [primary] + complementary)

        return StrategyRecommendation(
            primary_strategy=primary,
            complementary_strategies=complementary,
            confidence=round(confidence, 4),
            estimated_effort=timedelta(minutes=minutes),
            estimated_test_cases=1 + len(complementary),
            reasoning="; ".join(reasons),
            complexity=complexity,
        )

    def _select_primary(
        self,
        endpoint: EndpointDescriptor,
        complexity: ComplexityScore,
        reasons: List[str]
    ) -> StrategyType:
        total = complexity.total
        if endpoint.requires_authentication:
            reasons.append("authentication required")
            return StrategyType.SECURITY_BASIC
        if total > self.config.performance_threshold:
            reasons.append(f"complexity {total} above {self.config.performance_threshold}")
            return StrategyType.PERFORMANCE_BASIC
        if total > self.config.comprehensive_threshold:
            reasons.append(f"complexity {total} above {self.config.comprehensive_threshold}")
            return StrategyType.FUNCTIONAL_COMPREHENSIVE
        reasons.append(f"complexity {total} is low")
        return StrategyType.FUNCTIONAL_BASIC

    def _select_complementary(
        self,
        endpoint: EndpointDescriptor,
        complexity: ComplexityScore,
        primary: StrategyType,
        reasons: List[str]
    ) -> List[StrategyType]:
        selected: List[StrategyType] = []

        if (endpoint.requires_authentication
                and strategy_profile(primary).category != StrategyCategory.SECURITY):
            selected += [StrategyType.SECURITY_AUTHENTICATION, StrategyType.SECURITY_AUTHORIZATION]
            reasons.append("authentication checks")

        if endpoint.has_parameters:
            selected += [StrategyType.FUNCTIONAL_BOUNDARY, StrategyType.FUNCTIONAL_EDGE_CASE]
            reasons.append("parameters present")

        if endpoint.method in INJECTION_METHODS:
            selected += [StrategyType.SECURITY_INJECTION, StrategyType.SECURITY_XSS]
            reasons.append(f"{endpoint.method} accepts input")

        if complexity.total > self.config.load_threshold:
            selected.append(StrategyType.PERFORMANCE_LOAD)
            reasons.append(f"complexity {complexity.total} above {self.config.load_threshold}")

        return [s for s in dict.fromkeys(selected) if s != primary]
