"""Test strategy engine: the recommend and generate pipeline facade."""

import threading
import uuid
from typing import Any, Dict, List, Optional

from rich.console import Console

from casepilot.core.analysis.complexity_scorer import ComplexityScorer
from casepilot.core.generation.optimizer import TestCaseOptimizer
from casepilot.core.generation.synthesizer import TestCaseSynthesizer
from casepilot.core.progress import ProgressReporter
from casepilot.core.strategy.cache import RecommendationCache
from casepilot.core.strategy.recommender import StrategyRecommender
from casepilot.core.strategy.scenario_expander import ScenarioExpander
from casepilot.models.config import CasePilotConfig
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.recommendation import StrategyRecommendation
from casepilot.models.test_case import GeneratedTestCase, TestSuite
from casepilot.utils.constants import (
    PHASE_COMPLETE,
    PHASE_OPTIMIZING,
    PHASE_PERCENT,
    PHASE_RECOMMENDING,
    PHASE_SCORING,
    PHASE_SYNTHESIZING,
)
from casepilot.utils.exceptions import InvalidInputError
from casepilot.utils.logging import CasePilotLogger


class TestStrategyEngine:
    """Scores, recommends, synthesizes and optimizes test cases for endpoints.

    A single pipeline run is synchronous and holds no locks; only the
    recommendation cache and the counters are shared between threads.
    """

    __test__ = False

    def __init__(
        self,
        config: Optional[CasePilotConfig] = None,
        progress: Optional[ProgressReporter] = None,
        console: Optional[Console] = None,
        verbose: bool = False
    ):
        """Initialize engine.

        Args:
            config: CasePilot configuration
            progress: Progress reporter receiving phase updates
            console: Rich console for warnings
            verbose: Echo debug messages to the console
        """
        self.config = config or CasePilotConfig()
        self.progress = progress if progress is not None else ProgressReporter()
        self.logger = CasePilotLogger("engine", console=console, verbose=verbose)

        rec_config = self.config.recommendation
        self.scorer = ComplexityScorer()
        self.recommender = StrategyRecommender(
            config=rec_config,
            scorer=self.scorer,
            cache=RecommendationCache(ttl=rec_config.cache_ttl),
        )
        self.expander = ScenarioExpander()
        self.synthesizer = TestCaseSynthesizer()
        self.optimizer = TestCaseOptimizer()

        self._lock = threading.Lock()
        self._tests_generated = 0
        self._synthesis_failures = 0
        self._suites_generated = 0

    def recommend(self, endpoint: EndpointDescriptor) -> StrategyRecommendation:
        """Recommend strategies for an endpoint. Never raises.

        Args:
            endpoint: Endpoint descriptor

        Returns:
            Recommendation; the fallback when scoring or recommending fails
        """
        key = self._endpoint_key(endpoint)
        self._report(key, PHASE_SCORING, "Scoring complexity")
        self._report(key, PHASE_RECOMMENDING, "Selecting strategies")

        # Scored by the recommender only on a cache miss
        recommendation = self.recommender.recommend(endpoint)
        if recommendation.is_fallback:
            self.logger.warning(f"Using fallback recommendation for {key}", endpoint=key)
        return recommendation

    def generate(
        self,
        endpoint: EndpointDescriptor,
        recommendation: StrategyRecommendation
    ) -> List[GeneratedTestCase]:
        """Generate optimized test cases for a recommendation.

        Args:
            endpoint: Endpoint descriptor
            recommendation: Recommendation to expand

        Returns:
            De-duplicated test cases ordered by priority (possibly empty)

        Raises:
            InvalidInputError: If the endpoint lacks a method or path, or the
                recommendation lacks a primary strategy
        """
        self._validate(endpoint, recommendation)
        key = self._endpoint_key(endpoint)

        self._report(key, PHASE_SYNTHESIZING, "Synthesizing test cases")
        test_cases: List[GeneratedTestCase] = []
        failures = 0

        for strategy in recommendation.all_strategies:
            for scenario in self.expander.expand(strategy, endpoint):
                try:
                    test_cases.append(
                        self.synthesizer.synthesize(endpoint, strategy, scenario, recommendation)
                    )
                except Exception as e:
                    failures += 1
                    self.logger.warning(
                        f"Skipping {strategy.value}/{scenario.value} for {key}: {e}",
                        endpoint=key,
                        strategy=strategy.value,
                        scenario=scenario.value,
                    )

        self._report(key, PHASE_OPTIMIZING, f"Optimizing {len(test_cases)} test cases")
        optimized = self.optimizer.optimize(test_cases)

        with self._lock:
            self._tests_generated += len(optimized)
            self._synthesis_failures += failures

        self._report(key, PHASE_COMPLETE, f"Generated {len(optimized)} test cases")
        self.logger.debug(
            f"Generated {len(optimized)} test cases for {key}",
            endpoint=key,
            synthesized=len(test_cases),
            kept=len(optimized),
        )
        return optimized

    def generate_suite(
        self,
        endpoint: EndpointDescriptor,
        recommendation: Optional[StrategyRecommendation] = None
    ) -> TestSuite:
        """Recommend (when needed) and generate a complete suite.

        Raises:
            InvalidInputError: As for ``generate``
        """
        if recommendation is None:
            recommendation = self.recommend(endpoint)

        test_cases = self.generate(endpoint, recommendation)

        with self._lock:
            self._suites_generated += 1

        return TestSuite(
            endpoint=endpoint,
            test_cases=test_cases,
            recommendation=recommendation,
            complexity=recommendation.complexity,
            execution_id=str(uuid.uuid4()),
        )

    def get_metrics(self) -> Dict[str, Any]:
        """Recommendation and generation counters."""
        metrics: Dict[str, Any] = self.recommender.get_metrics()
        with self._lock:
            metrics["tests_generated"] = self._tests_generated
            metrics["synthesis_failures"] = self._synthesis_failures
            metrics["suites_generated"] = self._suites_generated
        return metrics

    def clear_cache(self) -> None:
        self.recommender.clear_cache()
        self.logger.debug("Recommendation cache cleared")

    def _validate(
        self,
        endpoint: Optional[EndpointDescriptor],
        recommendation: Optional[StrategyRecommendation]
    ) -> None:
        if endpoint is None:
            raise InvalidInputError("Endpoint is required")
        if not endpoint.method or not endpoint.path:
            raise InvalidInputError(
                "Endpoint method and path are required",
                details={"method": endpoint.method, "path": endpoint.path},
                suggestion="Check the endpoint descriptor for a missing method or path",
            )
        if recommendation is None or recommendation.primary_strategy is None:
            raise InvalidInputError(
                "Recommendation has no primary strategy",
                suggestion="Use the recommendation returned by recommend()",
            )

    def _report(self, key: str, phase: str, message: str) -> None:
        self.progress.update(key, phase, PHASE_PERCENT[phase], message)

    @staticmethod
    def _endpoint_key(endpoint: Optional[EndpointDescriptor]) -> str:
        if endpoint is None:
            return "unknown"
        return endpoint.get_endpoint_id()
