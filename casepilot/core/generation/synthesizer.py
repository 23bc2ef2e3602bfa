"""Test case synthesis from (strategy, scenario) pairs."""

import itertools
import threading
from datetime import timedelta
from typing import List, Optional

from casepilot.core.analysis.operation_namer import OperationNamer, snake_case
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.recommendation import StrategyRecommendation
from casepilot.models.taxonomy import (
    StrategyType,
    TestScenario,
    scenario_profile,
    strategy_profile,
)
from casepilot.models.test_case import (
    AssertionType,
    GeneratedTestCase,
    StepType,
    TestAssertion,
    TestDataSet,
    TestStep,
)
from casepilot.utils.exceptions import TestGenerationError

DURATION_SECONDS_PER_WEIGHT = 2


class TestIdGenerator:
    """Thread-safe monotonic sequence for test ids."""

    __test__ = False

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_sequence(self) -> int:
        with self._lock:
            return next(self._counter)

    def generate(self, operation_id: str, strategy: StrategyType, scenario: TestScenario) -> str:
        """Compose ``test_{operation}_{strategy}_{scenario}_{seq}``."""
        return f"test_{operation_id}_{strategy.value}_{scenario.value}_{self.next_sequence():06d}"


class TestCaseSynthesizer:
    """Turns one (endpoint, strategy, scenario) triple into a test case."""

    __test__ = False

    def __init__(
        self,
        id_generator: Optional[TestIdGenerator] = None,
        namer: Optional[OperationNamer] = None
    ):
        self.id_generator = id_generator if id_generator is not None else TestIdGenerator()
        self.namer = namer if namer is not None else OperationNamer()

    def synthesize(
        self,
        endpoint: EndpointDescriptor,
        strategy: StrategyType,
        scenario: TestScenario,
        recommendation: StrategyRecommendation
    ) -> GeneratedTestCase:
        """Build a fully populated test case.

        Args:
            endpoint: Endpoint under test
            strategy: Originating strategy
            scenario: Scenario to exercise
            recommendation: Enclosing recommendation

        Returns:
            Generated test case

        Raises:
            TestGenerationError: If the test case cannot be assembled
        """
        try:
            return self._build(endpoint, strategy, scenario, recommendation)
        except TestGenerationError:
            raise
        except Exception as e:
            raise TestGenerationError(
                f"Failed to synthesize {strategy.value} / {scenario.value}: {e}",
                details={"strategy": strategy.value, "scenario": scenario.value},
            ) from e

    def _build(
        self,
        endpoint: EndpointDescriptor,
        strategy: StrategyType,
        scenario: TestScenario,
        recommendation: StrategyRecommendation
    ) -> GeneratedTestCase:
        operation_id = endpoint.operation_id or self.namer.derive(endpoint.method, endpoint.path)
        strategy_info = strategy_profile(strategy)
        scenario_info = scenario_profile(scenario)
        status = scenario_info.expected_status

        complexity = scenario_info.complexity
        if endpoint.has_parameters:
            complexity += 1
        if endpoint.has_request_body:
            complexity += 1

        return GeneratedTestCase(
            test_id=self.id_generator.generate(operation_id, strategy, scenario),
            name=f"test_{snake_case(operation_id)}_{scenario.value}",
            description=f"Test {operation_id} - {scenario_info.description}",
            scenario=scenario,
            strategy=strategy,
            endpoint=endpoint,
            operation_id=operation_id,
            steps=self._steps(endpoint),
            data=TestDataSet(
                values={
                    "scenario": scenario.value,
                    "expected_status": status,
                    "method": endpoint.method,
                    "path": endpoint.path,
                    "path_parameters": endpoint.get_path_parameter_names(),
                },
                metadata={
                    "strategy": strategy.value,
                    "category": strategy_info.category.value,
                    "execution_id": recommendation.execution_id,
                },
            ),
            assertions=[
                TestAssertion(
                    assertion_type=AssertionType.STATUS_CODE,
                    condition=f"equals {status}",
                    expected_value=status,
                    description=f"Response status should be {status}",
                )
            ],
            priority=scenario_info.complexity + strategy_info.complexity,
            complexity=complexity,
            estimated_duration=timedelta(
                seconds=DURATION_SECONDS_PER_WEIGHT * scenario_info.complexity
            ),
            tags={
                strategy_info.category.value.lower(),
                scenario_info.category.value.lower(),
                endpoint.method.lower(),
            },
        )

    @staticmethod
    def _steps(endpoint: EndpointDescriptor) -> List[TestStep]:
        return [
            TestStep(name=StepType.SETUP.value, description="Setup test environment", order=1),
            TestStep(
                name=StepType.EXECUTE.value,
                description=f"Execute {endpoint.method} {endpoint.path}",
                order=2,
            ),
            TestStep(
                name=StepType.VERIFY.value,
                description="Verify response and assertions",
                order=3,
            ),
        ]
