"""Strategy to scenario expansion."""

from types import MappingProxyType
from typing import List, Mapping, Tuple

from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.taxonomy import StrategyType, TestScenario

S = TestScenario

# (always, added when the endpoint has parameters)
SCENARIO_TABLE: Mapping[StrategyType, Tuple[Tuple[TestScenario, ...], Tuple[TestScenario, ...]]] = (
    MappingProxyType({
        StrategyType.FUNCTIONAL_BASIC: ((S.HAPPY_PATH,), (S.ERROR_HANDLING,)),
        StrategyType.FUNCTIONAL_BOUNDARY: ((S.BOUNDARY_MIN, S.BOUNDARY_MAX), ()),
        StrategyType.FUNCTIONAL_EDGE_CASE: ((S.NULL_VALUE_HANDLING,), ()),
        StrategyType.FUNCTIONAL_COMPREHENSIVE: ((S.HAPPY_PATH, S.ERROR_HANDLING), ()),
        StrategyType.SECURITY_BASIC: ((S.AUTHENTICATION_BYPASS,), (S.INPUT_VALIDATION_BASIC,)),
        StrategyType.SECURITY_INJECTION: ((S.SQL_INJECTION_BASIC,), ()),
        StrategyType.SECURITY_XSS: ((S.XSS_REFLECTED,), ()),
        StrategyType.SECURITY_AUTHENTICATION: ((S.AUTHENTICATION_BYPASS,), ()),
        StrategyType.SECURITY_AUTHORIZATION: ((S.PRIVILEGE_ESCALATION,), ()),
        StrategyType.SECURITY_OWASP_TOP10: ((S.SQL_INJECTION_BASIC, S.XSS_REFLECTED), ()),
        StrategyType.SECURITY_PENETRATION: ((S.PRIVILEGE_ESCALATION, S.DATA_EXPOSURE_TEST), ()),
        StrategyType.PERFORMANCE_BASIC: ((S.LOAD_TESTING_LIGHT,), ()),
        StrategyType.PERFORMANCE_LOAD: ((S.LOAD_TESTING_LIGHT,), ()),
        StrategyType.PERFORMANCE_STRESS: ((S.STRESS_TESTING_CPU,), ()),
        StrategyType.ADVANCED_CONCURRENCY: ((S.CONCURRENCY_RACE_CONDITIONS,), ()),
        StrategyType.ADVANCED_FUZZING: ((S.FUZZING_INPUT, S.MUTATION_TESTING), ()),
        StrategyType.ADVANCED_AI_DRIVEN: ((S.AI_DRIVEN_EXPLORATION,), ()),
    })
)

DEFAULT_SCENARIOS: Tuple[TestScenario, ...] = (S.HAPPY_PATH,)


class ScenarioExpander:
    """Maps a strategy to concrete test scenarios."""

    def __init__(self, table: Mapping[StrategyType, Tuple[Tuple[TestScenario, ...], Tuple[TestScenario, ...]]] = SCENARIO_TABLE):
        self.table = table

    def expand(self, strategy: StrategyType, endpoint: EndpointDescriptor) -> List[TestScenario]:
        """Ordered, non-empty scenario list for a strategy.

        Args:
            strategy: Strategy to expand
            endpoint: Endpoint whose shape may add conditional scenarios

        Returns:
            Scenarios; ``[HAPPY_PATH]`` for unmapped strategies
        """
        if strategy not in self.table:
            return list(DEFAULT_SCENARIOS)

        always, with_parameters = self.table[strategy]
        scenarios = list(always)
        if endpoint.has_parameters:
            scenarios.extend(with_parameters)

        return scenarios or list(DEFAULT_SCENARIOS)
