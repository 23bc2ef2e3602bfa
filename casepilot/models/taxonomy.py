"""Strategy and scenario taxonomy.

Tags are plain string enums. Their static attributes live in the immutable
lookup tables ``STRATEGY_PROFILES`` and ``SCENARIO_PROFILES`` so consuming code
reads attributes through ``strategy_profile()`` / ``scenario_profile()``
instead of branching on members.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class StrategyCategory(str, Enum):
    """Strategy categories."""

    FUNCTIONAL = "functional"
    SECURITY = "security"
    PERFORMANCE = "performance"
    ADVANCED = "advanced"
    SPECIALIZED = "specialized"


class ResourceLevel(str, Enum):
    """System resources a strategy needs."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StrategyType(str, Enum):
    """Named test strategies."""

    FUNCTIONAL_BASIC = "functional_basic"
    FUNCTIONAL_BOUNDARY = "functional_boundary"
    FUNCTIONAL_COMPREHENSIVE = "functional_comprehensive"
    FUNCTIONAL_EDGE_CASE = "functional_edge_case"

    PERFORMANCE_BASIC = "performance_basic"
    PERFORMANCE_LOAD = "performance_load"
    PERFORMANCE_STRESS = "performance_stress"

    SECURITY_BASIC = "security_basic"
    SECURITY_INJECTION = "security_injection"
    SECURITY_XSS = "security_xss"
    SECURITY_AUTHENTICATION = "security_authentication"
    SECURITY_AUTHORIZATION = "security_authorization"
    SECURITY_OWASP_TOP10 = "security_owasp_top10"
    SECURITY_PENETRATION = "security_penetration"

    ADVANCED_CONCURRENCY = "advanced_concurrency"
    ADVANCED_FUZZING = "advanced_fuzzing"
    ADVANCED_AI_DRIVEN = "advanced_ai_driven"


class ScenarioCategory(str, Enum):
    """Scenario categories."""

    FUNCTIONAL = "functional"
    SECURITY = "security"
    PERFORMANCE = "performance"
    CONCURRENCY = "concurrency"
    ADVANCED = "advanced"


class TestScenario(str, Enum):
    """Concrete test situations derived from a strategy."""

    __test__ = False

    HAPPY_PATH = "happy_path"
    ERROR_HANDLING = "error_handling"
    INPUT_VALIDATION_BASIC = "input_validation_basic"
    EDGE_CASES = "edge_cases"

    BOUNDARY_MIN = "boundary_min"
    BOUNDARY_MAX = "boundary_max"
    BOUNDARY_VALUES = "boundary_values"
    NULL_VALUE_HANDLING = "null_value_handling"
    REGEX_PATTERN_TESTING = "regex_pattern_testing"
    NESTED_OBJECT_TESTING = "nested_object_testing"
    ARRAY_BOUNDARY_TESTING = "array_boundary_testing"

    SQL_INJECTION_BASIC = "sql_injection_basic"
    XSS_REFLECTED = "xss_reflected"
    XSS_STORED = "xss_stored"
    XML_EXTERNAL_ENTITY = "xml_external_entity"
    DESERIALIZATION_ATTACK = "deserialization_attack"
    FILE_UPLOAD_MALICIOUS = "file_upload_malicious"
    BUFFER_OVERFLOW_TEST = "buffer_overflow_test"
    DATA_EXPOSURE_TEST = "data_exposure_test"
    PRIVILEGE_ESCALATION = "privilege_escalation"
    CSRF_PROTECTION = "csrf_protection"
    AUTHENTICATION_BYPASS = "authentication_bypass"

    LOAD_TESTING_LIGHT = "load_testing_light"
    LOAD_TESTING_HEAVY = "load_testing_heavy"
    STRESS_TESTING_CPU = "stress_testing_cpu"

    CONCURRENCY_RACE_CONDITIONS = "concurrency_race_conditions"

    FUZZING_INPUT = "fuzzing_input"
    MUTATION_TESTING = "mutation_testing"
    AI_DRIVEN_EXPLORATION = "ai_driven_exploration"


@dataclass(frozen=True)
class StrategyProfile:
    """Static attributes of a strategy."""

    description: str
    category: StrategyCategory
    complexity: int
    resource_level: ResourceLevel
    estimated_minutes: int


@dataclass(frozen=True)
class ScenarioProfile:
    """Static attributes of a scenario."""

    description: str
    recommended_strategy: StrategyType
    complexity: int
    category: ScenarioCategory
    expected_status: int = 200
    estimated_seconds: int = 30


_F = StrategyCategory.FUNCTIONAL
_S = StrategyCategory.SECURITY
_P = StrategyCategory.PERFORMANCE
_A = StrategyCategory.ADVANCED

STRATEGY_PROFILES: Mapping[StrategyType, StrategyProfile] = MappingProxyType({
    StrategyType.FUNCTIONAL_BASIC: StrategyProfile(
        "Basic functional testing", _F, 1, ResourceLevel.LOW, 5),
    StrategyType.FUNCTIONAL_BOUNDARY: StrategyProfile(
        "Boundary value testing", _F, 2, ResourceLevel.LOW, 15),
    StrategyType.FUNCTIONAL_COMPREHENSIVE: StrategyProfile(
        "Comprehensive functional testing", _F, 3, ResourceLevel.MEDIUM, 30),
    StrategyType.FUNCTIONAL_EDGE_CASE: StrategyProfile(
        "Functional edge case testing", _F, 3, ResourceLevel.LOW, 15),
    StrategyType.PERFORMANCE_BASIC: StrategyProfile(
        "Basic performance testing", _P, 1, ResourceLevel.MEDIUM, 15),
    StrategyType.PERFORMANCE_LOAD: StrategyProfile(
        "Load performance testing", _P, 3, ResourceLevel.HIGH, 45),
    StrategyType.PERFORMANCE_STRESS: StrategyProfile(
        "Stress performance testing", _P, 3, ResourceLevel.HIGH, 30),
    StrategyType.SECURITY_BASIC: StrategyProfile(
        "Basic security testing", _S, 1, ResourceLevel.LOW, 5),
    StrategyType.SECURITY_INJECTION: StrategyProfile(
        "Security injection testing", _S, 2, ResourceLevel.MEDIUM, 15),
    StrategyType.SECURITY_XSS: StrategyProfile(
        "Cross-site scripting testing", _S, 2, ResourceLevel.MEDIUM, 15),
    StrategyType.SECURITY_AUTHENTICATION: StrategyProfile(
        "Authentication testing", _S, 2, ResourceLevel.LOW, 15),
    StrategyType.SECURITY_AUTHORIZATION: StrategyProfile(
        "Authorization testing", _S, 2, ResourceLevel.LOW, 15),
    StrategyType.SECURITY_OWASP_TOP10: StrategyProfile(
        "OWASP Top 10 security testing", _S, 3, ResourceLevel.MEDIUM, 30),
    StrategyType.SECURITY_PENETRATION: StrategyProfile(
        "Penetration testing", _S, 4, ResourceLevel.HIGH, 45),
    StrategyType.ADVANCED_CONCURRENCY: StrategyProfile(
        "Advanced concurrency testing", _A, 3, ResourceLevel.HIGH, 60),
    StrategyType.ADVANCED_FUZZING: StrategyProfile(
        "Advanced fuzzing testing", _A, 4, ResourceLevel.HIGH, 60),
    StrategyType.ADVANCED_AI_DRIVEN: StrategyProfile(
        "AI-driven testing", _A, 4, ResourceLevel.HIGH, 60),
})

_SF = ScenarioCategory.FUNCTIONAL
_SS = ScenarioCategory.SECURITY
_SP = ScenarioCategory.PERFORMANCE
_SA = ScenarioCategory.ADVANCED
_ST = StrategyType


def _scenario(description, strategy, complexity, category, status=200, seconds=30):
    return ScenarioProfile(description, strategy, complexity, category, status, seconds)


SCENARIO_PROFILES: Mapping[TestScenario, ScenarioProfile] = MappingProxyType({
    TestScenario.HAPPY_PATH: _scenario(
        "Valid request with expected response", _ST.FUNCTIONAL_BASIC, 1, _SF, 200, 5),
    TestScenario.ERROR_HANDLING: _scenario(
        "Error cases and edge conditions", _ST.FUNCTIONAL_BASIC, 2, _SF, seconds=15),
    TestScenario.INPUT_VALIDATION_BASIC: _scenario(
        "Basic input validation", _ST.FUNCTIONAL_BOUNDARY, 1, _SF, seconds=5),
    TestScenario.EDGE_CASES: _scenario(
        "Edge case testing", _ST.FUNCTIONAL_EDGE_CASE, 3, _SF),
    TestScenario.BOUNDARY_MIN: _scenario(
        "Minimum boundary testing", _ST.FUNCTIONAL_BOUNDARY, 2, _SF, 200, 15),
    TestScenario.BOUNDARY_MAX: _scenario(
        "Maximum boundary testing", _ST.FUNCTIONAL_BOUNDARY, 2, _SF, 200, 15),
    TestScenario.BOUNDARY_VALUES: _scenario(
        "Test boundary values", _ST.FUNCTIONAL_BOUNDARY, 2, _SF, seconds=15),
    TestScenario.NULL_VALUE_HANDLING: _scenario(
        "Null value handling", _ST.FUNCTIONAL_BOUNDARY, 2, _SF, 400, 15),
    TestScenario.REGEX_PATTERN_TESTING: _scenario(
        "Test regex patterns", _ST.FUNCTIONAL_BOUNDARY, 2, _SF, seconds=15),
    TestScenario.NESTED_OBJECT_TESTING: _scenario(
        "Nested object validation", _ST.FUNCTIONAL_BOUNDARY, 2, _SF),
    TestScenario.ARRAY_BOUNDARY_TESTING: _scenario(
        "Array boundary testing", _ST.FUNCTIONAL_BOUNDARY, 2, _SF),
    TestScenario.SQL_INJECTION_BASIC: _scenario(
        "Basic SQL injection tests", _ST.SECURITY_INJECTION, 2, _SS, 400),
    TestScenario.XSS_REFLECTED: _scenario(
        "Cross-site scripting tests", _ST.SECURITY_INJECTION, 2, _SS, 400),
    TestScenario.XSS_STORED: _scenario(
        "Stored XSS testing", _ST.SECURITY_INJECTION, 2, _SS),
    TestScenario.XML_EXTERNAL_ENTITY: _scenario(
        "XXE attack tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.DESERIALIZATION_ATTACK: _scenario(
        "Unsafe deserialization tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.FILE_UPLOAD_MALICIOUS: _scenario(
        "Malicious file upload tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.BUFFER_OVERFLOW_TEST: _scenario(
        "Buffer overflow tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.DATA_EXPOSURE_TEST: _scenario(
        "Data exposure tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.PRIVILEGE_ESCALATION: _scenario(
        "Privilege escalation tests", _ST.SECURITY_INJECTION, 3, _SS, seconds=60),
    TestScenario.CSRF_PROTECTION: _scenario(
        "CSRF protection tests", _ST.SECURITY_INJECTION, 2, _SS),
    TestScenario.AUTHENTICATION_BYPASS: _scenario(
        "Authentication bypass testing", _ST.SECURITY_INJECTION, 3, _SS, 401, 60),
    TestScenario.LOAD_TESTING_LIGHT: _scenario(
        "Light load testing", _ST.PERFORMANCE_BASIC, 1, _SP),
    TestScenario.LOAD_TESTING_HEAVY: _scenario(
        "Heavy load testing", _ST.PERFORMANCE_BASIC, 3, _SP, seconds=60),
    TestScenario.STRESS_TESTING_CPU: _scenario(
        "CPU stress testing", _ST.PERFORMANCE_STRESS, 3, _SP, seconds=120),
    TestScenario.CONCURRENCY_RACE_CONDITIONS: _scenario(
        "Concurrency and race condition tests", _ST.ADVANCED_CONCURRENCY, 3,
        ScenarioCategory.CONCURRENCY, seconds=120),
    TestScenario.FUZZING_INPUT: _scenario(
        "Input fuzzing testing", _ST.ADVANCED_FUZZING, 4, _SA),
    TestScenario.MUTATION_TESTING: _scenario(
        "Mutation testing", _ST.ADVANCED_FUZZING, 4, _SA),
    TestScenario.AI_DRIVEN_EXPLORATION: _scenario(
        "AI-driven exploration testing", _ST.ADVANCED_AI_DRIVEN, 4, _SA),
})

DEFAULT_STRATEGY_PROFILE = StrategyProfile(
    "Unclassified strategy", StrategyCategory.SPECIALIZED, 1, ResourceLevel.LOW, 10
)
DEFAULT_SCENARIO_PROFILE = ScenarioProfile(
    "Unclassified scenario", StrategyType.FUNCTIONAL_BASIC, 1, ScenarioCategory.FUNCTIONAL, 200
)


def strategy_profile(strategy: StrategyType) -> StrategyProfile:
    """Look up the static attributes of a strategy."""
    return STRATEGY_PROFILES.get(strategy, DEFAULT_STRATEGY_PROFILE)


def scenario_profile(scenario: TestScenario) -> ScenarioProfile:
    """Look up the static attributes of a scenario."""
    return SCENARIO_PROFILES.get(scenario, DEFAULT_SCENARIO_PROFILE)
