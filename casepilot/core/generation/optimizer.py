"""Test case de-duplication and ordering."""

from typing import Dict, Iterable, List, Tuple

from casepilot.models.taxonomy import StrategyType, TestScenario
from casepilot.models.test_case import GeneratedTestCase

DedupKey = Tuple[str, StrategyType, TestScenario]


class TestCaseOptimizer:
    """Collapses duplicate test cases and orders the rest by priority."""

    __test__ = False

    def optimize(self, test_cases: Iterable[GeneratedTestCase]) -> List[GeneratedTestCase]:
        """De-duplicate and sort test cases.

        Cases sharing (operation id, strategy, scenario) collapse to the one
        with the higher complexity; ties keep the first seen. The result is
        ordered by descending priority, then descending complexity, keeping
        input order among equals.

        Args:
            test_cases: Synthesized test cases

        Returns:
            Reduced, ordered list
        """
        kept: Dict[DedupKey, GeneratedTestCase] = {}
        for case in test_cases:
            key = case.dedup_key()
            current = kept.get(key)
            if current is None or case.complexity > current.complexity:
                kept[key] = case

        return sorted(kept.values(), key=lambda c: (-c.priority, -c.complexity))
