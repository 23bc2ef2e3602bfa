"""Tests for complexity scoring."""

import pytest
from pydantic import ValidationError

from casepilot.core.analysis.complexity_scorer import (
    ComplexityScorer, nesting_levels, schema_type, walk_fields
)
from casepilot.models.complexity import ComplexityLevel, ComplexityScore
from casepilot.models.endpoint import EndpointDescriptor


class TestComplexityLevel:
    """Test level boundaries."""

    @pytest.mark.parametrize("total,level", [
        (0, ComplexityLevel.TRIVIAL),
        (10, ComplexityLevel.TRIVIAL),
        (11, ComplexityLevel.LOW),
        (30, ComplexityLevel.LOW),
        (31, ComplexityLevel.MEDIUM),
        (60, ComplexityLevel.MEDIUM),
        (61, ComplexityLevel.HIGH),
        (85, ComplexityLevel.HIGH),
        (86, ComplexityLevel.VERY_HIGH),
        (100, ComplexityLevel.VERY_HIGH),
        (101, ComplexityLevel.CRITICAL),
        (10_000, ComplexityLevel.CRITICAL),
    ])
    def test_from_score_boundaries(self, total, level):
        """Test inclusive level boundaries."""
        assert ComplexityLevel.from_score(total) == level

    def test_every_total_maps_to_one_level(self):
        """Test that level ranges are exhaustive and disjoint."""
        for total in range(0, 150):
            matching = [
                level for level in ComplexityLevel
                if total >= level.score_range[0]
                and (level.score_range[1] is None or total <= level.score_range[1])
            ]
            assert len(matching) == 1
            assert matching[0] == ComplexityLevel.from_score(total)

    def test_rank_order(self):
        """Test that ranks follow declaration order."""
        assert ComplexityLevel.TRIVIAL.rank == 0
        assert ComplexityLevel.CRITICAL.rank == 5
        assert ComplexityLevel.LOW.rank < ComplexityLevel.HIGH.rank


class TestComplexityScore:
    """Test complexity score model."""

    def test_total_and_level_filled(self):
        """Test total and level derived from sub-scores."""
        score = ComplexityScore(parameter=5, response=10)

        assert score.total == 15
        assert score.level == ComplexityLevel.LOW

    def test_recalculate(self):
        """Test recalculating a drifted total."""
        score = ComplexityScore(parameter=5, total=99)
        assert score.level == ComplexityLevel.VERY_HIGH

        fixed = score.recalculate()

        assert fixed.total == 5
        assert fixed.level == ComplexityLevel.TRIVIAL
        assert score.total == 99

    def test_drifted_total_lowers_confidence(self):
        """Test consistency penalizes a stored total that disagrees with the sub-scores."""
        score = ComplexityScore(parameter=5, total=99, reasons={"parameter": "5 parameters"})

        assert score.consistency() == 0.0
        assert score.diagnostic_confidence() == pytest.approx(0.0833, abs=1e-4)

        fixed = score.recalculate()

        assert fixed.consistency() == 1.0
        assert fixed.confidence == pytest.approx(0.5833, abs=1e-4)

    def test_negative_sub_score_rejected(self):
        """Test that sub-scores are non-negative."""
        with pytest.raises(ValidationError):
            ComplexityScore(security=-1)

    def test_as_dict(self):
        """Test sub-scores keyed by dimension."""
        score = ComplexityScore(business_logic=2)
        assert score.as_dict() == {
            "parameter": 0,
            "response": 0,
            "security": 0,
            "business_logic": 2,
            "data_structure": 0,
            "error_handling": 0,
        }


class TestSchemaHelpers:
    """Test schema walking helpers."""

    def test_schema_type_inferred(self):
        """Test implied object and array types."""
        assert schema_type({"type": "string"}) == "string"
        assert schema_type({"properties": {}}) == "object"
        assert schema_type({"items": {"type": "string"}}) == "array"
        assert schema_type({}) is None
        assert schema_type(None) is None

    def test_nesting_levels(self):
        """Test composite depth below the root."""
        assert nesting_levels({"type": "object", "properties": {"a": {"type": "string"}}}) == 0
        assert nesting_levels({
            "type": "object",
            "properties": {"a": {"type": "object", "properties": {"b": {"type": "array"}}}},
        }) == 2

    def test_walk_fields_terminates_on_deep_schema(self):
        """Test that very deep schemas do not recurse without bound."""
        schema = {"type": "string"}
        for _ in range(100):
            schema = {"type": "object", "properties": {"child": schema}}

        fields = list(walk_fields(schema))

        assert 0 < len(fields) <= 32


class TestComplexityScorer:
    """Test six-dimension scoring."""

    def setup_method(self):
        """Set up test fixtures."""
        self.scorer = ComplexityScorer()

    def test_trivial_endpoint(self, health_endpoint):
        """Test parameterless GET endpoint."""
        score = self.scorer.score(health_endpoint)

        assert score.parameter == 0
        assert score.response == 0
        assert score.security == 0
        assert score.business_logic == 2
        assert score.data_structure == 0
        assert score.error_handling == 0
        assert score.total == 2
        assert score.level == ComplexityLevel.TRIVIAL
        assert set(score.reasons) == {"business_logic"}

    def test_get_item_endpoint(self, get_item_endpoint):
        """Test GET endpoint with a constrained path parameter."""
        score = self.scorer.score(get_item_endpoint)

        assert score.parameter == 3
        assert score.response == 5
        assert score.security == 0
        assert score.business_logic == 10
        assert score.error_handling == 2
        assert score.total == 20
        assert score.level == ComplexityLevel.LOW

    def test_create_user_endpoint(self, create_user_endpoint):
        """Test authenticated POST endpoint."""
        score = self.scorer.score(create_user_endpoint)

        assert score.parameter == 2
        assert score.response == 7
        assert score.security == 25
        assert score.business_logic == 26
        assert score.data_structure == 0
        assert score.error_handling == 4
        assert score.total == 64
        assert score.level == ComplexityLevel.HIGH
        assert score.confidence == pytest.approx(0.9167, abs=1e-4)

    def test_deterministic(self, create_user_endpoint):
        """Test identical descriptors score identically."""
        first = self.scorer.score(create_user_endpoint)
        second = self.scorer.score(EndpointDescriptor.model_validate(create_user_endpoint.model_dump()))

        assert first == second

    def test_parameter_count_capped(self):
        """Test per-parameter contribution cap."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/search",
            parameters=[{"name": f"p{i}", "schema": {"type": "string"}} for i in range(15)],
        )

        assert self.scorer.score(endpoint).parameter == 20

    def test_nested_object_parameter(self):
        """Test complex, required and nested parameter weights."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/search",
            parameters=[{
                "name": "filter",
                "required": True,
                "schema": {"type": "object", "properties": {"range": {"type": "object"}}},
            }],
        )

        assert self.scorer.score(endpoint).parameter == 2 + 3 + 1 + 5

    def test_complex_response(self):
        """Test array-of-objects response."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/orders",
            responses={"200": {"schema": {"type": "array", "items": {"type": "object"}}}},
        )

        assert self.scorer.score(endpoint).response == 3 + 4

    def test_distinct_response_types(self):
        """Test that response types are counted once each."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/orders",
            responses={
                "200": {"schema": {"type": "object"}},
                "206": {"schema": {"type": "object"}},
                "300": {"schema": {"type": "string"}},
            },
        )

        assert self.scorer.score(endpoint).response == 2 * 3

    def test_security_traits_inferred(self):
        """Test authorization, role and rate limit inference."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/admin/settings",
            responses={"403": {}, "429": {}},
        )

        assert self.scorer.score(endpoint).security == 10 + 15 + 5

    def test_hints_override_inference(self):
        """Test that explicit hints win over inference."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/users",
            hints={"handles_personal_data": False, "rate_limited": True},
        )

        assert self.scorer.score(endpoint).security == 5

    def test_business_rule_hints(self):
        """Test business rules and workflow hints."""
        endpoint = EndpointDescriptor(
            method="DELETE",
            path="/orders/{order_id}",
            hints={"has_business_rules": True, "multi_step_workflow": True},
        )

        assert self.scorer.score(endpoint).business_logic == 15 + 10 + 15 + 20

    def test_data_structure(self):
        """Test request body structure weights."""
        endpoint = EndpointDescriptor(
            method="POST",
            path="/orders",
            request_body={"schema": {
                "type": "object",
                "properties": {
                    "address": {
                        "type": "object",
                        "properties": {
                            "geo": {"type": "object", "properties": {"lat": {"type": "number"}}},
                        },
                    },
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "status": {"type": "string", "enum": ["new", "paid"]},
                },
            }},
        )

        # 2 levels, 1 array, 2 objects, 1 enum
        assert self.scorer.score(endpoint).data_structure == 3 * 2 + 2 * 1 + 2 * 2 + 1

    def test_error_handling(self):
        """Test custom error schemas and recovery hints."""
        endpoint = EndpointDescriptor(
            method="GET",
            path="/reports",
            responses={"500": {"schema": {"type": "object"}}},
            hints={"has_recovery_logic": True, "has_retry_logic": True},
        )

        assert self.scorer.score(endpoint).error_handling == 2 + 3 + 10 + 8

    def test_empty_descriptor_never_raises(self):
        """Test scoring an endpoint with missing data."""
        score = self.scorer.score(EndpointDescriptor(method="", path=""))

        assert score.total == 0
        assert score.level == ComplexityLevel.TRIVIAL
