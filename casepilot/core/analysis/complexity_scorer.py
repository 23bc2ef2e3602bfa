"""
Multi-dimensional endpoint complexity scorer.

Scores an endpoint along six dimensions (parameters, responses, security,
business logic, request data structure, error handling). Missing data scores
zero; the scorer never raises for a well-typed descriptor.
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from casepilot.models.complexity import ComplexityLevel, ComplexityScore
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.utils.logging import get_logger
from .constants import (
    BUSINESS_LOGIC_WEIGHTS,
    COMPLEXITY_WEIGHTS,
    COMPOSITE_SCHEMA_TYPES,
    DATA_MODIFYING_METHODS,
    ERROR_HANDLING_WEIGHTS,
    METHOD_WEIGHTS,
    PARAMETER_WEIGHTS,
    PERSONAL_DATA_KEYWORDS,
    PRIVILEGED_SEGMENTS,
    RESPONSE_WEIGHTS,
    SECURITY_WEIGHTS,
    VALIDATION_CONSTRAINT_KEYS,
)

# Recursion guard for self-referencing schemas
MAX_SCHEMA_DEPTH = 32


def schema_type(schema: Any) -> Optional[str]:
    """Declared or implied JSON schema type."""
    if not isinstance(schema, dict):
        return None
    declared = schema.get('type')
    if isinstance(declared, str):
        return declared
    if isinstance(schema.get('properties'), dict):
        return 'object'
    if 'items' in schema:
        return 'array'
    return None


def _properties(schema: Any) -> Dict[str, Any]:
    if not isinstance(schema, dict):
        return {}
    props = schema.get('properties')
    return props if isinstance(props, dict) else {}


def _children(schema: Any) -> List[Any]:
    """Direct sub-schemas: object properties and array items."""
    children = list(_properties(schema).values())
    if isinstance(schema, dict) and isinstance(schema.get('items'), dict):
        children.append(schema['items'])
    return children


def nests_composite(schema: Any) -> bool:
    """Whether an object/array schema directly contains an object or array."""
    return any(schema_type(child) in COMPOSITE_SCHEMA_TYPES for child in _children(schema))


def walk_fields(schema: Any, depth: int = 0) -> Iterator[Tuple[Dict[str, Any], int]]:
    """Yield every nested field schema with its nesting depth (root excluded)."""
    if depth >= MAX_SCHEMA_DEPTH:
        return
    for child in _children(schema):
        if isinstance(child, dict):
            yield child, depth + 1
            yield from walk_fields(child, depth + 1)


def nesting_levels(schema: Any, depth: int = 0) -> int:
    """Number of composite levels below the root schema."""
    if depth >= MAX_SCHEMA_DEPTH:
        return 0
    deepest = 0
    for child in _children(schema):
        if schema_type(child) in COMPOSITE_SCHEMA_TYPES:
            deepest = max(deepest, 1 + nesting_levels(child, depth + 1))
    return deepest


def has_constraints(schema: Any) -> bool:
    """Whether the schema or any nested field declares a validation constraint."""
    if not isinstance(schema, dict):
        return False
    if any(key in schema for key in VALIDATION_CONSTRAINT_KEYS):
        return True
    return any(
        any(key in field for key in VALIDATION_CONSTRAINT_KEYS)
        for field, _ in walk_fields(schema)
    )


class ComplexityScorer:
    """Six-dimension complexity scorer."""

    def __init__(self):
        self.logger = get_logger("analysis.complexity")
        self.path_separator = re.compile(r'[/_-]')

    def score(self, endpoint: EndpointDescriptor) -> ComplexityScore:
        """Score an endpoint.

        Args:
            endpoint: Endpoint descriptor

        Returns:
            Complexity score with per-dimension reasons
        """
        results = {
            'parameter': self._score_parameters(endpoint),
            'response': self._score_responses(endpoint),
            'security': self._score_security(endpoint),
            'business_logic': self._score_business_logic(endpoint),
            'data_structure': self._score_data_structure(endpoint),
            'error_handling': self._score_error_handling(endpoint),
        }

        sub_scores = {name: value for name, (value, _) in results.items()}
        reasons = {name: reason for name, (value, reason) in results.items() if value > 0}
        total = sum(sub_scores.values())

        score = ComplexityScore(
            **sub_scores,
            total=total,
            level=ComplexityLevel.from_score(total),
            reasons=reasons,
        )
        score = score.model_copy(update={"confidence": score.diagnostic_confidence()})

        self.logger.debug(
            "Scored endpoint complexity",
            endpoint=endpoint.get_endpoint_id(),
            total=score.total,
            level=score.level.value,
        )
        return score

    # Dimensions

    def _score_parameters(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        params = endpoint.parameters
        complex_count = sum(1 for p in params if p.schema_type in COMPOSITE_SCHEMA_TYPES)
        required_count = sum(1 for p in params if p.required)
        nested_count = sum(
            1 for p in params
            if schema_type(p.param_schema) == 'object' and nests_composite(p.param_schema)
        )

        w = PARAMETER_WEIGHTS
        value = (
            min(w['per_parameter'] * len(params), w['parameter_cap'])
            + w['complex_parameter'] * complex_count
            + w['required_parameter'] * required_count
            + w['nested_object'] * nested_count
        )
        reason = (
            f"{len(params)} parameters ({complex_count} complex, "
            f"{required_count} required, {nested_count} nested objects)"
        )
        return value, reason

    def _score_responses(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        schemas = [r.response_schema for r in endpoint.responses.values() if r.response_schema]
        distinct_types = {schema_type(s) for s in schemas} - {None}
        complex_count = sum(
            1 for s in schemas
            if schema_type(s) in COMPOSITE_SCHEMA_TYPES and nests_composite(s)
        )
        error_count = len(endpoint.get_error_responses())

        w = RESPONSE_WEIGHTS
        value = (
            w['distinct_type'] * len(distinct_types)
            + w['complex_response'] * complex_count
            + w['error_response'] * error_count
        )
        reason = (
            f"{len(distinct_types)} response types, {complex_count} complex, "
            f"{error_count} error responses"
        )
        return value, reason

    def _score_security(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        traits = {
            'authentication': endpoint.requires_authentication,
            'authorization': self.requires_authorization(endpoint),
            'role_based_access': self.role_based_access(endpoint),
            'personal_data': self.handles_personal_data(endpoint),
            'rate_limited': self.rate_limited(endpoint),
        }
        present = [name for name, flag in traits.items() if flag]
        value = sum(SECURITY_WEIGHTS[name] for name in present)
        return value, "security traits: " + ", ".join(present)

    def _score_business_logic(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        hints = endpoint.hints
        traits = {
            'data_modifying': endpoint.method in DATA_MODIFYING_METHODS,
            'business_rules': bool(hints.has_business_rules),
            'validation_rules': self.has_validation_rules(endpoint),
            'multi_step_workflow': bool(hints.multi_step_workflow),
        }
        present = [name for name, flag in traits.items() if flag]
        method_weight = METHOD_WEIGHTS.get(endpoint.method, 0)
        value = method_weight + sum(BUSINESS_LOGIC_WEIGHTS[name] for name in present)
        reason = f"method {endpoint.method or '?'} ({method_weight})"
        if present:
            reason += "; " + ", ".join(present)
        return value, reason

    def _score_data_structure(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        schema = endpoint.request_body.body_schema if endpoint.request_body else None
        if not isinstance(schema, dict):
            return 0, "no request body schema"

        levels = nesting_levels(schema)
        array_fields = object_fields = enum_fields = 0
        for field, _ in walk_fields(schema):
            field_type = schema_type(field)
            if field_type == 'array':
                array_fields += 1
            elif field_type == 'object':
                object_fields += 1
            if 'enum' in field:
                enum_fields += 1

        w = COMPLEXITY_WEIGHTS
        value = (
            w['nested_depth'] * levels
            + w['array_fields'] * array_fields
            + w['object_fields'] * object_fields
            + w['enum_fields'] * enum_fields
        )
        reason = (
            f"{levels} nesting levels, {array_fields} arrays, "
            f"{object_fields} objects, {enum_fields} enums"
        )
        return value, reason

    def _score_error_handling(self, endpoint: EndpointDescriptor) -> Tuple[int, str]:
        errors = endpoint.get_error_responses()
        custom_count = sum(1 for r in errors if r.response_schema)
        hints = endpoint.hints

        w = ERROR_HANDLING_WEIGHTS
        value = w['error_status'] * len(errors) + w['custom_error'] * custom_count
        if hints.has_recovery_logic:
            value += w['recovery_logic']
        if hints.has_retry_logic:
            value += w['retry_logic']
        reason = f"{len(errors)} error statuses, {custom_count} with custom schemas"
        return value, reason

    # Trait inference

    def requires_authorization(self, endpoint: EndpointDescriptor) -> bool:
        hint = endpoint.hints.requires_authorization
        return hint if hint is not None else '403' in endpoint.responses

    def role_based_access(self, endpoint: EndpointDescriptor) -> bool:
        hint = endpoint.hints.role_based_access
        if hint is not None:
            return hint
        segments = self.path_separator.split(endpoint.path.lower())
        return any(segment in PRIVILEGED_SEGMENTS for segment in segments)

    def handles_personal_data(self, endpoint: EndpointDescriptor) -> bool:
        hint = endpoint.hints.handles_personal_data
        if hint is not None:
            return hint
        haystack = " ".join([endpoint.path] + list(endpoint.tags)).lower()
        return any(keyword in haystack for keyword in PERSONAL_DATA_KEYWORDS)

    def rate_limited(self, endpoint: EndpointDescriptor) -> bool:
        hint = endpoint.hints.rate_limited
        return hint if hint is not None else '429' in endpoint.responses

    def has_validation_rules(self, endpoint: EndpointDescriptor) -> bool:
        hint = endpoint.hints.has_validation_rules
        if hint is not None:
            return hint
        if any(has_constraints(p.param_schema) for p in endpoint.parameters):
            return True
        body = endpoint.request_body
        return body is not None and has_constraints(body.body_schema)
