"""
Scoring rule constants.

All complexity scoring weights live here so that the scorer reads as a list of
rules rather than a list of numbers.
"""

# Parameter dimension
PARAMETER_WEIGHTS = {
    'per_parameter': 2,
    'parameter_cap': 20,
    'complex_parameter': 3,
    'required_parameter': 1,
    'nested_object': 5,
}

# Response dimension
RESPONSE_WEIGHTS = {
    'distinct_type': 3,
    'complex_response': 4,
    'error_response': 2,
}

# Security dimension
SECURITY_WEIGHTS = {
    'authentication': 10,
    'authorization': 10,
    'role_based_access': 15,
    'personal_data': 15,
    'rate_limited': 5,
}

# Business logic dimension
METHOD_WEIGHTS = {
    'GET': 2,
    'POST': 8,
    'PUT': 10,
    'PATCH': 12,
    'DELETE': 15,
}

BUSINESS_LOGIC_WEIGHTS = {
    'data_modifying': 10,
    'business_rules': 15,
    'validation_rules': 8,
    'multi_step_workflow': 20,
}

DATA_MODIFYING_METHODS = {'POST', 'PUT', 'PATCH', 'DELETE'}

# Data structure dimension (request body schema)
COMPLEXITY_WEIGHTS = {
    'nested_depth': 3,
    'array_fields': 2,
    'object_fields': 2,
    'enum_fields': 1,
}

# Error handling dimension
ERROR_HANDLING_WEIGHTS = {
    'error_status': 2,
    'custom_error': 3,
    'recovery_logic': 10,
    'retry_logic': 8,
}

# Trait inference
PRIVILEGED_SEGMENTS = ['admin', 'internal', 'private']

PERSONAL_DATA_KEYWORDS = ['user', 'profile', 'account', 'customer', 'member', 'personal']

VALIDATION_CONSTRAINT_KEYS = [
    'minimum', 'maximum', 'minLength', 'maxLength', 'pattern',
    'enum', 'format', 'minItems', 'maxItems',
]

COMPOSITE_SCHEMA_TYPES = {'object', 'array'}

# Path segments skipped when naming operations
COMMON_PREFIXES = ['api', 'rest', 'v1', 'v2', 'v3', 'public', 'private', 'internal', 'external']
