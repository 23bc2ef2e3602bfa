"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path
from typing import Any, Dict

import pytest

from casepilot.models.config import CasePilotConfig
from casepilot.models.endpoint import EndpointDescriptor


@pytest.fixture
def temp_config_dir():
    """Create a temporary configuration directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config() -> CasePilotConfig:
    """Create a sample configuration for testing."""
    return CasePilotConfig()


@pytest.fixture
def health_endpoint() -> EndpointDescriptor:
    """Parameterless GET endpoint without schemas (total complexity 2)."""
    return EndpointDescriptor(
        method="GET",
        path="/health",
        operation_id="getHealth",
        responses={"200": {"description": "OK"}},
    )


@pytest.fixture
def get_item_endpoint() -> EndpointDescriptor:
    """GET endpoint with one constrained path parameter (total complexity 20)."""
    return EndpointDescriptor(
        method="GET",
        path="/items/{item_id}",
        operation_id="getItem",
        parameters=[
            {
                "name": "item_id",
                "location": "path",
                "required": True,
                "schema": {"type": "integer", "minimum": 1},
            }
        ],
        responses={
            "200": {
                "description": "Item",
                "schema": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "name": {"type": "string"},
                    },
                },
            },
            "404": {"description": "Not found"},
        },
    )


@pytest.fixture
def create_user_data() -> Dict[str, Any]:
    """Raw descriptor for an authenticated POST /users (total complexity 64)."""
    return {
        "method": "POST",
        "path": "/users",
        "operation_id": "createUser",
        "summary": "Create user",
        "tags": ["users"],
        "security_schemes": ["bearerAuth"],
        "parameters": [
            {
                "name": "X-Request-Id",
                "location": "header",
                "required": False,
                "schema": {"type": "string"},
            }
        ],
        "request_body": {
            "required": True,
            "schema": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "email": {"type": "string", "format": "email"},
                },
                "required": ["name", "email"],
            },
        },
        "responses": {
            "201": {
                "description": "Created",
                "schema": {"type": "object", "properties": {"id": {"type": "integer"}}},
            },
            "400": {"description": "Invalid input"},
            "401": {"description": "Unauthorized"},
        },
    }


@pytest.fixture
def create_user_endpoint(create_user_data) -> EndpointDescriptor:
    """Authenticated POST /users endpoint with parameters and a request body."""
    return EndpointDescriptor.model_validate(create_user_data)
