"""Endpoint descriptor data models."""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ERROR_STATUS_PREFIXES = ("4", "5")


class ParameterDescriptor(BaseModel):
    """API parameter definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: str = "query"  # "path", "query", "header", "cookie"
    required: bool = False
    description: Optional[str] = None
    param_schema: Optional[Dict[str, Any]] = Field(None, alias="schema")

    @property
    def schema_type(self) -> Optional[str]:
        """Declared JSON schema type, if any."""
        if not self.param_schema:
            return None
        return self.param_schema.get("type")


class RequestBodyDescriptor(BaseModel):
    """Request body definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    required: bool = False
    content_type: str = "application/json"
    description: Optional[str] = None
    body_schema: Optional[Dict[str, Any]] = Field(None, alias="schema")


class ResponseDescriptor(BaseModel):
    """Documented response for one status code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: str
    description: Optional[str] = None
    content_type: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = Field(None, alias="schema")

    @property
    def is_error(self) -> bool:
        """Whether the status code is a 4xx or 5xx."""
        return self.status_code.startswith(ERROR_STATUS_PREFIXES)


class EndpointHints(BaseModel):
    """Traits supplied by upstream analysis.

    ``None`` means the trait is inferred from the descriptor itself.
    """

    model_config = ConfigDict(frozen=True)

    requires_authorization: Optional[bool] = None
    role_based_access: Optional[bool] = None
    handles_personal_data: Optional[bool] = None
    rate_limited: Optional[bool] = None
    has_business_rules: Optional[bool] = None
    has_validation_rules: Optional[bool] = None
    multi_step_workflow: Optional[bool] = None
    has_recovery_logic: Optional[bool] = None
    has_retry_logic: Optional[bool] = None


class EndpointDescriptor(BaseModel):
    """A single HTTP operation of an API.

    ``has_parameters``, ``has_request_body`` and ``requires_authentication``
    are derived from the descriptor when they are not given explicitly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    method: str
    path: str
    operation_id: str = ""
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    parameters: List[ParameterDescriptor] = Field(default_factory=list)
    request_body: Optional[RequestBodyDescriptor] = None
    responses: Dict[str, ResponseDescriptor] = Field(default_factory=dict)
    security_schemes: List[str] = Field(default_factory=list)
    hints: EndpointHints = Field(default_factory=EndpointHints)

    has_parameters: bool = False
    has_request_body: bool = False
    requires_authentication: bool = False

    @model_validator(mode="before")
    @classmethod
    def derive_flags(cls, data: Any) -> Any:
        """Fill derived booleans and response status codes."""
        if not isinstance(data, dict):
            return data

        data = dict(data)

        responses = data.get("responses") or {}
        if isinstance(responses, dict):
            normalized = {}
            for code, response in responses.items():
                code = str(code)
                if isinstance(response, dict):
                    response = {"status_code": code, **response}
                normalized[code] = response
            data["responses"] = normalized

        if data.get("has_parameters") is None:
            data["has_parameters"] = bool(data.get("parameters"))
        if data.get("has_request_body") is None:
            data["has_request_body"] = data.get("request_body") is not None
        if data.get("requires_authentication") is None:
            data["requires_authentication"] = bool(data.get("security_schemes"))

        return data

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> str:
        """Uppercase the HTTP verb."""
        if v is None:
            return ""
        return str(v).strip().upper()

    @field_validator("path", "operation_id", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        """Treat missing values as empty strings."""
        return "" if v is None else str(v)

    def get_endpoint_id(self) -> str:
        """Generate endpoint identifier."""
        return f"{self.method}:{self.path}"

    def cache_key(self) -> str:
        """Key identifying this endpoint for recommendation caching."""
        normalized_path = re.sub(r"[^a-zA-Z0-9]", "_", self.path)
        return f"endpoint_{self.method}_{normalized_path}_{self.operation_id}"

    def get_error_responses(self) -> List[ResponseDescriptor]:
        """Responses documented with a 4xx/5xx status."""
        return [r for r in self.responses.values() if r.is_error]

    def get_path_parameter_names(self) -> List[str]:
        """Names of ``{param}`` segments in the path."""
        return re.findall(r"\{([^}]+)\}", self.path)
