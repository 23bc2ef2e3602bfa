"""Loader for endpoint descriptor files (YAML or JSON, not OpenAPI)."""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from urllib.parse import urlparse

import httpx
import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from pydantic import ValidationError

from casepilot.core.analysis.operation_namer import OperationNamer
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.utils.exceptions import DescriptorLoadError
from casepilot.utils.logging import get_logger


class DescriptorLoader:
    """Reads endpoint descriptors.

    The document is either a list of endpoint mappings or a mapping with an
    ``endpoints`` list. Embedded ``schema`` objects must be valid JSON Schema.
    """

    def __init__(
        self,
        namer: Optional[OperationNamer] = None,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize loader.

        Args:
            namer: Operation id deriver for entries without one
            timeout: HTTP timeout in seconds for URL sources
            transport: Optional httpx transport
        """
        self.namer = namer if namer is not None else OperationNamer()
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("parsing.descriptors")

    async def load_source(self, source: str) -> List[EndpointDescriptor]:
        """Load descriptors from a URL or a file path.

        Raises:
            DescriptorLoadError: If the source cannot be fetched, read or validated
        """
        if self._is_url(source):
            content = await self._fetch_from_url(source)
            return self.load_string(content, source_name=source)
        return self.load_file(source)

    def load_file(self, file_path: Union[str, Path]) -> List[EndpointDescriptor]:
        """Load descriptors from a file.

        Raises:
            DescriptorLoadError: If the file is missing, unreadable or invalid
        """
        path = Path(file_path)
        if not path.exists():
            raise DescriptorLoadError(
                f"File not found: {file_path}",
                suggestion="Check that the descriptor file path is correct",
            )

        try:
            content = path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise DescriptorLoadError(f"Failed to decode file {file_path}: {e}") from e
        except OSError as e:
            raise DescriptorLoadError(f"Failed to read file {file_path}: {e}") from e

        return self.load_string(content, source_name=str(path))

    def load_string(self, content: str, source_name: str = "content") -> List[EndpointDescriptor]:
        """Load descriptors from YAML or JSON text.

        Raises:
            DescriptorLoadError: If the content cannot be parsed or validated
        """
        try:
            if content.strip().startswith(('{', '[')):
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DescriptorLoadError(f"Invalid JSON/YAML in {source_name}: {e}") from e

        return self.load_data(data, source_name)

    def load_data(self, data: Any, source_name: str = "data") -> List[EndpointDescriptor]:
        """Validate already-parsed descriptor data.

        Raises:
            DescriptorLoadError: If the structure or an entry is invalid
        """
        if isinstance(data, dict):
            data = data.get('endpoints')

        if not isinstance(data, list):
            raise DescriptorLoadError(
                f"Expected a list of endpoints in {source_name}",
                suggestion="Use a top-level list or an 'endpoints' list",
            )

        endpoints = [self._build(entry, index, source_name) for index, entry in enumerate(data)]
        self.logger.debug("Loaded endpoint descriptors", source=source_name, count=len(endpoints))
        return endpoints

    def _build(self, entry: Any, index: int, source_name: str) -> EndpointDescriptor:
        if not isinstance(entry, dict):
            raise DescriptorLoadError(
                f"Endpoint #{index} in {source_name} must be a mapping",
                details={"index": index},
            )

        try:
            endpoint = EndpointDescriptor.model_validate(entry)
        except ValidationError as e:
            raise DescriptorLoadError(
                f"Invalid endpoint #{index} in {source_name}",
                details={"index": index, "errors": self._format_errors(e)},
            ) from e

        for location, schema in self._schemas(endpoint):
            try:
                Draft7Validator.check_schema(schema)
            except SchemaError as e:
                raise DescriptorLoadError(
                    f"Invalid JSON schema for {location} of endpoint #{index} in {source_name}",
                    details={"index": index, "location": location, "error": e.message},
                ) from e

        if not endpoint.operation_id and endpoint.method and endpoint.path:
            endpoint = endpoint.model_copy(
                update={"operation_id": self.namer.derive(endpoint.method, endpoint.path)}
            )
        return endpoint

    @staticmethod
    def _schemas(endpoint: EndpointDescriptor) -> Iterator[Tuple[str, Dict[str, Any]]]:
        for param in endpoint.parameters:
            if param.param_schema is not None:
                yield f"parameter '{param.name}'", param.param_schema
        if endpoint.request_body and endpoint.request_body.body_schema is not None:
            yield "request body", endpoint.request_body.body_schema
        for code, response in endpoint.responses.items():
            if response.response_schema is not None:
                yield f"response {code}", response.response_schema

    @staticmethod
    def _format_errors(error: ValidationError) -> List[Dict[str, str]]:
        return [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in error.errors()
        ]

    @staticmethod
    def _is_url(source: str) -> bool:
        result = urlparse(source)
        return result.scheme in ("http", "https") and bool(result.netloc)

    async def _fetch_from_url(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise DescriptorLoadError(f"Failed to fetch endpoint descriptors from {url}: {e}") from e
