"""Base GraphQL Toolkit implementation."""

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

import aiohttp
from langchain_core.tools import BaseTool, BaseToolkit
from pydantic import ConfigDict

from .config import Settings
from .exceptions import GraphQLRequestError, InvalidInputError
from .graphql import (
    build_index,
    describe_entities,
    fetch_graphql_schema,
    list_mutations,
    list_queries,
    render_listing,
)
from .schema import SchemaDocument
from .tools import (
    DescribeTool,
    InvokeGraphQLTool,
    ListMutationsTool,
    ListQueriesTool,
    SetHeadersTool,
)


logger = logging.getLogger(__name__)


def canonical_header_name(name: str) -> str:
    """``x-api-key`` -> ``X-Api-Key``"""
    return "-".join(part.capitalize() for part in name.strip().split("-"))


def _canonical_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    return {canonical_header_name(k): v for k, v in (headers or {}).items()}


def _check_header_values(headers: Dict[str, Any]) -> Dict[str, str]:
    for name, value in headers.items():
        if not isinstance(value, str):
            raise InvalidInputError(f"header '{name}' must be a string, got {json.dumps(value)}")
    return headers


def _parse_json_object(value: Union[str, Dict[str, Any], None], what: str) -> Optional[Dict[str, Any]]:
    if value is None or isinstance(value, dict):
        return value
    if not value.strip():
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"failed to parse {what} JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise InvalidInputError(f"{what} must be a JSON object")
    return parsed


class GraphQLSource:
    """
    GraphQL endpoint connection wrapper.

    Owns the request headers used for every introspection and operation
    call. The schema is re-fetched on each call unless ``schema_cache_ttl``
    is positive.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        schema_cache_ttl: int = 0,
        timeout: float = 30.0
    ):
        """
        Initialize GraphQL source.

        Args:
            endpoint: GraphQL endpoint URL
            headers: Default HTTP headers, re-applied whenever headers are set
            schema_cache_ttl: Schema cache time-to-live in seconds (0 disables the cache)
            timeout: HTTP request timeout in seconds
        """
        self.endpoint = endpoint
        self.default_headers = _canonical_headers(headers)
        self.schema_cache_ttl = schema_cache_ttl
        self.timeout = timeout
        self._headers: Dict[str, str] = dict(self.default_headers)
        self._schema_cache: Optional[Dict] = None
        self._schema_cache_key: Optional[Tuple] = None
        self._schema_timestamp = 0.0

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def set_headers(self, headers: Union[str, Dict[str, str]]) -> Dict[str, str]:
        """
        Merge new headers into the stored ones.

        Default headers are applied first, then overwritten by ``headers``.
        Previously set headers that are not overwritten are kept.

        Args:
            headers: JSON-encoded object or dict of header names to values

        Returns:
            Dict[str, str]: The updated header snapshot
        """
        new_headers = _check_header_values(_parse_json_object(headers, "headers") or {})
        self._headers.update(self.default_headers)
        self._headers.update(_canonical_headers(new_headers))
        logger.info("Headers updated: %s", ", ".join(sorted(self._headers)))
        return self.headers

    async def get_schema(self) -> Dict[str, Any]:
        """Get the introspection result, cached when a TTL is configured."""
        cache_key = tuple(sorted(self._headers.items()))
        current_time = time.time()
        if (self.schema_cache_ttl > 0 and
                self._schema_cache is not None and
                self._schema_cache_key == cache_key and
                current_time - self._schema_timestamp <= self.schema_cache_ttl):
            return self._schema_cache

        introspection_result = await fetch_graphql_schema(
            self.endpoint,
            headers=self.headers,
            timeout=self.timeout
        )
        if self.schema_cache_ttl > 0:
            self._schema_cache = introspection_result
            self._schema_cache_key = cache_key
            self._schema_timestamp = current_time
        return introspection_result

    async def get_schema_document(self) -> SchemaDocument:
        return SchemaDocument.from_introspection(await self.get_schema())

    async def list_queries(self) -> str:
        schema = await self.get_schema_document()
        return render_listing("Queries", list_queries(schema))

    async def list_mutations(self) -> str:
        schema = await self.get_schema_document()
        return render_listing("Mutations", list_mutations(schema))

    async def describe(self, entities: str) -> str:
        schema = await self.get_schema_document()
        return describe_entities(build_index(schema), entities)

    async def execute_operation(
        self,
        operation: str,
        variables: Union[str, Dict[str, Any], None] = None
    ) -> str:
        """
        Execute a GraphQL query or mutation.

        Args:
            operation: Raw GraphQL operation text
            variables: JSON-encoded object or dict of operation variables

        Returns:
            str: The response ``data`` member as indented JSON

        Raises:
            InvalidInputError: If ``variables`` is not a JSON object
            GraphQLRequestError: On HTTP failure or GraphQL errors
        """
        payload: Dict[str, Any] = {"query": operation}
        parsed_variables = _parse_json_object(variables, "variables")
        if parsed_variables:
            payload["variables"] = parsed_variables

        logger.debug("Executing operation against %s", self.endpoint)
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(
                    self.endpoint,
                    json=payload,
                    headers={**self._headers, "Content-Type": "application/json"}
                ) as response:
                    status = response.status
                    try:
                        result = await response.json(content_type=None)
                    except ValueError as e:
                        raise GraphQLRequestError(
                            f"GraphQL operation failed: {status}", status=status
                        ) from e
        except aiohttp.ClientError as e:
            raise GraphQLRequestError(f"GraphQL operation failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise GraphQLRequestError(f"GraphQL operation failed: timed out after {self.timeout}s") from e

        if not isinstance(result, dict):
            raise GraphQLRequestError(f"GraphQL operation failed: {status}", status=status)

        errors = result.get("errors")
        if errors:
            error_messages = [error.get("message", str(error)) for error in errors]
            raise GraphQLRequestError(
                "graphql: " + "; ".join(error_messages), status=status, errors=errors
            )
        if status != 200:
            raise GraphQLRequestError(f"GraphQL operation failed: {status}", status=status)

        return json.dumps(result.get("data"), indent=2, ensure_ascii=False)

    def get_endpoint(self) -> str:
        """Get the GraphQL endpoint URL."""
        return self.endpoint


class GraphQLToolkit(BaseToolkit):
    """
    GraphQL Agent Toolkit.

    Provides the list, describe, invoke and header tools for LLM agents,
    similar to LangChain's SQLDatabaseToolkit.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    graphql_source: GraphQLSource

    def __init__(self, graphql_source: GraphQLSource, **kwargs):
        super().__init__(graphql_source=graphql_source, **kwargs)

    def get_tools(self) -> List[BaseTool]:
        """
        Get all available GraphQL tools.

        Returns:
            List of GraphQL tools
        """
        return [
            ListQueriesTool(graphql_source=self.graphql_source),
            ListMutationsTool(graphql_source=self.graphql_source),
            DescribeTool(graphql_source=self.graphql_source),
            InvokeGraphQLTool(graphql_source=self.graphql_source),
            SetHeadersTool(graphql_source=self.graphql_source)
        ]

    @property
    def dialect(self) -> str:
        """Get the dialect name."""
        return "graphql"


def create_graphql_source(settings: Settings) -> GraphQLSource:
    return GraphQLSource(
        endpoint=settings.endpoint,
        headers=settings.headers,
        schema_cache_ttl=settings.schema_cache_ttl,
        timeout=settings.timeout
    )


# Factory function for creating GraphQL toolkit
def create_graphql_toolkit(
    endpoint: str,
    headers: Optional[Dict[str, str]] = None,
    schema_cache_ttl: int = 0
) -> GraphQLToolkit:
    """
    Create a GraphQL toolkit instance.

    Args:
        endpoint: GraphQL endpoint URL
        headers: Optional HTTP headers for authentication
        schema_cache_ttl: Schema cache time-to-live in seconds

    Returns:
        GraphQL toolkit instance
    """
    graphql_source = GraphQLSource(endpoint=endpoint, headers=headers, schema_cache_ttl=schema_cache_ttl)
    return GraphQLToolkit(graphql_source=graphql_source)
