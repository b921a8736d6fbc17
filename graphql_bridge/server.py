"""
GraphQL MCP Server

Exposes list_queries, list_mutations, describe, invoke_graphql and
set_headers over MCP standard I/O.

Environment:
- ADDRESS: GraphQL endpoint URL (required)
- GRAPHQL_HEADERS: JSON object of default headers
- GRAPHQL_SCHEMA_CACHE_TTL: seconds to cache introspection, 0 re-fetches per call
- GRAPHQL_TIMEOUT: HTTP timeout in seconds
- LOG_LEVEL: logging level, records go to stderr
"""

import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .base import GraphQLSource, create_graphql_source
from .config import load_settings
from .exceptions import ConfigurationError, GraphQLBridgeError
from .tools import (
    AUTH_HINT,
    DESCRIBE_DESCRIPTION,
    HEADERS_UPDATED,
    INVOKE_DESCRIPTION,
    LIST_MUTATIONS_DESCRIPTION,
    LIST_QUERIES_DESCRIPTION,
    SET_HEADERS_DESCRIPTION,
    select_operation,
)


SERVER_NAME = "graphqlServer"

logger = logging.getLogger(__name__)


def create_server(source: GraphQLSource) -> FastMCP:
    """Build an MCP server whose tools operate on ``source``."""
    mcp = FastMCP(SERVER_NAME)

    async def list_queries() -> str:
        try:
            return await source.list_queries()
        except GraphQLBridgeError as e:
            logger.warning("list_queries failed: %s", e)
            raise ToolError(f"Failed to list queries: {e}{AUTH_HINT}") from e

    async def list_mutations() -> str:
        try:
            return await source.list_mutations()
        except GraphQLBridgeError as e:
            logger.warning("list_mutations failed: %s", e)
            raise ToolError(f"Failed to list mutations: {e}{AUTH_HINT}") from e

    async def describe(entities: str) -> str:
        try:
            return await source.describe(entities)
        except GraphQLBridgeError as e:
            logger.warning("describe failed: %s", e)
            raise ToolError(f"Failed to describe entities: {e}{AUTH_HINT}") from e

    async def invoke_graphql(
        query: Optional[str] = None,
        mutation: Optional[str] = None,
        variables: Optional[str] = None
    ) -> str:
        try:
            operation = select_operation(query, mutation)
        except GraphQLBridgeError as e:
            raise ToolError(str(e)) from e
        try:
            return await source.execute_operation(operation, variables)
        except GraphQLBridgeError as e:
            logger.warning("invoke_graphql failed: %s", e)
            raise ToolError(
                f"Failed to invoke GraphQL operation. Operation: {operation} "
                f"variables: {variables} error: {e}. "
            ) from e

    def set_headers(headers: str) -> str:
        try:
            source.set_headers(headers)
        except GraphQLBridgeError as e:
            raise ToolError(f"Failed to set headers: {e}") from e
        return HEADERS_UPDATED

    mcp.add_tool(list_queries, name="list_queries", description=LIST_QUERIES_DESCRIPTION)
    mcp.add_tool(list_mutations, name="list_mutations", description=LIST_MUTATIONS_DESCRIPTION)
    mcp.add_tool(describe, name="describe", description=DESCRIBE_DESCRIPTION)
    mcp.add_tool(invoke_graphql, name="invoke_graphql", description=INVOKE_DESCRIPTION)
    mcp.add_tool(set_headers, name="set_headers", description=SET_HEADERS_DESCRIPTION)
    return mcp


def main() -> int:
    """Load settings and serve the MCP server over standard I/O."""
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1

    logging.getLogger().setLevel(settings.log_level)
    logger.info("Serving GraphQL endpoint %s over stdio", settings.endpoint)

    mcp = create_server(create_graphql_source(settings))
    mcp.run(transport="stdio")
    return 0


if __name__ == "__main__":
    sys.exit(main())
