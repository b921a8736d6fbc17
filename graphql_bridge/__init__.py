"""GraphQL bridge exposing schema discovery and execution as agent tools."""

from .base import GraphQLToolkit, GraphQLSource, create_graphql_source, create_graphql_toolkit
from .exceptions import (
    ConfigurationError,
    EntityNotFound,
    GraphQLBridgeError,
    GraphQLRequestError,
    InvalidInputError,
    SchemaError
)
from .graphql import (
    EntityIndex,
    build_index,
    describe_entities,
    format_field,
    format_type,
    list_mutations,
    list_queries,
    render_listing
)
from .schema import SchemaDocument, TypeRef
from .tools import (
    DescribeTool,
    InvokeGraphQLTool,
    ListMutationsTool,
    ListQueriesTool,
    SetHeadersTool
)

__all__ = [
    "GraphQLToolkit",
    "GraphQLSource",
    "create_graphql_source",
    "create_graphql_toolkit",
    "ConfigurationError",
    "EntityNotFound",
    "GraphQLBridgeError",
    "GraphQLRequestError",
    "InvalidInputError",
    "SchemaError",
    "EntityIndex",
    "build_index",
    "describe_entities",
    "format_field",
    "format_type",
    "list_mutations",
    "list_queries",
    "render_listing",
    "SchemaDocument",
    "TypeRef",
    "ListQueriesTool",
    "ListMutationsTool",
    "DescribeTool",
    "InvokeGraphQLTool",
    "SetHeadersTool"
]
