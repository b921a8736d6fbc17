"""Errors raised by the GraphQL bridge."""

from typing import Any, Dict, List, Optional, Sequence


class GraphQLBridgeError(Exception):
    """Base class for all bridge errors."""


class SchemaError(GraphQLBridgeError):
    """The introspection result or one of its type references is malformed."""


class EntityNotFound(GraphQLBridgeError):
    """A requested entity has no entry in the schema index."""

    def __init__(self, name: str, examples: Sequence[str] = ()):
        self.name = name
        self.examples: List[str] = list(examples)
        super().__init__(
            f"entity '{name}' not found in schema. "
            f"Example entities in the schema: {', '.join(self.examples)}"
        )


class GraphQLRequestError(GraphQLBridgeError):
    """The GraphQL endpoint could not be reached or answered with errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(message)
        self.status = status
        self.errors = errors or []


class InvalidInputError(GraphQLBridgeError):
    """A tool argument could not be parsed."""


class ConfigurationError(GraphQLBridgeError):
    """The environment configuration is missing or invalid."""
