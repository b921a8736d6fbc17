"""
GraphQL Schema Processing Module

Turns an introspection result into readable operation signatures and a
lookup table of per-entity description blocks for the describe tool.
"""

import asyncio
import logging
from typing import Dict, Iterator, List, Optional, Sequence

import aiohttp
from graphql import get_introspection_query

from .exceptions import EntityNotFound, GraphQLRequestError, SchemaError
from .schema import InputValue, OperationField, SchemaDocument, TypeDefinition, TypeRef


logger = logging.getLogger(__name__)

NAMESPACES = ("query", "mutation", "type")
MAX_EXAMPLES = 3


async def fetch_graphql_schema(
    endpoint: str,
    headers: Optional[Dict[str, str]] = None,
    include_descriptions: bool = True,
    timeout: float = 30.0
) -> Dict:
    """
    Fetch schema information from GraphQL endpoint

    Args:
        endpoint: GraphQL endpoint URL
        headers: HTTP headers sent with the introspection request
        include_descriptions: Whether to ask the server for descriptions
        timeout: Total request timeout in seconds

    Returns:
        Dict: Complete introspection response

    Raises:
        GraphQLRequestError: If the endpoint fails or returns no schema
    """
    # Use the standard introspection query from graphql-core
    introspection_query = get_introspection_query(descriptions=include_descriptions)
    logger.debug("Fetching schema from %s", endpoint)

    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.post(
                endpoint,
                json={"query": introspection_query},
                headers={**(headers or {}), "Content-Type": "application/json"}
            ) as response:
                if response.status != 200:
                    raise GraphQLRequestError(
                        f"Failed to fetch schema: {response.status}",
                        status=response.status
                    )
                data = await response.json(content_type=None)
    except aiohttp.ClientError as e:
        raise GraphQLRequestError(f"Failed to fetch schema: {e}") from e
    except asyncio.TimeoutError as e:
        raise GraphQLRequestError(f"Failed to fetch schema: timed out after {timeout}s") from e
    except ValueError as e:
        raise GraphQLRequestError(f"Failed to fetch schema: invalid JSON response ({e})") from e

    if not isinstance(data, dict) or not (data.get("data") or {}).get("__schema"):
        errors = data.get("errors") if isinstance(data, dict) else None
        messages = [error.get("message", str(error)) for error in errors or []]
        raise GraphQLRequestError(
            "Failed to fetch schema: " + ("; ".join(messages) or "response has no __schema"),
            errors=errors
        )

    return data


def format_type(type_ref: TypeRef) -> str:
    """
    Convert a type reference to its SDL display string, e.g. ``[String!]!``

    Raises:
        SchemaError: If a wrapper has no inner type or a named type has no name
    """
    if type_ref.kind == "NON_NULL":
        return f"{format_type(_inner(type_ref))}!"
    if type_ref.kind == "LIST":
        return f"[{format_type(_inner(type_ref))}]"
    if not type_ref.name:
        raise SchemaError(f"Type reference of kind {type_ref.kind} has no name")
    return type_ref.name


def _inner(type_ref: TypeRef) -> TypeRef:
    if type_ref.of_type is None:
        raise SchemaError(f"{type_ref.kind} type reference has no inner type")
    return type_ref.of_type


def format_argument(arg: InputValue) -> str:
    return f"{arg.name}: {format_type(arg.type)}"


def format_field(field: OperationField) -> str:
    """
    Render a field as a one-line signature.

    ``healthcheck: String!`` without arguments,
    ``jobs(page: Int, size: Int): JobsPage`` with them.
    """
    return_type = format_type(field.type)
    if not field.args:
        return f"{field.name}: {return_type}"
    args_str = ", ".join(format_argument(arg) for arg in field.args)
    return f"{field.name}({args_str}): {return_type}"


def list_queries(schema: SchemaDocument) -> List[str]:
    return [format_field(field) for field in schema.queries]


def list_mutations(schema: SchemaDocument) -> List[str]:
    return [format_field(field) for field in schema.mutations]


def render_listing(title: str, signatures: Sequence[str]) -> str:
    """Header line followed by one newline-terminated signature per entry."""
    return f"{title}:\n" + "".join(f"{signature}\n" for signature in signatures)


def render_operation(field: OperationField, label: str) -> str:
    """
    Render a query or mutation description block

    Args:
        field: Root operation field
        label: ``Query`` or ``Mutation``
    """
    lines = [f"# {field.name} ({label})"]
    if field.args:
        lines.append("Arguments:")
        lines.extend(f"\t{format_argument(arg)}" for arg in field.args)
    lines.append(f"Return Type: {format_type(field.type)}")
    return "\n".join(lines)


def render_type(type_def: TypeDefinition) -> str:
    """
    Render a named type description block

    OBJECT and INTERFACE list their fields, INPUT_OBJECT its input fields,
    ENUM its values and UNION its members. Every other kind (SCALAR
    included) is a header-only stub.
    """
    lines = [f"# {type_def.name} ({type_def.kind})"]

    if type_def.kind in ("OBJECT", "INTERFACE"):
        lines.append("Fields:")
        for field in type_def.fields or []:
            lines.append(f"\t{field.name}: {format_type(field.type)}")

    elif type_def.kind == "INPUT_OBJECT":
        lines.append("Input Fields:")
        for field in type_def.input_fields or []:
            lines.append(f"\t{format_argument(field)}")

    elif type_def.kind == "ENUM":
        lines.append("Values:")
        for enum_val in type_def.enum_values or []:
            lines.append(f"\t{enum_val.name}")

    elif type_def.kind == "UNION":
        lines.append("Possible Types:")
        for member in type_def.possible_types or []:
            lines.append(f"\t{format_type(member)}")

    return "\n".join(lines)


class EntityIndex:
    """
    Entity name to description block lookup table.

    Bare names follow first-write-wins in the order queries, mutations,
    types, so an operation shadows a type of the same name. Every entry is
    also reachable as ``query.<name>``, ``mutation.<name>`` or ``type.<name>``.
    Iteration yields bare names in insertion order.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._namespaced: Dict[str, Dict[str, str]] = {ns: {} for ns in NAMESPACES}

    def add(self, namespace: str, name: str, description: str) -> None:
        self._namespaced[namespace][name] = description
        if name in self._entries:
            logger.debug("Entity name '%s' already indexed, %s.%s only reachable by namespace", name, namespace, name)
            return
        self._entries[name] = description

    def get(self, key: str) -> Optional[str]:
        if key in self._entries:
            return self._entries[key]
        namespace, sep, name = key.partition(".")
        if sep and namespace in self._namespaced:
            return self._namespaced[namespace].get(name)
        return None

    def examples(self, limit: int = MAX_EXAMPLES) -> List[str]:
        return list(self._entries)[:limit]

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def build_index(schema: SchemaDocument) -> EntityIndex:
    """
    Index every query, mutation and named type of the schema

    Introspection meta types (``__Schema``, ``__Type``, ...) are skipped.
    """
    index = EntityIndex()
    for field in schema.queries:
        index.add("query", field.name, render_operation(field, "Query"))
    for field in schema.mutations:
        index.add("mutation", field.name, render_operation(field, "Mutation"))
    for type_def in schema.types:
        if type_def.is_introspection_type:
            continue
        index.add("type", type_def.name, render_type(type_def))
    return index


def describe_entities(index: EntityIndex, requested: str) -> str:
    """
    Look up a comma-separated list of entity names

    Args:
        index: Index built by ``build_index``
        requested: e.g. ``"jobs, JobsPage,type.Job"``; tokens are stripped

    Returns:
        str: Found description blocks, in request order, separated by a blank line

    Raises:
        EntityNotFound: On the first name that is not indexed; nothing is returned
            for the names resolved before it
    """
    descriptions = []
    for entity in requested.split(","):
        entity = entity.strip()
        description = index.get(entity)
        if description is None:
            raise EntityNotFound(entity, index.examples())
        descriptions.append(description)
    return "\n\n".join(descriptions)
