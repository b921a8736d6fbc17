"""
Typed view of a GraphQL introspection result.

Decodes the standard ``__schema`` payload into frozen pydantic models so the
rendering code works on attributes rather than nested dictionaries.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import SchemaError


WRAPPER_KINDS = ("NON_NULL", "LIST")


class TypeRef(BaseModel):
    """A type reference, possibly wrapped in NON_NULL / LIST layers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = Field(default=None, alias="ofType")

    @classmethod
    def named(cls, name: str, kind: str = "SCALAR") -> "TypeRef":
        return cls(kind=kind, name=name)

    @classmethod
    def non_null(cls, inner: "TypeRef") -> "TypeRef":
        return cls(kind="NON_NULL", of_type=inner)

    @classmethod
    def list_of(cls, inner: "TypeRef") -> "TypeRef":
        return cls(kind="LIST", of_type=inner)

    @property
    def is_wrapper(self) -> bool:
        return self.kind in WRAPPER_KINDS

    def base_name(self) -> Optional[str]:
        """Name of the innermost named type."""
        ref = self
        while ref is not None and ref.is_wrapper:
            ref = ref.of_type
        return ref.name if ref is not None else None


class InputValue(BaseModel):
    """An argument or input-object field."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: TypeRef
    description: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")


class OperationField(BaseModel):
    """A field with arguments: a query, a mutation, or an object field."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: TypeRef
    args: Tuple[InputValue, ...] = ()
    description: Optional[str] = None


class EnumValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None


class TypeDefinition(BaseModel):
    """A named schema type (OBJECT, INPUT_OBJECT, ENUM, SCALAR, ...)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    name: str
    description: Optional[str] = None
    fields: Optional[Tuple[OperationField, ...]] = None
    input_fields: Optional[Tuple[InputValue, ...]] = Field(default=None, alias="inputFields")
    enum_values: Optional[Tuple[EnumValue, ...]] = Field(default=None, alias="enumValues")
    possible_types: Optional[Tuple[TypeRef, ...]] = Field(default=None, alias="possibleTypes")

    @property
    def is_introspection_type(self) -> bool:
        return self.name.startswith("__")


class SchemaDocument(BaseModel):
    """
    Root introspection payload.

    Holds every named type plus the field lists of the query and mutation
    roots, all in schema declaration order.
    """

    model_config = ConfigDict(frozen=True)

    types: Tuple[TypeDefinition, ...] = ()
    queries: Tuple[OperationField, ...] = ()
    mutations: Tuple[OperationField, ...] = ()

    @classmethod
    def from_introspection(cls, payload: Dict[str, Any]) -> "SchemaDocument":
        """
        Build a document from an introspection response.

        Args:
            payload: Either the full response (``{"data": {"__schema": ...}}``)
                or the bare ``__schema`` object

        Returns:
            SchemaDocument: Decoded schema

        Raises:
            SchemaError: If the payload does not have the introspection shape
        """
        if not isinstance(payload, dict):
            raise SchemaError("Introspection result must be a JSON object")

        schema_data = payload
        if "data" in payload:
            schema_data = (payload.get("data") or {}).get("__schema")
        elif "__schema" in payload:
            schema_data = payload.get("__schema")

        if not isinstance(schema_data, dict):
            raise SchemaError("Introspection result has no __schema data")

        try:
            types = [
                TypeDefinition.model_validate(t)
                for t in schema_data.get("types") or []
                if t.get("name")
            ]
        except (ValidationError, AttributeError) as e:
            raise SchemaError(f"Malformed type definition in introspection result: {e}") from e

        type_lookup = {t.name: t for t in types}

        def root_fields(root_key: str) -> Tuple[OperationField, ...]:
            root = schema_data.get(root_key) or {}
            root_name = root.get("name")
            if not root_name:
                return ()
            root_type = type_lookup.get(root_name)
            if root_type is None:
                raise SchemaError(f"Root type '{root_name}' is missing from the schema types")
            return root_type.fields or ()

        return cls(
            types=types,
            queries=root_fields("queryType"),
            mutations=root_fields("mutationType"),
        )


TypeRef.model_rebuild()
