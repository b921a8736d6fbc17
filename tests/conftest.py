"""Shared fixtures: a small recruiting-style introspection result."""

import pytest

from graphql_bridge.graphql import build_index
from graphql_bridge.schema import SchemaDocument


def _named(name, kind="SCALAR"):
    return {"kind": kind, "name": name, "ofType": None}


def _non_null(inner):
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def _list(inner):
    return {"kind": "LIST", "name": None, "ofType": inner}


def _arg(name, type_ref):
    return {"name": name, "description": None, "type": type_ref, "defaultValue": None}


def _field(name, type_ref, args=()):
    return {
        "name": name,
        "description": None,
        "args": list(args),
        "type": type_ref,
        "isDeprecated": False,
        "deprecationReason": None,
    }


def _object(name, fields, kind="OBJECT"):
    return {
        "kind": kind,
        "name": name,
        "description": None,
        "fields": fields,
        "inputFields": None,
        "interfaces": [],
        "enumValues": None,
        "possibleTypes": None,
    }


QUERY_FIELDS = [
    _field("healthcheck", _non_null(_named("String")), [_arg("input", _non_null(_named("String")))]),
    _field("candidate", _named("Candidate", "OBJECT"), [_arg("id", _non_null(_named("String")))]),
    _field("jobs", _named("JobsPage", "OBJECT"), [
        _arg("page", _named("Int")),
        _arg("size", _named("Int")),
        _arg("search", _named("String")),
        _arg("params", _named("JobQueryParams", "INPUT_OBJECT")),
    ]),
    _field("ping", _non_null(_named("String"))),
]

MUTATION_FIELDS = [
    _field("createCandidate", _non_null(_named("Candidate", "OBJECT")), [
        _arg("input", _non_null(_named("CandidateInput", "INPUT_OBJECT"))),
    ]),
]

TYPES = [
    _object("Query", QUERY_FIELDS),
    _object("Mutation", MUTATION_FIELDS),
    _object("Candidate", [
        _field("id", _non_null(_named("String"))),
        _field("name", _named("String")),
        _field("skills", _non_null(_list(_non_null(_named("String"))))),
    ]),
    _object("JobsPage", [
        _field("jobs", _non_null(_list(_non_null(_named("Job", "OBJECT"))))),
        _field("total", _named("Int")),
    ]),
    _object("Job", [
        _field("id", _non_null(_named("String"))),
        _field("status", _named("JobStatus", "ENUM")),
    ]),
    {
        "kind": "INPUT_OBJECT",
        "name": "JobQueryParams",
        "description": None,
        "fields": None,
        "inputFields": [
            _arg("excludedTalentId", _named("String")),
            _arg("status", _named("JobStatus", "ENUM")),
        ],
        "interfaces": None,
        "enumValues": None,
        "possibleTypes": None,
    },
    {
        "kind": "INPUT_OBJECT",
        "name": "CandidateInput",
        "description": None,
        "fields": None,
        "inputFields": [_arg("name", _non_null(_named("String")))],
        "interfaces": None,
        "enumValues": None,
        "possibleTypes": None,
    },
    {
        "kind": "ENUM",
        "name": "JobStatus",
        "description": None,
        "fields": None,
        "inputFields": None,
        "interfaces": None,
        "enumValues": [
            {"name": "OPEN", "description": None, "isDeprecated": False, "deprecationReason": None},
            {"name": "CLOSED", "description": None, "isDeprecated": False, "deprecationReason": None},
        ],
        "possibleTypes": None,
    },
    _object("Node", [_field("id", _non_null(_named("ID")))], kind="INTERFACE"),
    {
        "kind": "UNION",
        "name": "SearchResult",
        "description": None,
        "fields": None,
        "inputFields": None,
        "interfaces": None,
        "enumValues": None,
        "possibleTypes": [_named("Candidate", "OBJECT"), _named("Job", "OBJECT")],
    },
    _named("String"),
    _named("Int"),
    _object("__Schema", []),
]


@pytest.fixture
def introspection_result():
    """Full response body as returned by the endpoint."""
    return {
        "data": {
            "__schema": {
                "queryType": {"name": "Query"},
                "mutationType": {"name": "Mutation"},
                "subscriptionType": None,
                "types": TYPES,
                "directives": [],
            }
        }
    }


@pytest.fixture
def schema_document(introspection_result):
    return SchemaDocument.from_introspection(introspection_result)


@pytest.fixture
def entity_index(schema_document):
    return build_index(schema_document)
