"""GraphQL Tools for LLM agents."""

import asyncio
from typing import Any, Dict, Optional, Type, Union

from langchain_core.callbacks import AsyncCallbackManagerForToolRun, CallbackManagerForToolRun
from langchain_core.tools import BaseTool
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import GraphQLBridgeError, InvalidInputError


AUTH_HINT = ". Do you need to send an Authorization header?"

LIST_QUERIES_DESCRIPTION = """Retrieve a complete list of all available queries in your GraphQL schema.
This tool is useful for understanding the structure of your API and identifying available queries before implementation or debugging.

Best Practices:
- Use this tool as the first step to understand your GraphQL schema's query capabilities.
- Employ it to quickly identify available queries before implementing or debugging API calls.
- Helps in validating schema changes and documenting GraphQL APIs.

Arguments:
- None

Example Usage:
Request:
  list_queries()

Response:
  Queries:
  healthcheck(input: String!): String!
  candidate(id: String!): Candidate
  interviewScorecard(id: String!): InterviewScorecard
"""

LIST_MUTATIONS_DESCRIPTION = """Retrieve a complete list of all available mutations in your GraphQL schema.
This tool simplifies the process of locating and understanding mutation operations.

Best Practices:
- Start with this tool to get a high-level view of your schema's mutation capabilities.
- Use it for quick verification of available mutations after schema updates or during debugging.
- Helps in integration testing by listing all possible state-changing operations.

Arguments:
- None

Example Usage:
Request:
  list_mutations()

Response:
  Mutations:
  createCandidate(input: CandidateInput!): Candidate!
  updateInterviewScorecard(id: String!, input: ScorecardInput!): InterviewScorecard!
"""

DESCRIBE_DESCRIPTION = """Provide detailed insights into many operations or types,
including structure and functionality.

Best Practices:
- Use this tool to understand the structure and functionality of one or many operations or types.
- Prefix a name with query., mutation. or type. when an operation and a type share the same name.

Arguments:
- entities (string) - A comma-separated list of GraphQL operations or types to describe. (Required)

Example Usage:
Request:
  describe("query.jobs,type.JobQueryParams,JobsPage,JobStatus")

Response:
  # jobs (Query)
  Arguments:
  \tpage: Int
  \tsize: Int
  \tsearch: String
  \tparams: JobQueryParams
  Return Type: JobsPage

  # JobQueryParams (INPUT_OBJECT)
  Input Fields:
  \texcludedTalentId: String
  \tlocationType: LocationType
  \tstatus: JobStatus

  # JobsPage (OBJECT)
  Fields:
  \tjobs: [Job!]!
  \tpagination: Pagination

  # JobStatus (ENUM)
  Values:
  \tOPEN
  \tCLOSED
"""

INVOKE_DESCRIPTION = """Execute a GraphQL operation (query or mutation) against your API.

Best Practices:
- Use when you have identified the desired operation (query or mutation) and know what variables (if any) need to be supplied.
- Supply the raw GraphQL operation string as 'query' or 'mutation'. When both are given, the mutation is executed.
- Optionally provide 'variables' as a JSON-encoded string if the operation uses variables.

Arguments:
- query (string): The entire GraphQL query text.
- mutation (string): The entire GraphQL mutation text.
- variables (string, Optional): A JSON-encoded string representing variables for the operation.

Example Usage:
Request:
  invoke_graphql(
    mutation: "mutation CreateCandidate($input: CandidateInput!){ createCandidate(input: $input) { id name } }",
    variables: "{\\"input\\": {\\"name\\": \\"John Doe\\"}}"
  )

Response:
  {
    "createCandidate": {
      "id": "123",
      "name": "John Doe"
    }
  }
"""

SET_HEADERS_DESCRIPTION = """Set or overwrite HTTP headers to be used in GraphQL requests.

Best Practices:
- Use this tool to configure authentication headers or other necessary HTTP headers.
- Headers will persist between requests until explicitly changed.

Arguments:
- headers (string, Required): JSON-encoded string of headers to set.

Example Usage:
Request:
  set_headers("{\\"Authorization\\": \\"Bearer token123\\", \\"X-API-Key\\": \\"abc123\\"}")

Response:
  Headers updated successfully
"""

HEADERS_UPDATED = "Headers updated successfully"


def clean_graphql_text(text: str) -> str:
    """Strip code fences, backticks and wrapping quotes an LLM may add."""
    text = text.strip()

    # Remove code block markers (```...```)
    if text.startswith('```') and text.endswith('```') and len(text) >= 6:
        text = text[3:-3].strip()
        # Also remove language identifier if present (e.g., ```graphql)
        lines = text.split('\n')
        if len(lines) > 1 and lines[0].strip() and not lines[0].strip().startswith(('{', 'query', 'mutation')):
            text = '\n'.join(lines[1:]).strip()

    if len(text) >= 2:
        if text.startswith('`') and text.endswith('`'):
            text = text[1:-1].strip()
        elif (text.startswith('"') and text.endswith('"')) or (text.startswith("'") and text.endswith("'")):
            text = text[1:-1].strip()

    return text


def select_operation(query: Optional[str], mutation: Optional[str]) -> str:
    """
    Pick the operation to run; a non-empty mutation wins over the query.

    Raises:
        InvalidInputError: If neither is given
    """
    operation = clean_graphql_text(query or "")
    if mutation and mutation.strip():
        operation = clean_graphql_text(mutation)
    if not operation:
        raise InvalidInputError("No valid query or mutation provided")
    return operation


class _GraphQLSourceTool(BaseTool):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __init__(self, graphql_source):
        super().__init__()
        self._graphql_source = graphql_source

    @property
    def graphql_source(self):
        return self._graphql_source


class NoInput(BaseModel):
    """Input for tools that take no arguments."""
    pass


class ListQueriesTool(_GraphQLSourceTool):
    """Tool to list every query of the schema as a signature line."""

    name: str = "list_queries"
    description: str = LIST_QUERIES_DESCRIPTION
    args_schema: Type[BaseModel] = NoInput

    def _run(
        self,
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        """List queries synchronously."""
        return asyncio.run(self._arun())

    async def _arun(
        self,
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        try:
            return await self.graphql_source.list_queries()
        except GraphQLBridgeError as e:
            return f"Failed to list queries: {e}{AUTH_HINT}"


class ListMutationsTool(_GraphQLSourceTool):
    """Tool to list every mutation of the schema as a signature line."""

    name: str = "list_mutations"
    description: str = LIST_MUTATIONS_DESCRIPTION
    args_schema: Type[BaseModel] = NoInput

    def _run(
        self,
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        """List mutations synchronously."""
        return asyncio.run(self._arun())

    async def _arun(
        self,
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        try:
            return await self.graphql_source.list_mutations()
        except GraphQLBridgeError as e:
            return f"Failed to list mutations: {e}{AUTH_HINT}"


class DescribeInput(BaseModel):
    """Input for GraphQL describe tool."""
    entities: str = Field(description="Comma-separated list of operations or types to describe")


class DescribeTool(_GraphQLSourceTool):
    """
    Tool to describe queries, mutations and types by name.
    Unknown names fail the whole call and suggest valid ones.
    """

    name: str = "describe"
    description: str = DESCRIBE_DESCRIPTION
    args_schema: Type[BaseModel] = DescribeInput

    def _run(
        self,
        entities: str,
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        """Describe entities synchronously."""
        return asyncio.run(self._arun(entities))

    async def _arun(
        self,
        entities: str,
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        try:
            return await self.graphql_source.describe(entities)
        except GraphQLBridgeError as e:
            return f"Failed to describe entities: {e}{AUTH_HINT}"


class InvokeGraphQLInput(BaseModel):
    """Input for GraphQL invoke tool."""
    query: Optional[str] = Field(default=None, description="The entire GraphQL query")
    mutation: Optional[str] = Field(default=None, description="The entire GraphQL mutation")
    variables: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None,
        description="JSON-encoded variables for the operation"
    )


class InvokeGraphQLTool(_GraphQLSourceTool):
    """
    Tool to execute GraphQL queries and mutations.
    """

    name: str = "invoke_graphql"
    description: str = INVOKE_DESCRIPTION
    args_schema: Type[BaseModel] = InvokeGraphQLInput

    def _run(
        self,
        query: Optional[str] = None,
        mutation: Optional[str] = None,
        variables: Optional[Union[str, Dict[str, Any]]] = None,
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        """Execute GraphQL operation synchronously."""
        return asyncio.run(self._arun(query, mutation, variables))

    async def _arun(
        self,
        query: Optional[str] = None,
        mutation: Optional[str] = None,
        variables: Optional[Union[str, Dict[str, Any]]] = None,
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        try:
            operation = select_operation(query, mutation)
        except InvalidInputError as e:
            return str(e)

        try:
            return await self.graphql_source.execute_operation(operation, variables)
        except GraphQLBridgeError as e:
            return (
                f"Failed to invoke GraphQL operation. Operation: {operation} "
                f"variables: {variables} error: {e}. "
            )


class SetHeadersInput(BaseModel):
    """Input for GraphQL set headers tool."""
    headers: Union[str, Dict[str, str]] = Field(description="JSON-encoded string of headers to set")


class SetHeadersTool(_GraphQLSourceTool):
    """
    Tool to set HTTP headers (e.g. bearer tokens) for subsequent calls.
    """

    name: str = "set_headers"
    description: str = SET_HEADERS_DESCRIPTION
    args_schema: Type[BaseModel] = SetHeadersInput

    def _run(
        self,
        headers: Union[str, Dict[str, str]],
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        """Set headers; no I/O involved."""
        try:
            self.graphql_source.set_headers(headers)
        except GraphQLBridgeError as e:
            return f"Failed to set headers: {e}"
        return HEADERS_UPDATED

    async def _arun(
        self,
        headers: Union[str, Dict[str, str]],
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        return self._run(headers)
