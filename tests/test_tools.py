"""Tests for the LangChain tool wrappers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from graphql_bridge.exceptions import EntityNotFound, GraphQLRequestError, InvalidInputError
from graphql_bridge.tools import (
    DescribeTool,
    InvokeGraphQLTool,
    ListMutationsTool,
    ListQueriesTool,
    SetHeadersTool,
    clean_graphql_text,
    select_operation,
)


@pytest.fixture
def source():
    source = MagicMock()
    source.list_queries = AsyncMock(return_value="Queries:\nping: String!\n")
    source.list_mutations = AsyncMock(return_value="Mutations:\n")
    source.describe = AsyncMock(return_value="# ping (Query)\nReturn Type: String!")
    source.execute_operation = AsyncMock(return_value='{\n  "ping": "pong"\n}')
    return source


class TestCleanGraphQLText:
    def test_code_block_with_language(self):
        assert clean_graphql_text("```graphql\n{ ping }\n```") == "{ ping }"

    def test_code_block_keeps_operation_keyword(self):
        assert clean_graphql_text("```\nquery { ping }\n```") == "query { ping }"

    def test_backticks(self):
        assert clean_graphql_text("`{ ping }`") == "{ ping }"

    def test_quotes(self):
        assert clean_graphql_text('"{ ping }"') == "{ ping }"

    def test_plain_text_untouched(self):
        assert clean_graphql_text("  { ping }  ") == "{ ping }"


class TestSelectOperation:
    def test_query(self):
        assert select_operation("{ ping }", None) == "{ ping }"

    def test_mutation_wins(self):
        assert select_operation("{ ping }", "mutation { reset }") == "mutation { reset }"

    def test_blank_mutation_falls_back_to_query(self):
        assert select_operation("{ ping }", "  ") == "{ ping }"

    def test_nothing_given(self):
        with pytest.raises(InvalidInputError, match="No valid query or mutation provided"):
            select_operation("", None)


@pytest.mark.asyncio
async def test_list_queries_tool(source):
    tool = ListQueriesTool(graphql_source=source)
    assert await tool.ainvoke({}) == "Queries:\nping: String!\n"


@pytest.mark.asyncio
async def test_list_mutations_tool_failure_hints_at_authorization(source):
    source.list_mutations.side_effect = GraphQLRequestError("Failed to fetch schema: 401", status=401)
    tool = ListMutationsTool(graphql_source=source)
    result = await tool.ainvoke({})
    assert result == (
        "Failed to list mutations: Failed to fetch schema: 401. "
        "Do you need to send an Authorization header?"
    )


@pytest.mark.asyncio
async def test_describe_tool(source):
    tool = DescribeTool(graphql_source=source)
    assert await tool.ainvoke({"entities": "ping"}) == "# ping (Query)\nReturn Type: String!"
    source.describe.assert_awaited_once_with("ping")


@pytest.mark.asyncio
async def test_describe_tool_reports_examples(source):
    source.describe.side_effect = EntityNotFound("Nope", ["ping", "jobs"])
    tool = DescribeTool(graphql_source=source)
    result = await tool.ainvoke({"entities": "Nope"})
    assert result.startswith("Failed to describe entities: entity 'Nope' not found in schema.")
    assert "ping, jobs" in result


@pytest.mark.asyncio
async def test_invoke_tool_prefers_mutation(source):
    tool = InvokeGraphQLTool(graphql_source=source)
    await tool.ainvoke({"query": "{ ping }", "mutation": "`mutation { reset }`", "variables": '{"a": 1}'})
    source.execute_operation.assert_awaited_once_with("mutation { reset }", '{"a": 1}')


@pytest.mark.asyncio
async def test_invoke_tool_without_operation(source):
    tool = InvokeGraphQLTool(graphql_source=source)
    assert await tool.ainvoke({}) == "No valid query or mutation provided"
    source.execute_operation.assert_not_awaited()


@pytest.mark.asyncio
async def test_invoke_tool_failure(source):
    source.execute_operation.side_effect = GraphQLRequestError("graphql: Unauthorized")
    tool = InvokeGraphQLTool(graphql_source=source)
    result = await tool.ainvoke({"query": "{ ping }"})
    assert result.startswith("Failed to invoke GraphQL operation. Operation: { ping }")
    assert "graphql: Unauthorized" in result


def test_set_headers_tool(source):
    tool = SetHeadersTool(graphql_source=source)
    assert tool.invoke({"headers": '{"Authorization": "Bearer abc"}'}) == "Headers updated successfully"
    source.set_headers.assert_called_once_with('{"Authorization": "Bearer abc"}')


def test_set_headers_tool_failure(source):
    source.set_headers.side_effect = InvalidInputError("failed to parse headers JSON")
    tool = SetHeadersTool(graphql_source=source)
    assert tool.invoke({"headers": "nope"}) == "Failed to set headers: failed to parse headers JSON"


def test_sync_run(source):
    tool = ListQueriesTool(graphql_source=source)
    assert tool.invoke({}) == "Queries:\nping: String!\n"
