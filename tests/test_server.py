"""Tests for the MCP server wiring."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from graphql_bridge.exceptions import EntityNotFound
from graphql_bridge.server import create_server, main


def _text(result):
    # FastMCP.call_tool returns either content blocks or (content blocks, structured output)
    if isinstance(result, tuple):
        result = result[0]
    return result[0].text


@pytest.fixture
def source():
    source = MagicMock()
    source.list_queries = AsyncMock(return_value="Queries:\nping: String!\n")
    source.list_mutations = AsyncMock(return_value="Mutations:\n")
    source.describe = AsyncMock(return_value="# ping (Query)\nReturn Type: String!")
    source.execute_operation = AsyncMock(return_value='{\n  "ping": "pong"\n}')
    return source


@pytest.mark.asyncio
async def test_registers_all_tools(source):
    mcp = create_server(source)
    tools = await mcp.list_tools()
    assert sorted(tool.name for tool in tools) == [
        "describe",
        "invoke_graphql",
        "list_mutations",
        "list_queries",
        "set_headers",
    ]
    describe = next(tool for tool in tools if tool.name == "describe")
    assert describe.inputSchema["required"] == ["entities"]


@pytest.mark.asyncio
async def test_list_queries(source):
    mcp = create_server(source)
    result = await mcp.call_tool("list_queries", {})
    assert _text(result) == "Queries:\nping: String!\n"


@pytest.mark.asyncio
async def test_describe_miss_is_a_tool_error(source):
    source.describe.side_effect = EntityNotFound("Nope", ["ping"])
    mcp = create_server(source)
    with pytest.raises(ToolError, match="entity 'Nope' not found in schema"):
        await mcp.call_tool("describe", {"entities": "Nope"})


@pytest.mark.asyncio
async def test_invoke_graphql(source):
    mcp = create_server(source)
    result = await mcp.call_tool("invoke_graphql", {"query": "{ ping }", "variables": "{}"})
    assert '"ping": "pong"' in _text(result)
    source.execute_operation.assert_awaited_once_with("{ ping }", "{}")


@pytest.mark.asyncio
async def test_invoke_graphql_without_operation(source):
    mcp = create_server(source)
    with pytest.raises(ToolError, match="No valid query or mutation provided"):
        await mcp.call_tool("invoke_graphql", {})


@pytest.mark.asyncio
async def test_set_headers(source):
    mcp = create_server(source)
    result = await mcp.call_tool("set_headers", {"headers": '{"Authorization": "Bearer abc"}'})
    assert _text(result) == "Headers updated successfully"
    source.set_headers.assert_called_once_with('{"Authorization": "Bearer abc"}')


def test_main_exits_without_address(monkeypatch):
    monkeypatch.delenv("ADDRESS", raising=False)
    with patch("graphql_bridge.config.load_dotenv"):
        assert main() == 1


def test_main_serves_stdio(monkeypatch):
    monkeypatch.setenv("ADDRESS", "https://api.example.com/graphql")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    with patch("graphql_bridge.config.load_dotenv"), \
            patch("graphql_bridge.server.FastMCP.run") as run:
        assert main() == 0
    run.assert_called_once_with(transport="stdio")
