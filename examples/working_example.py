#!/usr/bin/env python3
"""
Working GraphQL LangChain Agent Example

Drives the GraphQL bridge toolkit from a LangChain/LangGraph ReAct agent, or
calls the tools directly from the command line.

Usage:
    # Interactive mode (needs OPENAI_API_KEY)
    ADDRESS=https://example.com/graphql python examples/working_example.py

    # Call a single tool, no LLM involved
    ADDRESS=https://example.com/graphql python examples/working_example.py --cli describe "Query,jobs"
"""

import argparse
import asyncio
import os
import sys

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from langchain_openai import ChatOpenAI
from langgraph.prebuilt import create_react_agent
from graphql_bridge import GraphQLBridgeError, create_graphql_toolkit
from graphql_bridge.config import load_settings


SYSTEM_PROMPT = """You are a GraphQL assistant. You answer questions by querying a GraphQL API.

WORKFLOW:
1. Call list_queries (and list_mutations if the user wants to change data) to see the operations
2. Call describe with the operations and types you need, comma-separated, in ONE call
3. Build the operation from the described arguments and return types
4. Execute it with invoke_graphql, passing variables as a JSON string
5. If a tool reports a missing Authorization header, ask the user for a token and call set_headers

RULES:
- NEVER fabricate IDs, tokens or other user-specific data; ask for them
- Pass operations as plain text (no backticks/quotes)
- Answer from the execution result, not from the schema alone"""


class GraphQLAgent:
    """Simple GraphQL agent using LangGraph."""

    def __init__(self, endpoint: str, headers=None):
        """Initialize the agent."""
        self.endpoint = endpoint

        # Check for API key
        if not os.getenv("OPENAI_API_KEY"):
            raise ValueError("OPENAI_API_KEY environment variable is required")

        # Initialize LLM - read model from environment
        model_name = os.getenv("LLM_MODEL", "gpt-4o-mini")
        self.llm = ChatOpenAI(model=model_name, temperature=0)
        print(f"🤖 Using LLM model: {model_name}")

        toolkit = create_graphql_toolkit(endpoint, headers=headers)
        self.tools = toolkit.get_tools()
        self.executor = create_react_agent(self.llm, self.tools, prompt=SYSTEM_PROMPT)

    async def query(self, user_input: str) -> str:
        """Process a user query."""
        print(f"🔍 Processing query: {user_input}")
        result = await self.executor.ainvoke(
            {"messages": [("user", user_input)]},
            config={"recursion_limit": 12}
        )
        messages = result.get("messages", [])
        output = messages[-1].content if messages else ""
        return output or "No response generated"


async def interactive_demo(endpoint: str, headers):
    """Run an interactive demo."""
    print("🚀 Starting GraphQL LangChain Agent...")
    agent = GraphQLAgent(endpoint, headers=headers)
    print("✅ Agent ready! Type your question or 'quit' to exit")

    while True:
        try:
            question = input("\n🙋 You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n👋 Goodbye!")
            break

        if question.lower() in ['quit', 'exit', 'q']:
            print("👋 Goodbye!")
            break
        if not question:
            continue

        print("\n🤖 Agent: Thinking...")
        response = await agent.query(question)
        print(f"\n🤖 Agent: {response}")


async def cli_tool_test(endpoint: str, headers, tool_name: str, tool_args):
    """Call one tool directly and print its result."""
    toolkit = create_graphql_toolkit(endpoint, headers=headers)
    tools = {tool.name: tool for tool in toolkit.get_tools()}

    if tool_name not in tools:
        print(f"Unknown tool: {tool_name}")
        print(f"Available: {list(tools.keys())}")
        return

    tool = tools[tool_name]
    if tool_name in ("list_queries", "list_mutations"):
        tool_input = {}
    elif tool_name == "describe":
        tool_input = {"entities": ",".join(tool_args)}
    elif tool_name == "invoke_graphql":
        tool_input = {"query": tool_args[0] if tool_args else ""}
        if len(tool_args) > 1:
            tool_input["variables"] = tool_args[1]
    else:
        tool_input = {"headers": tool_args[0] if tool_args else "{}"}

    print(await tool.ainvoke(tool_input))


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="GraphQL bridge agent demo")
    parser.add_argument("--cli", nargs="+", metavar=("TOOL", "ARG"), help="Call one tool directly")
    args = parser.parse_args()

    try:
        settings = load_settings()
    except GraphQLBridgeError as e:
        print(f"❌ {e}")
        return

    if args.cli:
        asyncio.run(cli_tool_test(settings.endpoint, settings.headers, args.cli[0], args.cli[1:]))
        return

    if not os.getenv("OPENAI_API_KEY"):
        print("❌ Please set OPENAI_API_KEY environment variable")
        print("\n💡 Optionally set LLM model:")
        print("   export LLM_MODEL='gpt-4'  # or gpt-4o-mini (default)")
        print("\n💡 Without OpenAI, call tools directly:")
        print("   python examples/working_example.py --cli list_queries")
        return

    asyncio.run(interactive_demo(settings.endpoint, settings.headers))


if __name__ == "__main__":
    main()
