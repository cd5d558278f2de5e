import asyncio
from typing import Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from config import load_configuration
from mcp_servers.merge_review_tools import MergeReviewTools
from utils.io.logger import logger

SERVER_NAME = "merge-review"


def create_server(tools: Optional[MergeReviewTools] = None) -> Server:
    """Build the MCP server with the merge review tools registered."""
    tools = tools or MergeReviewTools()
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tools.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        # git runs synchronously, so calls are handled one at a time
        content = tools.call_tool(request.params.name, request.params.arguments or {})
        return types.ServerResult(types.CallToolResult(content=content))

    # Registered directly: McpError must reach the client as a JSON-RPC error
    # with its code, not as an isError tool result
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(tools: Optional[MergeReviewTools] = None) -> None:
    """Serve the merge review tools over stdio until the client disconnects."""
    server = create_server(tools)
    async with stdio_server() as (read_stream, write_stream):
        logger.success("Merge Review MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    load_configuration()
    logger.setup()
    asyncio.run(serve())


if __name__ == "__main__":
    main()
