"""MCP binding for the tool dispatcher.

The host talks JSON-RPC over stdin/stdout; framing, initialization and
error reporting belong to the ``mcp`` SDK. An exception raised from the
call handler is returned to the host as a tool result flagged ``isError``,
so one failed call never takes the server down.

Argument validation is left to our own validator (``validate_input=False``)
so the host gets field-level messages from a single place.
"""

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .core.dispatcher import ToolDispatcher
from .logging import get_logger
from .types import ToolResult

logger = get_logger(__name__)

SERVER_NAME = "gemini-email-subject-generator"


def build_tool_list(dispatcher: ToolDispatcher) -> list[types.Tool]:
    """Tool definitions in MCP form."""
    return [
        types.Tool(
            name=definition["name"],
            description=definition["description"],
            inputSchema=definition["inputSchema"],
        )
        for definition in dispatcher.list_tools()
    ]


def to_content(result: ToolResult) -> list[types.TextContent]:
    """Convert a dispatcher envelope into MCP content items."""
    return [types.TextContent(type="text", text=item.text) for item in result.content]


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server whose handlers delegate to ``dispatcher``."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return build_tool_list(dispatcher)

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
        # handlers are synchronous: the call runs to completion before the
        # next request is read
        return to_content(dispatcher.dispatch(name, arguments))

    return server


async def run_stdio(server: Server) -> None:
    """Serve over stdin/stdout until the host closes the stream."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{SERVER_NAME} MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
