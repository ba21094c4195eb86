"""
MCP Jira Server - exposes the registered Jira operations as MCP tools over stdio.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .configuration import JiraConfig, load_config_from_env
from .core.handlers import OperationDispatcher
from .core.tools import ToolRegistry
from .error_handling import JiraInputError
from .jira.client import JiraResponse, Transport, get_jira_client
from .logging_config import configure_logging
from .session import SessionState

logger = logging.getLogger(__name__)


def format_response(response: JiraResponse, session: SessionState) -> str:
    """Text returned to the MCP client for one call."""
    if not response.succeeded:
        return "❌ " + "\n".join(response.errors)
    return session.cli_output or f"✅ Completed (HTTP {response.status})"


async def call_operation(
    dispatcher: OperationDispatcher, name: str, arguments: Dict[str, Any]
) -> List[TextContent]:
    """Run one tool call with CLI mode on and wrap the summary as text."""
    session = SessionState(cli_mode=True)
    try:
        response = await dispatcher.dispatch(name, arguments or {}, session)
    except JiraInputError as e:
        logger.warning(f"Rejected call to {name}: {e}", extra={"operation": name})
        return [TextContent(type="text", text=f"❌ {e}")]
    return [TextContent(type="text", text=format_response(response, session))]


def create_server(transport: Transport, config: JiraConfig) -> Server:
    """Build the MCP server around an existing transport."""
    registry = ToolRegistry()
    registry.initialize_default_tools()
    dispatcher = OperationDispatcher(transport, config, registry)

    server = Server("mcp-jira")

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return registry.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        logger.info(f"Tool call: {name}", extra={"operation": name})
        return await call_operation(dispatcher, name, arguments)

    return server


async def serve(project_dir: Path | None = None) -> None:
    """Run the MCP server on stdio until the client disconnects."""
    config = load_config_from_env(project_dir)
    configure_logging(config.log_level)

    client = get_jira_client(config)
    if client is None:
        logger.error("No Jira host configured; set JIRA_HOST")
        return

    logger.info(f"🚀 Starting MCP Jira Server for {config.host}")
    server = create_server(client, config)
    try:
        options = server.create_initialization_options()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running. Waiting for requests...")
            await server.run(read_stream, write_stream, options)
    except Exception as e:
        logger.exception(f"Critical Error: Server stopped due to unhandled exception: {e}")
        sys.exit(1)
    finally:
        await client.close()
        logger.info("MCP Jira Server shutting down.")
