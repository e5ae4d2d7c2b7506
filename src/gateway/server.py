"""MCP stdio server wiring.

build_context() performs every fatal startup check (config, gh on PATH) before
the transport opens; after that no single tool call can stop the server.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from src.accounts.config import load_config, resolve_config_path
from src.accounts.credentials import CredentialStore
from src.accounts.registry import AccountRegistry
from src.config.settings import Settings
from src.constants import PROJECT_NAME, VERSION
from src.executor.runner import CommandExecutor
from src.gateway.dispatch import AppContext, Dispatcher
from src.gateway.protocol import ToolCallError, invoke, list_tools, render_payload
from src.tools.builtins import build_registry

logger = structlog.get_logger()


def build_context(settings: Settings, config_path: Path | None = None) -> AppContext:
    """Load accounts and the catalog. Raises ConfigError / GhNotFoundError."""
    path = resolve_config_path(config_path)
    config = load_config(path)

    executor = CommandExecutor(
        settings.executor.gh_binary,
        kill_grace_s=settings.executor.kill_grace_s,
    )
    gh_path = executor.find_binary()
    logger.info("gh_found", path=gh_path)

    tools = build_registry()
    logger.info("tools_registered", count=len(tools))

    return AppContext(
        settings=settings,
        accounts=AccountRegistry(config),
        credentials=CredentialStore(),
        tools=tools,
        executor=executor,
    )


def create_server(dispatcher: Dispatcher) -> Server:
    server: Server = Server(PROJECT_NAME, version=VERSION)
    registry = dispatcher.context.tools

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return [
            Tool(name=info.name, description=info.description, inputSchema=info.input_schema)
            for info in list_tools(registry)
        ]

    # Argument validation happens in the dispatcher, with its own error codes.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        response = await invoke(dispatcher, name, arguments)
        if not response.ok:
            raise ToolCallError(response)
        return [TextContent(type="text", text=render_payload(response.payload))]

    return server


async def serve(ctx: AppContext) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    version = await ctx.executor.version()
    logger.info(
        "server_starting",
        gh_version=version,
        default_account=ctx.accounts.default_alias,
        accounts=ctx.accounts.aliases(),
        tools=len(ctx.tools),
    )
    server = create_server(Dispatcher(ctx))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
    logger.info("server_stopped")
