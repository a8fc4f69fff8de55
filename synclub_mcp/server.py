"""MCP server for the SynClub comic API.

Exposes the comic tools from ``synclub_mcp.catalog``:
- story, chapter and image-prompt generation and editing (streamed)
- character, pose, panel and image-edit generation (task polled)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx
from mcp.server import Server
from mcp.server.lowlevel import NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from synclub_mcp import __version__
from synclub_mcp.client import GatewayClient
from synclub_mcp.config import Settings
from synclub_mcp.dispatcher import ToolDispatcher
from synclub_mcp.errors import SynclubAPIError
from synclub_mcp.logger import configure_logging

logger = logging.getLogger(__name__)

SERVER_NAME = "synclub-mcp"


class SynclubServer:
    """MCP Server for the SynClub comic tools."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.client = GatewayClient.from_settings(settings, transport=transport)
        self.dispatcher = ToolDispatcher.from_settings(settings, self.client)
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def _setup_handlers(self):
        """Register MCP handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        # Arguments are checked by the dispatcher so aliases and structured
        # JSON values reach the payload builders.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict) -> CallToolResult:
            return await self.call_tool(name, arguments)

    def list_tools(self) -> List[Tool]:
        return self.dispatcher.list_tools()

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> CallToolResult:
        return await self.dispatcher.dispatch(name, arguments)

    async def handle_request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Forward a raw GET/POST to the upstream API.

        Unlike tool calls, failures are raised to the caller as RuntimeError.
        """
        try:
            if method == "GET":
                return await self.client.get(path, params=query, headers=headers)
            if method == "POST":
                return await self.client.post(path, json=body, headers=headers)
            raise ValueError(f"Unsupported HTTP method: {method}")
        except SynclubAPIError as e:
            raise RuntimeError(e.message) from e
        except Exception as e:
            raise RuntimeError(f"API request failed: {e}") from e

    async def start(self):
        """Start the MCP server over stdio."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=__version__,
                        capabilities=self.server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={},
                        ),
                    ),
                )
        finally:
            await self.client.aclose()


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.error(
        "Unhandled error in background task: %s",
        context.get("message", ""),
        exc_info=exc,
    )


async def run_stdio(settings: Settings):
    """Run in stdio mode."""
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    server = SynclubServer(settings)
    await server.start()


def main():
    """Entry point."""
    settings = Settings()
    configure_logging(settings)
    if not settings.api_key:
        logger.warning("SYNCLUB_MCP_API is not set; upstream calls will be rejected")
    if not settings.api_host:
        logger.warning("UNIFIED_API_BASE_URL is not set")
    logger.info("Starting %s %s", SERVER_NAME, __version__)
    asyncio.run(run_stdio(settings))


if __name__ == "__main__":
    main()
