"""MCP Server for Commandry.

This module implements the MCP server that exposes the commands of a command
host as tools, with stdio transport, lifecycle management and capabilities
declaration.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from commandry.hosting import CommandHost, SerializingDispatcher, register_commands
from commandry.hosting.builtin import builtin_commands

from .tools import ToolsController, ToolsMapper

logger = logging.getLogger(__name__)

# Parent logger of the per-call loggers handed to commands
TOOL_LOGGER_NAME = "commandry_mcp.tools"


class MCPServer:
    """MCP Server for Commandry.

    This server advertises host commands marked as MCP tools and executes
    tool calls against them.
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        command_host: Optional[CommandHost] = None,
    ):
        """Initialize MCP Server.

        Args:
            config: Server configuration dictionary. Should contain:
                - name: Server name (default: "commandry")
                - version: Server version (default: "0.1.0")
                - description: Server description
                - transport: Transport configuration
                - logging: Logging configuration
                - tools: Tools configuration
            command_host: Host owning the commands (default: a new host)
        """
        self.config = config or {}
        self.name = self.config.get("name", "commandry")
        self.version = self.config.get("version", "0.1.0")
        self.description = self.config.get("description", "Commandry commands as MCP tools")

        # Transport configuration
        transport_config = self.config.get("transport", {})
        self.transport_type = transport_config.get("type", "stdio")

        # Logging configuration
        logging_config = self.config.get("logging", {})
        self.log_level = logging_config.get("level", "INFO")
        self.log_format = logging_config.get("format", "json")
        self.log_file = logging_config.get("file")

        # Tools configuration
        tools_config = self.config.get("tools", {})
        self.builtin_tools = tools_config.get("builtin", True)
        self.serialize_invocations = tools_config.get("serialize_invocations", False)
        self.notify_list_changed = tools_config.get("notify_list_changed", True)

        # Setup logging
        self._setup_logging()

        if command_host is None:
            dispatcher = SerializingDispatcher() if self.serialize_invocations else None
            command_host = CommandHost(dispatcher)
        self.command_host = command_host

        self.tools_mapper = ToolsMapper()
        self.tools_controller = ToolsController(self.command_host, self.tools_mapper)
        self._capabilities_registered = False

        self.mcp = Server(self.name, version=self.version)

        logger.info(f"Initialized {self.name} MCP Server v{self.version}")
        logger.info(f"Transport: {self.transport_type}")
        logger.info(f"Serialized invocations: {self.serialize_invocations}")

    def _setup_logging(self) -> None:
        """Setup structured logging for the server."""
        # Configure root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self.log_level.upper(), logging.INFO))

        # Remove existing handlers
        root_logger.handlers.clear()

        # Create formatter
        if self.log_format == "json":
            import json
            import time

            class JSONFormatter(logging.Formatter):
                def format(self, record: logging.LogRecord) -> str:
                    log_data = {
                        "timestamp": time.time(),
                        "level": record.levelname,
                        "logger": record.name,
                        "message": record.getMessage(),
                    }
                    if record.exc_info:
                        log_data["exception"] = self.formatException(record.exc_info)
                    return json.dumps(log_data)

            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        # Console handler (stdout carries the protocol)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # File handler (if configured)
        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logger.info(f"Logging to file: {self.log_file}")

    def _register_capabilities(self) -> None:
        """Register built-in commands and the tools request handlers."""
        if self._capabilities_registered:
            return

        logger.info("Registering server capabilities...")

        if self.builtin_tools:
            register_commands(builtin_commands(self.command_host), self.command_host)

        self.mcp.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self.mcp.request_handlers[types.CallToolRequest] = self._handle_call_tool
        self._capabilities_registered = True

        logger.info(f"✓ Registered tools handlers ({self.command_host.count()} commands hosted)")

    async def _handle_list_tools(self, request: types.ListToolsRequest) -> types.ServerResult:
        # Clear before listing so changes made during the listing stay pending
        self.tools_controller.tool_monitor.observe()
        result = await self.tools_controller.list_tools()
        return types.ServerResult(result)

    async def _handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        tool_name = request.params.name or "unnamed"
        tool_logger = logging.getLogger(f"{TOOL_LOGGER_NAME}.{tool_name}")

        result = await self.tools_controller.call_tool(request.params, tool_logger)
        await self.announce_tool_changes()
        return types.ServerResult(result)

    async def announce_tool_changes(self) -> bool:
        """Send tools/list_changed to the current client if tools changed.

        Only works while handling a request, since the notification goes out
        over that request's session.

        Returns:
            True if a notification was sent
        """
        if not self.notify_list_changed:
            return False

        try:
            session = self.mcp.request_context.session
        except LookupError:
            return False

        if not self.tools_controller.tool_monitor.observe():
            return False

        await session.send_tool_list_changed()
        logger.info("Sent tools/list_changed notification")
        return True

    async def start(self) -> None:
        """Start the MCP server.

        This method starts the server with stdio transport and runs
        the main event loop.
        """
        logger.info("Starting MCP server...")

        # Register capabilities
        self._register_capabilities()

        # stdio is the only transport served here
        if self.transport_type != "stdio":
            raise ValueError(
                f"Transport type '{self.transport_type}' not supported. "
                "Only 'stdio' is currently supported."
            )

        init_options = self.mcp.create_initialization_options(
            notification_options=NotificationOptions(tools_changed=self.notify_list_changed),
        )

        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("✓ stdio transport initialized")
                logger.info("Server ready. Waiting for requests...")

                await self.mcp.run(read_stream, write_stream, init_options)
        except KeyboardInterrupt:
            logger.info("Received interrupt signal. Shutting down...")
        except Exception as e:
            logger.error(f"Server error: {e}", exc_info=True)
            raise
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop the MCP server gracefully."""
        logger.info("Stopping MCP server...")
        self.tools_controller.close()
        logger.info("MCP server stopped")

    def get_capabilities(self) -> dict[str, Any]:
        """Get server capabilities declaration.

        Returns:
            Dictionary containing server capabilities information
        """
        return {
            "server": {
                "name": self.name,
                "version": self.version,
                "description": self.description,
            },
            "capabilities": {
                "tools": {
                    "listChanged": self.notify_list_changed,
                },
            },
        }


def create_server(
    config: Optional[dict[str, Any]] = None,
    command_host: Optional[CommandHost] = None,
) -> MCPServer:
    """Factory function to create an MCP server instance.

    Args:
        config: Server configuration dictionary. If None, will try to load
                from config/server.yaml
        command_host: Host owning the commands (default: a new host)

    Returns:
        MCPServer instance
    """
    if config is None:
        config = {}
        # Try to load from config file
        config_path = Path(__file__).parent.parent.parent / "config" / "server.yaml"
        if config_path.exists():
            try:
                import yaml
                with open(config_path, "r") as f:
                    config_data = yaml.safe_load(f) or {}
                    # Merge server config
                    config = dict(config_data.get("server", {}))
                    config.update(config_data)  # Add transport, logging, tools
            except Exception as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.info("Using default configuration")
                config = {}

    return MCPServer(config, command_host)


async def main() -> None:
    """Main entry point for running the MCP server."""
    try:
        server = create_server()
        await server.start()
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
