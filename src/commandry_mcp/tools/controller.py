"""Tools controller.

This module exposes the commands of a ``CommandHost`` as MCP tools: it builds
the tool catalog, executes tool calls and relays command set changes to the
tools change monitor.
"""

import logging

from mcp import types

from commandry.hosting import Command, CommandHost, CommandMetadata

from ..constants import ErrorMessage
from ..decorators import capture_failure
from ..errors import CommandExecutionError, ToolNotFoundError, ToolValidationError
from ..monitor import PrimitiveMonitor
from ..outcome import Success, ToolOutcome
from .mapper import ToolsMapper
from .properties import ToolProperties

logger = logging.getLogger(__name__)


class ToolsController:
    """Adapter between a command host and the MCP tools primitive.

    Command metadata is never cached: it is described again for every
    listing and every call.
    """

    def __init__(self, command_host: CommandHost, tools_mapper: ToolsMapper | None = None):
        """Initialize controller and start watching the command host.

        Args:
            command_host: Host owning the commands
            tools_mapper: Mapper used for schemas, arguments and results
        """
        self.command_host = command_host
        self.tools_mapper = tools_mapper or ToolsMapper()
        self._tool_monitor = PrimitiveMonitor("tools")
        self._unwatch = command_host.watch_commands(self._on_commands_changed)

    @property
    def tool_monitor(self) -> PrimitiveMonitor:
        return self._tool_monitor

    def _on_commands_changed(self, host: CommandHost) -> None:
        self._tool_monitor.notify_changed()

    def close(self) -> None:
        """Stop watching the command host."""
        self._unwatch()

    async def list_tools(self) -> types.ListToolsResult:
        """List the commands marked for MCP tool exposure.

        Commands are listed in host order. A failure to describe any command
        aborts the whole listing.

        Returns:
            ListToolsResult with one tool per exposed command
        """
        tools: list[types.Tool] = []

        for command in self.command_host.get_commands():
            metadata = await command.describe()
            properties = ToolProperties.from_metadata(metadata)
            if properties.exposed:
                tools.append(self._to_tool(metadata, properties))

        logger.debug(f"Listed {len(tools)} tools")
        return types.ListToolsResult(tools=tools)

    def _to_tool(self, metadata: CommandMetadata, properties: ToolProperties) -> types.Tool:
        return types.Tool(
            name=properties.tool_name(metadata),
            description=metadata.description,
            inputSchema=self.tools_mapper.to_json_schema(metadata.schema),
            annotations=types.ToolAnnotations(
                title=metadata.title or metadata.name,
                idempotentHint=properties.idempotent_hint,
                destructiveHint=properties.destructive_hint,
                openWorldHint=properties.open_world_hint,
                readOnlyHint=properties.read_only_hint,
            ),
        )

    async def call_tool(
        self,
        request: types.CallToolRequestParams | None,
        logger: logging.Logger | logging.LoggerAdapter,
    ) -> types.CallToolResult:
        """Call the command behind a tool.

        Failures never raise: they are returned as a single "Error: ..." text
        content item with ``isError`` set. Cancellation propagates.

        Args:
            request: Tool call parameters (name and arguments)
            logger: Logger handed to the command for this invocation

        Returns:
            CallToolResult with the command's records as content
        """
        outcome = await self._invoke(request, logger)
        return outcome.to_response()

    async def _resolve(self, name: str) -> tuple[Command, CommandMetadata]:
        """Find the exposed command advertised under a tool name."""
        command = self.command_host.get_command(name)
        if command is not None:
            metadata = await command.describe()
            properties = ToolProperties.from_metadata(metadata)
            if properties.exposed and properties.tool_name(metadata) == name:
                return command, metadata

        # Tool names may come from a Name override rather than the command name
        for candidate in self.command_host.get_commands():
            if candidate is command:
                continue
            try:
                metadata = await candidate.describe()
            except Exception as e:
                logger.warning(f"Skipping command {candidate.name} while resolving tool {name}: {e}")
                continue
            properties = ToolProperties.from_metadata(metadata)
            if properties.exposed and properties.tool_name(metadata) == name:
                return candidate, metadata

        raise ToolNotFoundError(name)

    @capture_failure
    async def _invoke(
        self,
        request: types.CallToolRequestParams | None,
        logger: logging.Logger | logging.LoggerAdapter,
    ) -> ToolOutcome:
        name = request.name if request is not None else None
        if not isinstance(name, str) or not name.strip():
            raise ToolValidationError(ErrorMessage.TOOL_NAME_MISSING)

        command, metadata = await self._resolve(name)
        parameters = self.tools_mapper.to_parameters(request.arguments, metadata.schema) or {}

        context = command.create_context(parameters, logger)
        result = await command.execute(context)
        if result.error is not None:
            raise CommandExecutionError(result.error)

        content = []
        for record in result.records:
            item = self.tools_mapper.record_to_content(record)
            if item is not None:
                content.append(item)

        return Success(content)
