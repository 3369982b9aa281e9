"""Built-in commands shipped with the command host."""

from typing import Any

from .command import Command, CommandContext, FunctionCommand
from .host import CommandHost
from .metadata import (
    CommandMetadata,
    CommandProperties,
    ParameterDefinition,
    ParameterSchema,
    ParameterType,
)

MCP_TOOL_PROPERTIES = {"Role": "MCP tool", "ReadOnlyHint": "True", "IdempotentHint": "True"}


def _echo(message: str, repeat: int = 1) -> list[str]:
    """Echo a message back, optionally repeated."""
    return [message] * repeat


def create_echo_command() -> Command:
    return FunctionCommand(
        "echo",
        _echo,
        schema=ParameterSchema.of(
            ParameterDefinition(
                "message",
                ParameterType.STRING,
                description="Message to echo back",
                required=True,
            ),
            ParameterDefinition(
                "repeat",
                ParameterType.INTEGER,
                description="How many times to repeat the message",
                default=1,
            ),
        ),
        title="Echo",
        properties=MCP_TOOL_PROPERTIES,
    )


class ListCommandsCommand(Command):
    """Lists every command registered in the host with its description."""

    def __init__(self, host: CommandHost, name: str = "list_commands"):
        super().__init__(name)
        self.host = host

    async def describe(self) -> CommandMetadata:
        return CommandMetadata(
            name=self.name,
            title="List commands",
            description="List all commands registered in the command host.",
            properties=CommandProperties(MCP_TOOL_PROPERTIES),
            schema=ParameterSchema.of(
                ParameterDefinition(
                    "role",
                    ParameterType.STRING,
                    description="Only list commands carrying this Role property",
                ),
            ),
        )

    async def run(self, context: CommandContext) -> list[dict[str, Any]]:
        role = context.parameters.get("role")
        records = []
        for command in self.host.get_commands():
            metadata = await command.describe()
            if role is not None and not metadata.has_property("Role", role):
                continue
            records.append({"name": metadata.name, "description": metadata.description})

        context.logger.debug(f"Listed {len(records)} commands")
        return records


def builtin_commands(host: CommandHost) -> list[Command]:
    return [create_echo_command(), ListCommandsCommand(host)]
