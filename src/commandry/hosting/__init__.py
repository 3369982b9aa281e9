"""Command hosting: commands, metadata, dispatchers and the command host."""

from .command import Command, CommandContext, CommandResult, FunctionCommand
from .dispatcher import CommandDispatcher, SerializingDispatcher
from .host import CommandHost, register_commands
from .metadata import (
    CommandMetadata,
    CommandProperties,
    ParameterDefinition,
    ParameterSchema,
    ParameterType,
)

__all__ = [
    # Commands
    "Command",
    "CommandContext",
    "CommandResult",
    "FunctionCommand",
    # Dispatchers
    "CommandDispatcher",
    "SerializingDispatcher",
    # Host
    "CommandHost",
    "register_commands",
    # Metadata
    "CommandMetadata",
    "CommandProperties",
    "ParameterDefinition",
    "ParameterSchema",
    "ParameterType",
]
