"""Constants for the Commandry MCP adapter.

This module defines the property keys, error codes and message templates used
throughout the adapter to avoid magic strings.
"""

from enum import Enum


class PropertyKey(str, Enum):
    """Command metadata property keys understood by the tools adapter."""

    ROLE = "Role"
    NAME = "Name"
    IDEMPOTENT_HINT = "IdempotentHint"
    DESTRUCTIVE_HINT = "DestructiveHint"
    OPEN_WORLD_HINT = "OpenWorldHint"
    READ_ONLY_HINT = "ReadOnlyHint"


# Value of the Role property marking a command for remote-tool exposure
MCP_TOOL_ROLE = "MCP tool"

# Literal true value for hint properties (compared case-insensitively)
TRUE_VALUE = "True"

# Prefix of the text content returned for failed tool calls
ERROR_PREFIX = "Error: "


class ErrorCode(str, Enum):
    """Error code identifiers for tool call failure categorization."""

    INVALID_REQUEST = "INVALID_REQUEST"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ErrorMessage:
    """Error message templates."""

    TOOL_NAME_MISSING = "Tool name is missing"
    TOOL_NOT_FOUND = "Tool {name} was not found"
    ARGUMENTS_NOT_OBJECT = "Tool arguments must be an object"
    UNKNOWN_ARGUMENT = "Unknown argument '{name}'"
    MISSING_ARGUMENT = "Missing required argument '{name}'"
    INVALID_ARGUMENT = "Argument '{name}' must be {expected}, got {actual!r}"
    INVALID_CHOICE = "Argument '{name}' must be one of {choices}, got {actual!r}"
    COMMAND_FAILED = "Command failed"
