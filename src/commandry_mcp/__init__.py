"""MCP adapter exposing Commandry commands as tools."""

from .server import MCPServer, create_server
from .monitor import PrimitiveMonitor
from .decorators import capture_failure
from .errors import (
    ToolError,
    ToolValidationError,
    ToolNotFoundError,
    ArgumentMappingError,
    CommandExecutionError,
)
from .outcome import Success, Failure, ToolOutcome
from .constants import PropertyKey, ErrorCode, ErrorMessage, MCP_TOOL_ROLE
from .tools import ToolsController, ToolsMapper, ToolProperties

__all__ = [
    "MCPServer",
    "create_server",
    "PrimitiveMonitor",
    "capture_failure",
    "ToolError",
    "ToolValidationError",
    "ToolNotFoundError",
    "ArgumentMappingError",
    "CommandExecutionError",
    "Success",
    "Failure",
    "ToolOutcome",
    "PropertyKey",
    "ErrorCode",
    "ErrorMessage",
    "MCP_TOOL_ROLE",
    "ToolsController",
    "ToolsMapper",
    "ToolProperties",
]
