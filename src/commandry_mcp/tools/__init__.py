"""MCP tools primitive: command-to-tool controller and mapper."""

from .controller import ToolsController
from .mapper import ScalarRecord, StructuredRecord, ToolsMapper
from .properties import ToolProperties

__all__ = [
    "ToolsController",
    "ToolsMapper",
    "ToolProperties",
    "ScalarRecord",
    "StructuredRecord",
]
