"""Pytest configuration and shared fixtures."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Add src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables
os.environ.setdefault("TESTING", "true")

from commandry.hosting import CommandHost, FunctionCommand, ParameterSchema  # noqa: E402
from commandry_mcp.constants import MCP_TOOL_ROLE  # noqa: E402
from commandry_mcp.tools import ToolsController, ToolsMapper  # noqa: E402


@pytest.fixture
def command_host() -> CommandHost:
    """Empty command host."""
    return CommandHost()


@pytest.fixture
def tools_mapper() -> ToolsMapper:
    return ToolsMapper()


@pytest.fixture
def tools_controller(command_host, tools_mapper) -> ToolsController:
    """Controller watching the shared command host."""
    controller = ToolsController(command_host, tools_mapper)
    yield controller
    controller.close()


@pytest.fixture
def tool_logger() -> logging.Logger:
    return logging.getLogger("tests.tools")


@pytest.fixture
def register_command(command_host) -> Callable[..., FunctionCommand]:
    """Factory registering a function command in the shared host.

    Commands are marked as MCP tools unless ``exposed=False``.
    """
    def register(
        name: str,
        handler: Callable[..., Any] | None = None,
        schema: ParameterSchema | None = None,
        exposed: bool = True,
        properties: dict[str, Any] | None = None,
        title: str | None = None,
        description: str | None = None,
    ) -> FunctionCommand:
        props = dict(properties or {})
        if exposed:
            props.setdefault("Role", MCP_TOOL_ROLE)
        command = FunctionCommand(
            name,
            handler or (lambda: None),
            schema=schema,
            title=title,
            description=description,
            properties=props,
        )
        command_host.register(command)
        return command

    return register
