"""Outcome of a tool call.

Every tool call resolves to exactly one ``Success`` or ``Failure``. The MCP
response, including its ``isError`` flag, is derived from that variant alone.
"""

from dataclasses import dataclass, field
from typing import Union

from mcp import types

from .constants import ERROR_PREFIX, ErrorCode

Content = Union[types.TextContent, types.ImageContent, types.EmbeddedResource]


@dataclass(frozen=True)
class Success:
    """Tool call that produced content."""

    content: list[Content] = field(default_factory=list)

    def is_error(self) -> bool:
        return False

    def to_response(self) -> types.CallToolResult:
        return types.CallToolResult(content=list(self.content), isError=False)


@dataclass(frozen=True)
class Failure:
    """Tool call that failed at any step."""

    message: str
    code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def is_error(self) -> bool:
        return True

    def to_response(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"{ERROR_PREFIX}{self.message}")],
            isError=True,
        )


ToolOutcome = Union[Success, Failure]
