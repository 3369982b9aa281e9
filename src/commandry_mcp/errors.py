"""Exceptions raised by the tools adapter."""

from .constants import ErrorCode, ErrorMessage


class ToolError(Exception):
    """Base class for expected tool call failures."""

    code: ErrorCode = ErrorCode.UNEXPECTED_ERROR


class ToolValidationError(ToolError, ValueError):
    """The tool call request is missing its name or is malformed."""

    code = ErrorCode.INVALID_REQUEST


class ToolNotFoundError(ToolError, LookupError):
    """No command is registered under the requested tool name."""

    code = ErrorCode.TOOL_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(ErrorMessage.TOOL_NOT_FOUND.format(name=name))
        self.name = name


class ArgumentMappingError(ToolError, ValueError):
    """An argument cannot be mapped onto the command's parameters."""

    code = ErrorCode.INVALID_ARGUMENTS

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


class CommandExecutionError(ToolError):
    """The command ran but reported an error in its result."""

    code = ErrorCode.EXECUTION_FAILED

    def __init__(self, error: BaseException):
        super().__init__(str(error) or ErrorMessage.COMMAND_FAILED)
        self.error = error
