"""Command abstraction for the command host.

A command is a named, invocable operation. Each invocation runs against its
own ``CommandContext`` so that concurrent invocations of the same command
never share parameters, logger or result.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from .dispatcher import CommandDispatcher
from .metadata import CommandMetadata, CommandProperties, ParameterSchema

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a single command execution."""

    records: list[Any] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class CommandContext:
    """Per-invocation state handed to a command."""

    parameters: dict[str, Any] = field(default_factory=dict)
    logger: logging.Logger | logging.LoggerAdapter = logger
    result: CommandResult | None = None


class Command(ABC):
    """Base class for all commands registered in a ``CommandHost``."""

    def __init__(self, name: str):
        if not name or not name.strip():
            raise ValueError("Command name cannot be empty")
        self.name = name
        self.dispatcher: CommandDispatcher = CommandDispatcher.default

    @abstractmethod
    async def describe(self) -> CommandMetadata:
        """Describe the command as it currently is."""

    @abstractmethod
    async def run(self, context: CommandContext) -> Iterable[Any] | None:
        """Run the command body and return its output records."""

    def create_context(
        self,
        parameters: Mapping[str, Any] | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> CommandContext:
        """Create a fresh invocation context for this command."""
        context = CommandContext(parameters=dict(parameters or {}))
        if logger is not None:
            context.logger = logger
        return context

    async def execute(self, context: CommandContext) -> CommandResult:
        """Execute the command through its dispatcher.

        Exceptions raised by ``run`` are captured into ``CommandResult.error``.
        Cancellation is not captured and propagates to the caller.

        Args:
            context: Invocation context created by ``create_context``

        Returns:
            The command result, also stored on ``context.result``
        """
        result = await self.dispatcher.invoke(self.name, lambda: self._execute(context))
        context.result = result
        return result

    async def _execute(self, context: CommandContext) -> CommandResult:
        try:
            records = await self.run(context)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            context.logger.error(f"Command '{self.name}' failed: {e}")
            return CommandResult(error=e)
        return CommandResult(records=list(records) if records is not None else [])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class FunctionCommand(Command):
    """Command backed by a plain (sync or async) callable.

    The callable receives the bound parameters as keyword arguments. If it
    declares a ``logger`` parameter, the invocation logger is passed as well.
    A non-iterable return value becomes a single record; strings and mappings
    are never unpacked. Sync callables run in a worker thread so they do not
    block the event loop.
    """

    def __init__(
        self,
        name: str,
        handler: Callable[..., Any],
        schema: ParameterSchema | None = None,
        title: str | None = None,
        description: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ):
        super().__init__(name)
        self.handler = handler
        self.schema = schema or ParameterSchema()
        self.title = title
        self.description = description if description is not None else inspect.getdoc(handler)
        self.properties = CommandProperties(properties)
        self._wants_logger = "logger" in inspect.signature(handler).parameters

    async def describe(self) -> CommandMetadata:
        return CommandMetadata(
            name=self.name,
            title=self.title,
            description=self.description,
            properties=self.properties,
            schema=self.schema,
        )

    async def run(self, context: CommandContext) -> Iterable[Any] | None:
        kwargs = dict(context.parameters)
        if self._wants_logger:
            kwargs["logger"] = context.logger

        if inspect.iscoroutinefunction(self.handler):
            output = await self.handler(**kwargs)
        else:
            output = await asyncio.to_thread(self.handler, **kwargs)
        if inspect.isawaitable(output):
            output = await output

        if output is None:
            return None
        if isinstance(output, (str, bytes, Mapping)) or not isinstance(output, Iterable):
            return [output]
        return output
