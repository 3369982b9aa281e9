"""Command dispatchers.

A dispatcher decides how a command invocation is scheduled. The default
dispatcher runs the invocation directly; ``SerializingDispatcher`` allows only
one in-flight invocation per command name.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, ClassVar

if TYPE_CHECKING:
    from .command import CommandResult

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Runs command invocations as they arrive."""

    default: ClassVar["CommandDispatcher"]

    async def invoke(
        self,
        command_name: str,
        action: Callable[[], Awaitable["CommandResult"]],
    ) -> "CommandResult":
        return await action()


CommandDispatcher.default = CommandDispatcher()


class SerializingDispatcher(CommandDispatcher):
    """Serializes invocations of the same command name.

    Invocations of different commands still run concurrently.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, command_name: str) -> asyncio.Lock:
        lock = self._locks.get(command_name)
        if lock is None:
            lock = self._locks[command_name] = asyncio.Lock()
        return lock

    async def invoke(
        self,
        command_name: str,
        action: Callable[[], Awaitable["CommandResult"]],
    ) -> "CommandResult":
        lock = self._lock_for(command_name)
        if lock.locked():
            logger.debug(f"Command '{command_name}' is busy, waiting for previous invocation")
        async with lock:
            return await action()
