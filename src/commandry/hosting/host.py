"""Command host.

This module implements the registry that owns all commands, provides command
discovery and lookup, and notifies watchers when the set of commands changes.
"""

import logging
import threading
from typing import Callable, Iterable

from .command import Command
from .dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)

CommandsChangedCallback = Callable[["CommandHost"], None]


class CommandHost:
    """Registry for managing commands.

    This host provides:
    - Command registration and removal
    - Command enumeration in registration order
    - Command lookup by name
    - Change notification for watchers
    """

    def __init__(self, dispatcher: CommandDispatcher | None = None):
        """Initialize an empty command host.

        Args:
            dispatcher: Dispatcher assigned to every registered command
                (default: run invocations directly)
        """
        self.dispatcher = dispatcher or CommandDispatcher.default
        self._commands: dict[str, Command] = {}
        self._watchers: list[CommandsChangedCallback] = []
        self._lock = threading.RLock()
        logger.info("Command host initialized")

    def register(self, command: Command) -> None:
        """Register a command.

        Args:
            command: Command to register (name must be unique)

        Raises:
            ValueError: If a command with the same name is already registered
        """
        with self._lock:
            if command.name in self._commands:
                raise ValueError(f"Command '{command.name}' already registered")
            command.dispatcher = self.dispatcher
            self._commands[command.name] = command

        logger.info(f"Registered command: {command.name}")
        self.notify_changed()

    def unregister(self, name: str) -> None:
        """Unregister a command.

        Args:
            name: Command name

        Raises:
            KeyError: If command not found
        """
        with self._lock:
            if name not in self._commands:
                raise KeyError(f"Command '{name}' not found")
            del self._commands[name]

        logger.info(f"Unregistered command: {name}")
        self.notify_changed()

    def get_commands(self) -> list[Command]:
        """Get a snapshot of all commands in registration order."""
        with self._lock:
            return list(self._commands.values())

    def get_command(self, name: str) -> Command | None:
        """Get a command by name.

        Args:
            name: Command name

        Returns:
            Command if registered, None otherwise
        """
        with self._lock:
            return self._commands.get(name)

    def count(self) -> int:
        with self._lock:
            return len(self._commands)

    def watch_commands(self, callback: CommandsChangedCallback) -> Callable[[], None]:
        """Subscribe to command set changes.

        Args:
            callback: Called with this host after every change

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._watchers.append(callback)

        def unwatch() -> None:
            with self._lock:
                if callback in self._watchers:
                    self._watchers.remove(callback)

        return unwatch

    def notify_changed(self) -> None:
        """Notify watchers that the commands (or their metadata) changed.

        Call this directly when a registered command's metadata changes
        without a registration change.
        """
        with self._lock:
            watchers = list(self._watchers)

        for callback in watchers:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Command watcher {callback!r} failed: {e}", exc_info=True)


def register_commands(commands: Iterable[Command], host: CommandHost) -> None:
    """Register multiple commands at once.

    Args:
        commands: Commands to register
        host: CommandHost receiving the commands
    """
    count = 0
    for command in commands:
        host.register(command)
        count += 1

    logger.info(f"Registered {count} commands")
