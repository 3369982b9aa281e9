"""Change monitor for MCP primitives.

A ``PrimitiveMonitor`` records that the catalog of one MCP primitive type
(tools, prompts, resources) may have changed since it was last observed.
Notifications can arrive from any thread; every call is guarded by a lock.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

ChangeCallback = Callable[["PrimitiveMonitor"], None]


class PrimitiveMonitor:
    """Thread-safe change signal for one primitive type.

    Every ``notify_changed`` call is counted individually. The ``has_changed``
    flag coalesces them until ``observe`` clears it.
    """

    def __init__(self, primitive: str):
        """Initialize monitor.

        Args:
            primitive: Primitive type this monitor tracks (e.g. "tools")
        """
        self.primitive = primitive
        self._lock = threading.Lock()
        self._changed = False
        self._count = 0
        self._subscribers: list[ChangeCallback] = []

    def notify_changed(self) -> None:
        """Record a change and notify subscribers."""
        with self._lock:
            self._changed = True
            self._count += 1
            count = self._count
            subscribers = list(self._subscribers)

        logger.debug(f"{self.primitive} changed (notification #{count})")

        for callback in subscribers:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"{self.primitive} monitor subscriber failed: {e}", exc_info=True)

    @property
    def has_changed(self) -> bool:
        """True if a change was recorded since the last ``observe``."""
        with self._lock:
            return self._changed

    @property
    def notification_count(self) -> int:
        """Total number of notifications received."""
        with self._lock:
            return self._count

    def observe(self) -> bool:
        """Return whether a change was recorded and clear the flag."""
        with self._lock:
            changed = self._changed
            self._changed = False
            return changed

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Subscribe to change notifications.

        Args:
            callback: Called with this monitor on every notification

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
