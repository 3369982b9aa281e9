"""Decorators for tool call steps.

This module provides the failure boundary used by the tools controller.
"""

import logging
from functools import wraps
from typing import Awaitable, Callable, ParamSpec

from .errors import ToolError
from .outcome import Failure, ToolOutcome

logger = logging.getLogger(__name__)

P = ParamSpec("P")


def capture_failure(
    func: Callable[P, Awaitable[ToolOutcome]],
) -> Callable[P, Awaitable[ToolOutcome]]:
    """Decorator that turns exceptions of an async tool step into a ``Failure``.

    Expected ``ToolError`` failures keep their error code and are logged
    without a traceback. Any other exception is logged with its traceback and
    reported as an unexpected error. ``asyncio.CancelledError`` is not an
    ``Exception`` and therefore propagates untouched.

    Args:
        func: Async function returning a ``ToolOutcome``

    Returns:
        Wrapped function that never raises anything but cancellation
    """
    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> ToolOutcome:
        try:
            return await func(*args, **kwargs)
        except ToolError as e:
            logger.warning(f"{func.__name__} failed ({e.code.value}): {e}")
            return Failure(message=str(e), code=e.code)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            return Failure(message=str(e) or type(e).__name__)

    return wrapper
