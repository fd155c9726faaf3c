"""Command middleware.

Middleware wraps the command handlers to add cross-cutting behavior such
as logging or retries. Each middleware declares ``@intercepts`` methods;
a command with no matching interceptor passes straight through.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, ClassVar

from ...domain.command import Command
from ...domain.exceptions import ConcurrencyError
from ...routing import intercepts, setup_middleware_routing

if TYPE_CHECKING:
    from ...routing import MessageRouter

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Command[Any]], Coroutine[Any, Any, Any]]


class Middleware:
    """Base class for middleware with annotation-based routing.

    Examples:
        >>> class AuditMiddleware(Middleware):
        ...     @intercepts
        ...     async def audit(self, command: IssueFeeToUnit, next: Handler) -> Any:
        ...         self.issued.append(command.unit_id)
        ...         return await next(command)
    """

    _command_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._command_router = setup_middleware_routing(cls)

    async def intercept(self, command: Command[Any], next: Handler) -> Any:
        """Route the command to an interceptor, or forward it to ``next``."""
        result = self._command_router.route(self, command, next)

        # IgnoreHandler returns None when no interceptor matches
        if result is None:
            return await next(command)
        elif inspect.isawaitable(result):
            return await result
        else:
            return result


class LoggingMiddleware(Middleware):
    """Logs every command received, with its type and id.

    Command fields are not logged; they carry owner names and contact
    details.
    """

    def __init__(self, level: str):
        """
        Args:
            level: Name of the log level (e.g. "INFO"). Case-insensitive.
        """
        self.level = getattr(logging, level.upper())

    @intercepts
    async def log_command(self, command: Command, next: Handler) -> Any:  # type: ignore[type-arg]
        extra = {
            "command_type": type(command).__name__,
            "command_id": str(command.command_id),
        }
        if command.correlation_id is not None:
            extra["correlation_id"] = str(command.correlation_id)

        LOGGER.log(self.level, "Received Command", extra=extra)
        return await next(command)


class ConcurrencyRetryMiddleware(Middleware):
    """Retries commands that lose an optimistic-concurrency race.

    The handler reloads the aggregate on every attempt, so a retry runs
    the command against the stream as the winning writer left it.

    Attributes:
        max_attempts: Attempts in total, including the first one. Must be
            positive.
        retry_delay: Seconds to wait between attempts. Must be
            non-negative.

    Examples:
        >>> middleware = ConcurrencyRetryMiddleware(max_attempts=3, retry_delay=0.05)
    """

    __slots__ = ("max_attempts", "retry_delay")

    def __init__(self, max_attempts: int, retry_delay: float):
        """
        Raises:
            ValueError: If max_attempts <= 0 or retry_delay < 0.
        """
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    @intercepts
    async def retry_on_concurrency(self, command: Command, next: Handler) -> Any:  # type: ignore[type-arg]
        """Run the command, retrying on ``ConcurrencyError``.

        Raises:
            ConcurrencyError: If every attempt hit a conflict.
        """
        last_error: ConcurrencyError | None = None
        for attempt in range(self.max_attempts):
            try:
                return await next(command)
            except ConcurrencyError as e:
                last_error = e
                LOGGER.warning(
                    f"Concurrency error on attempt {attempt + 1}/{self.max_attempts}: {e}"
                )
                # Don't sleep after the last attempt
                if attempt < self.max_attempts - 1:
                    await asyncio.sleep(self.retry_delay)
        raise ConcurrencyError(f"Max attempts ({self.max_attempts}) reached") from last_error
