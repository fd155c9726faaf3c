"""Command bus and routing infrastructure."""

from collections.abc import Callable, Coroutine
from functools import reduce
from typing import Any, TypeVar

from ...domain.command import Command
from .handlers import CommandHandler
from .middleware import Middleware

T = TypeVar("T")


class CommandToHandlerMap:
    @staticmethod
    def from_handlers(handlers: list[CommandHandler]) -> "CommandToHandlerMap":
        map = CommandToHandlerMap()
        for handler in handlers:
            map.add(handler)
        return map

    def __init__(self):
        self.command_to_handler_map: dict[type[Command[Any]], CommandHandler] = {}

    def add(self, handler: CommandHandler):
        for command_type in handler.command_types():
            if command_type in self.command_to_handler_map:
                raise ValueError(f"{command_type.__name__} already has a handler")
            self.command_to_handler_map[command_type] = handler

    def get(self, command_type: type[Command[Any]]) -> CommandHandler:
        try:
            return self.command_to_handler_map[command_type]
        except KeyError:
            raise NotImplementedError(
                f"No handler registered for command type {command_type.__name__}"
            ) from None

    def __contains__(self, command_type: object) -> bool:
        return command_type in self.command_to_handler_map


class DelegateToHandler:
    def __init__(self, command_to_handler_map: CommandToHandlerMap):
        self.command_to_handler_map = command_to_handler_map

    async def handle(self, command: Command[T]) -> T:
        handler = self.command_to_handler_map.get(type(command))
        return await handler.handle(command)


class CommandBus:
    """Command bus for dispatching commands through middleware.

    Middleware is applied in registration order, each one deciding via
    annotation-based routing whether to intercept a command, before the
    command reaches the handler registered for its type.

    Args:
        root_handler: The final handler that delegates to command handlers.
        middleware: List of middleware to apply (in order).
    """

    def __init__(self, root_handler: DelegateToHandler, middleware: list[Middleware]):
        self.root_handler = root_handler
        self.middleware = middleware
        # Build the middleware chain by reducing from right to left
        self.chain: Callable[[Command[Any]], Coroutine[Any, Any, Any]] = reduce(
            lambda next, mw: lambda cmd, n=next, m=mw: m.intercept(cmd, n),
            reversed(middleware),
            self.root_handler.handle,
        )

    async def dispatch(self, command: Command[T]) -> T:
        return await self.chain(command)
