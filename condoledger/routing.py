import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar

T = TypeVar("T")


class DefaultHandler(ABC):
    """Base handler for unregistered message types."""

    __slots__ = ("base_type", "operation_name")

    def __init__(self, base_type: type, operation_name: str):
        """Initialize the default handler.

        Args:
            base_type: The base type for messages (e.g., Command,
                DomainEvent).
            operation_name: Name of the operation for error
                messages.
        """
        self.base_type = base_type
        self.operation_name = operation_name

    @abstractmethod
    def __call__(self, message: Any, instance: Any, *args: Any, **kwargs: Any) -> Any:
        """Handle an unregistered message type."""
        ...


class RaiseHandler(DefaultHandler):
    """Raise an error for unregistered message types.

    The raised exception class is configurable so that each kind of
    router can surface its own failure (an aggregate receiving an event
    it does not know is a data-integrity problem, not a missing feature).
    """

    __slots__ = ("error",)

    def __init__(
        self,
        base_type: type,
        operation_name: str,
        error: type[Exception] = NotImplementedError,
    ):
        super().__init__(base_type, operation_name)
        self.error = error

    def __call__(self, message: Any, instance: Any, *args: Any, **kwargs: Any) -> Any:
        raise self.error(
            f"No {self.operation_name} registered on {type(instance).__name__} for "
            f"{self.base_type.__name__} type {type(message).__name__}"
        )


class IgnoreHandler(DefaultHandler):
    """Silently ignore unregistered message types."""

    __slots__ = ()

    def __call__(self, message: Any, instance: Any, *args: Any, **kwargs: Any) -> Any:
        pass


def _extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> type:
    """Extract the type annotation from a handler method.

    Args:
        func: The handler method to inspect.
        param_index: Index of the parameter to extract
            (0=self, 1=first arg, etc.)

    Returns:
        The annotated message type to route on.

    Raises:
        ValueError: If the parameter lacks a type annotation.
    """
    func_name = getattr(func, "__name__", repr(func))
    params = list(inspect.signature(func).parameters.values())

    if len(params) <= param_index:
        raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

    param = params[param_index]
    if param.annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must have a type annotation"
        )
    if not isinstance(param.annotation, type):
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must be annotated with a class, "
            f"got {param.annotation!r}"
        )
    return param.annotation


class MessageRouter:
    """Generic router for dispatching messages to type-specific handlers.

    Uses singledispatch to route messages (commands, events, queries) to
    registered handler methods based on their type annotations. Lookups
    follow the message's MRO, so a handler registered for a base class
    receives every subclass that has no more specific handler.
    """

    __slots__ = ("_dispatch", "_default")

    def __init__(self, default_handler: DefaultHandler):
        @singledispatch
        def dispatch(message: object, instance: object, *args: Any, **kwargs: Any) -> object:
            return default_handler(message, instance, *args, **kwargs)

        self._dispatch = dispatch
        self._default = dispatch.registry[object]

    def register(self, message_type: type, handler: Callable[..., object]) -> None:
        """Register a handler for a specific message type.

        Args:
            message_type: The message class this handler processes.
            handler: The method to call when handling this message type.
        """

        def wrapper(msg: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any) -> object:
            return h(inst, msg, *args, **kwargs)

        self._dispatch.register(message_type)(wrapper)

    def handles(self, message_type: type) -> bool:
        """Tell whether a handler (other than the default) exists for a type."""
        return self._dispatch.dispatch(message_type) is not self._default

    def route(self, instance: Any, message: Any, *args: Any, **kwargs: Any) -> object:
        """Route a message to its registered handler.

        Args:
            instance: The instance to call the handler on (self).
            message: The message to route.
            *args: Additional positional arguments to pass to handler.
            **kwargs: Additional keyword arguments to pass to handler.

        Returns:
            The result of the handler method.
        """
        return self._dispatch(message, instance, *args, **kwargs)


class HandlerDecorator:
    """Marks methods as handlers for the message type named in their annotation."""

    def __init__(self, marker_attr: str, type_attr: str):
        self.marker_attr = marker_attr
        self.type_attr = type_attr

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        message_type = _extract_handler_type(func, param_index=1)
        setattr(func, self.type_attr, message_type)
        setattr(func, self.marker_attr, True)
        return func


handles_command = HandlerDecorator("_is_command_handler", "_handles_command_type")
applies_event = HandlerDecorator("_is_event_applier", "_applies_event_type")
handles_event = HandlerDecorator("_is_event_handler", "_handles_event_type")
handles_query = HandlerDecorator("_is_query_handler", "_handles_query_type")
intercepts = HandlerDecorator("_is_command_interceptor", "_intercepts_command_type")

handles_command.__doc__ = """Decorator marking a method as a command handler.

The command type is automatically extracted from the method's type annotation.

Example:
    >>> class CondominiumCommandHandler(CommandHandler):
    ...     @handles_command
    ...     async def rename(self, command: RenameCondominium) -> None:
    ...         ...
"""

applies_event.__doc__ = """Decorator marking a method as an event applier.

The event type is automatically extracted from the method's type annotation.

Example:
    >>> class Unit(AggregateRoot):
    ...     @applies_event
    ...     def when_owner_assigned(self, event: OwnerAssignedToUnitEvent) -> None:
    ...         self.owner_id = OwnerId(event.owner_id)
"""

handles_event.__doc__ = """Decorator marking a method as an event handler (for projectors).

Example:
    >>> class UnitProjector(Projector):
    ...     @handles_event
    ...     async def on_unit_created(self, event: UnitCreatedEvent, version: int) -> None:
    ...         ...
"""

handles_query.__doc__ = """Decorator marking a method as a query handler.

Example:
    >>> class LedgerQueries(QueryHandler):
    ...     @handles_query
    ...     async def unit_statement(self, query: GetUnitStatement) -> UnitStatement:
    ...         ...
"""

intercepts.__doc__ = """Decorator marking a method as a command interceptor (for middleware).

Use the Command base type to intercept every command, or a concrete
command type for targeted interception.
"""


def setup_routing(
    cls: type,
    marker_attr: str,
    type_attr: str,
    default_handler: DefaultHandler,
) -> MessageRouter:
    """Set up message routing for a class.

    Scans the class hierarchy for methods decorated with the specified
    marker and registers them with a MessageRouter. Methods defined on
    subclasses take precedence over inherited ones.

    Args:
        cls: The class to set up routing for.
        marker_attr: Attribute name marking decorated methods.
        type_attr: Attribute name storing the message type.
        default_handler: Handler for unregistered message types.

    Returns:
        A configured MessageRouter.
    """
    router = MessageRouter(default_handler)

    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            if getattr(value, marker_attr, None) is True:
                router.register(getattr(value, type_attr), value)

    return router


def setup_command_routing(cls: type) -> MessageRouter:
    # Import here to avoid circular dependency
    from .domain.command import Command

    return setup_routing(
        cls,
        marker_attr="_is_command_handler",
        type_attr="_handles_command_type",
        default_handler=RaiseHandler(Command, "handler"),
    )


def setup_event_applying(cls: type) -> MessageRouter:
    """Set up event applying for an aggregate class.

    Unlike event handlers, appliers never ignore an event: an aggregate
    asked to apply an event type it does not register raises
    UnrecognizedEventError.
    """
    from .domain.event import DomainEvent
    from .domain.exceptions import UnrecognizedEventError

    return setup_routing(
        cls,
        marker_attr="_is_event_applier",
        type_attr="_applies_event_type",
        default_handler=RaiseHandler(DomainEvent, "applier", error=UnrecognizedEventError),
    )


def setup_event_handling(cls: type) -> MessageRouter:
    from .domain.event import DomainEvent

    return setup_routing(
        cls,
        marker_attr="_is_event_handler",
        type_attr="_handles_event_type",
        default_handler=IgnoreHandler(DomainEvent, "handler"),
    )


def setup_query_routing(cls: type) -> MessageRouter:
    from .domain.query import Query

    return setup_routing(
        cls,
        marker_attr="_is_query_handler",
        type_attr="_handles_query_type",
        default_handler=RaiseHandler(Query, "handler"),
    )


def setup_middleware_routing(cls: type) -> MessageRouter:
    from .domain.command import Command

    return setup_routing(
        cls,
        marker_attr="_is_command_interceptor",
        type_attr="_intercepts_command_type",
        default_handler=IgnoreHandler(Command, "interceptor"),
    )
