"""Command base class for the write side.

Commands represent intentions to change state and are dispatched through
the CommandBus to the handler registered for their type.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

TResponse = TypeVar("TResponse")


class Command(BaseModel, Generic[TResponse]):
    """Base class for all commands.

    Commands are generic over their response type. Creation commands
    return the id of the new aggregate, the others return ``None``.

    Attributes:
        command_id: Unique identifier for this command instance.
        correlation_id: Optional correlation ID for tracing.

    Examples:
        >>> class RenameCondominium(Command[None]):
        ...     condominium_id: str
        ...     new_name: str
    """

    model_config = ConfigDict(frozen=True)

    command_id: ULID = Field(default_factory=ULID)
    correlation_id: ULID | None = None
