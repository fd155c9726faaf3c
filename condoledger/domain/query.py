"""Query base class for the read side.

Queries request data from the read models and never mutate state.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

TResponse = TypeVar("TResponse")


class Query(BaseModel, Generic[TResponse]):
    """Base class for all queries.

    Each query is generic over its response type.

    Examples:
        >>> class GetUnitStatement(Query[UnitStatement]):
        ...     unit_id: str
    """

    model_config = ConfigDict(frozen=True)

    query_id: ULID = Field(default_factory=ULID)
