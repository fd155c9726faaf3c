"""Index specifications for the MongoDB collections."""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    DESC = DESCENDING


class IndexSpec(BaseModel):
    """Specification for a MongoDB index.

    Example:
        >>> IndexSpec(
        ...     keys=[
        ...         ("aggregate_type", IndexDirection.ASC),
        ...         ("aggregate_id", IndexDirection.ASC),
        ...         ("version", IndexDirection.ASC),
        ...     ],
        ...     unique=True,
        ... )
    """

    keys: list[tuple[str, IndexDirection]]
    unique: bool = False

    async def apply(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True
        await collection.create_index([(key, int(direction)) for key, direction in self.keys], **kwargs)


EVENT_INDEXES = [
    IndexSpec(keys=[("event_id", IndexDirection.ASC)], unique=True),
    IndexSpec(
        keys=[
            ("aggregate_type", IndexDirection.ASC),
            ("aggregate_id", IndexDirection.ASC),
            ("version", IndexDirection.ASC),
        ],
        unique=True,
    ),
    IndexSpec(keys=[("position", IndexDirection.ASC)], unique=True),
    IndexSpec(keys=[("aggregate_id", IndexDirection.ASC)]),
]
