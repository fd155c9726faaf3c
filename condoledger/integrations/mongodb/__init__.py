"""MongoDB backend for condoledger.

Usage:
    >>> from condoledger.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoEventStore,
    ...     MongoReadModelStore,
    ... )
    >>>
    >>> config = MongoConfiguration(uri="mongodb://localhost:27017", database="condominiums")
    >>> event_store = MongoEventStore(config)
    >>> await event_store.initialize_schema()
    >>> read_models = MongoReadModelStore(config)
"""

from .config import MongoConfiguration
from .event_store import MongoEventStore, translate_error
from .indexes import IndexDirection, IndexSpec
from .read_models import MongoReadModelStore

__all__ = [
    "MongoConfiguration",
    "MongoEventStore",
    "MongoReadModelStore",
    "IndexDirection",
    "IndexSpec",
    "translate_error",
]
