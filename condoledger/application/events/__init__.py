from .registry import LEDGER_EVENT_TYPES
from .serialization import EventDeserializer, EventSerializer, EventTypeMap, SerializedEvent
from .store import EventRecord, EventStore, InMemoryEventStore, StoredEvent
from .upcasting import PayloadUpcaster, UpcasterChain

__all__ = [
    "LEDGER_EVENT_TYPES",
    "EventDeserializer",
    "EventSerializer",
    "EventTypeMap",
    "SerializedEvent",
    "EventRecord",
    "EventStore",
    "InMemoryEventStore",
    "StoredEvent",
    "PayloadUpcaster",
    "UpcasterChain",
]
