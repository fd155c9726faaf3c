"""Exceptions raised by the ledger domain and its infrastructure."""

from dataclasses import dataclass


class LedgerError(Exception):
    """Base class for every error raised by condoledger."""


class InvalidArgumentError(LedgerError, ValueError):
    """Raised when a value object or command receives malformed input."""


class CurrencyMismatchError(InvalidArgumentError):
    """Raised when two amounts in different currencies are combined."""

    def __init__(self, left: str, right: str):
        super().__init__(f"Currency mismatch: cannot combine {left} with {right}.")
        self.left = left
        self.right = right


class DomainRuleViolation(LedgerError):
    """Raised when a command would break a business rule of an aggregate."""


class InsufficientFundsError(DomainRuleViolation):
    def __init__(self, message: str = "Insufficient funds."):
        super().__init__(message)


class AggregateNotFoundError(DomainRuleViolation):
    def __init__(self, aggregate_type: str, aggregate_id: object):
        super().__init__(f"{aggregate_type} {aggregate_id} not found.")
        self.aggregate_type = aggregate_type
        self.aggregate_id = str(aggregate_id)


class EventStreamError(LedgerError):
    """Raised when an event stream cannot be applied to an aggregate."""


class UnrecognizedEventError(EventStreamError):
    """Raised when an aggregate is asked to apply an event type it does not know."""


class DeserializationError(LedgerError):
    """Raised when a stored record cannot be turned back into a domain event."""


class UnknownEventTypeError(DeserializationError):
    def __init__(self, event_type: str):
        super().__init__(f"Unknown event type: {event_type}")
        self.event_type = event_type


class ConcurrencyError(LedgerError):
    """Raised when an optimistic concurrency check fails.

    Another writer appended to the aggregate's stream between the moment
    it was loaded and the moment its new events were saved.
    """


class StorageError(LedgerError):
    """Raised when a storage backend fails to read or write."""


@dataclass(frozen=True)
class ProjectionFailure:
    projector: str
    event_id: str
    event_type: str
    position: int
    error: Exception


class ProjectionError(LedgerError):
    """Raised after a projection batch in which one or more projectors failed."""

    def __init__(self, failures: list[ProjectionFailure]):
        self.failures = list(failures)
        summary = "; ".join(
            f"{f.projector} on {f.event_type} ({f.event_id}): {f.error}" for f in self.failures
        )
        super().__init__(f"{len(self.failures)} projection failure(s): {summary}")
