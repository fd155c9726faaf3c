"""Payload schema versioning for stored events.

Stored payloads keep the schema version they were written with. When an
event class raises its ``schema_version``, register one ``PayloadUpcaster``
per step (v1 to v2, v2 to v3, ...) and the deserializer walks the chain
before handing the payload to ``from_primitives``.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ...domain.exceptions import DeserializationError


class PayloadUpcaster(ABC):
    """Transforms one event type's payload from one schema version to the next.

    Example:
        >>> class OwnerCreatedV1ToV2(PayloadUpcaster):
        ...     event_type = "OwnerCreated"
        ...     source_version = 1
        ...
        ...     def upcast(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...         return {**payload, "phoneNumber": payload.get("phone")}
    """

    event_type: ClassVar[str]
    source_version: ClassVar[int]

    @property
    def target_version(self) -> int:
        return self.source_version + 1

    @abstractmethod
    def upcast(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...


class UpcasterChain:
    @staticmethod
    def from_upcasters(upcasters: list[PayloadUpcaster]) -> "UpcasterChain":
        chain = UpcasterChain()
        for upcaster in upcasters:
            chain.register(upcaster)
        return chain

    def __init__(self) -> None:
        self.upcasters: dict[tuple[str, int], PayloadUpcaster] = {}

    def register(self, upcaster: PayloadUpcaster) -> None:
        key = (upcaster.event_type, upcaster.source_version)
        if key in self.upcasters:
            raise ValueError(
                f"An upcaster for {upcaster.event_type} v{upcaster.source_version} "
                "is already registered"
            )
        self.upcasters[key] = upcaster

    def upcast(
        self,
        event_type: str,
        payload: dict[str, Any],
        from_version: int,
        to_version: int,
    ) -> dict[str, Any]:
        """Bring a payload from ``from_version`` up to ``to_version``.

        Raises:
            DeserializationError: If a step of the chain is missing or the
                stored version is newer than the code knows about.
        """
        if from_version > to_version:
            raise DeserializationError(
                f"{event_type} payload has schema version {from_version}, "
                f"newer than the supported version {to_version}"
            )
        version = from_version
        while version < to_version:
            upcaster = self.upcasters.get((event_type, version))
            if upcaster is None:
                raise DeserializationError(
                    f"No upcaster registered for {event_type} v{version} -> v{version + 1}"
                )
            payload = upcaster.upcast(dict(payload))
            version = upcaster.target_version
        return payload
