import logging
from abc import ABC, abstractmethod
from typing import Type, TypeVar
from splitledger.core.utils import format_units
from splitledger.schemas.events import LedgerEvent

logger = logging.getLogger("splitledger.events")

E = TypeVar("E", bound=LedgerEvent)

_AMOUNT_FIELDS = ("amount", "total_amount")


class NotificationSink(ABC):
    @abstractmethod
    def emit(self, event: LedgerEvent) -> None: ...


class LoggingNotificationSink(NotificationSink):
    def emit(self, event: LedgerEvent) -> None:
        payload = event.model_dump(exclude={"emitted_at", "group_id"})

        for key in _AMOUNT_FIELDS:
            if key in payload:
                payload[key] = format_units(payload[key])

        logger.info("%s group=%s %s", event.name, event.group_id, payload)


class EventLog(NotificationSink):
    """Keeps every event in memory, in emission order."""

    def __init__(self):
        self.events: list[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self):
        self.events.clear()
