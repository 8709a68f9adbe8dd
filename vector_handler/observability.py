"""Event primitives and dispatcher for vector handler observability."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from typing import Any, Dict, Optional, Tuple

Payload = Dict[str, Any]
EventObserver = Callable[["ServiceEvent"], None]

LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(slots=True, frozen=True)
class ServiceEvent:
    """Event emitted by the generator, the stores and the handler."""

    timestamp: datetime
    service: str
    name: str
    payload: Payload = field(default_factory=dict)


class EventRecorder:
    """Dispatches service events to registered observers."""

    __slots__ = ("_service_path", "_observers", "_lock")

    def __init__(
        self,
        service: Sequence[str] | str | None = None,
        *,
        parent: "EventRecorder" | None = None,
    ) -> None:
        path = self._normalize_service_path(service)
        if parent is None:
            self._observers: list[EventObserver] = []
            self._lock = RLock()
            self._service_path: Tuple[str, ...] = path
        else:
            # Children share the parent's observer list.
            self._observers = parent._observers
            self._lock = parent._lock
            self._service_path = parent._service_path + path

    @staticmethod
    def _normalize_service_path(
        service: Sequence[str] | str | None,
    ) -> Tuple[str, ...]:
        if service is None:
            return ()
        if isinstance(service, str):
            return tuple(part for part in service.split(".") if part)
        return tuple(part for part in service if part)

    @property
    def service(self) -> str:
        return ".".join(self._service_path)

    def scoped(self, service: Sequence[str] | str) -> "EventRecorder":
        """Return a child recorder scoped to the given service."""
        return EventRecorder(service, parent=self)

    def register(self, observer: EventObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unregister(self, observer: EventObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def clear_observers(self) -> None:
        with self._lock:
            self._observers.clear()

    def record(
        self,
        name: str,
        payload: Payload | None = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> ServiceEvent:
        """Create an event and notify observers."""
        event = ServiceEvent(
            timestamp=timestamp or datetime.utcnow(),
            service=self.service,
            name=name,
            payload=dict(payload or {}),
        )
        with self._lock:
            observers = tuple(self._observers)
        for observer in observers:
            try:
                observer(event)
            except Exception:
                LOGGER.exception("Event observer failed for %s.%s", event.service, name)
        return event


_GLOBAL_RECORDER = EventRecorder()


def get_event_recorder(service: Sequence[str] | str | None = None) -> EventRecorder:
    """Return the global event recorder or a scoped variant."""
    if service is None:
        return _GLOBAL_RECORDER
    return _GLOBAL_RECORDER.scoped(service)


def logging_observer(event: ServiceEvent) -> None:
    """Forward service events to the standard logging module."""
    logger = logging.getLogger(f"vector_handler.events.{event.service}")
    if event.name.endswith(".error"):
        logger.warning("%s %s", event.name, event.payload)
    elif event.name.endswith(".complete"):
        logger.info("%s %s", event.name, event.payload)
    else:
        logger.debug("%s %s", event.name, event.payload)


def configure_logging(level: str = "INFO", *, enable_events: bool = True) -> None:
    """Configure root logging and optionally mirror service events into it."""
    logging.basicConfig(level=level.upper(), format=DEFAULT_LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
    recorder = get_event_recorder()
    if enable_events:
        recorder.register(logging_observer)
    else:
        recorder.unregister(logging_observer)


__all__ = [
    "EventObserver",
    "EventRecorder",
    "ServiceEvent",
    "configure_logging",
    "get_event_recorder",
    "logging_observer",
]
