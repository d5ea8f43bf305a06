"""Event types, the events posted between actors, and the publish/subscribe bus."""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from collections import defaultdict
from enum import Enum, IntEnum
from typing import Callable, ClassVar

log = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of event; each value is the event's display name."""

    ON_START = "OnStart"
    MEASUREMENT = "Measurement"
    SCREEN_REFRESH = "ScreenRefresh"
    BUTTON_CLICKED = "ButtonClicked"
    SYSTEM_RESET = "SystemReset"
    WIFI_CONNECTED = "WiFiConnected"
    WIFI_DISCONNECTED = "WiFiDisconnected"
    WIFI_CONNECTING = "WiFiConnecting"
    WIFI_RECONNECT = "WiFiReconnect"
    WIFI_RESTORED = "WiFiRestored"
    WIFI_FAILED = "WiFiFailed"
    WIFI_GOT_IP = "WiFiGotIP"
    WIFI_SHUTDOWN = "WiFiShutdown"
    WIFI_DISCONNECTED_BY_REQUEST = "WiFiDisconnectedByRequest"


class Priority(IntEnum):
    """Event priority; lower values are handled first within a pass."""

    HIGH = 0
    NORMAL = 1
    LOW = 2


_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def _next_id() -> int:
    with _id_lock:
        return next(_id_counter)


def type_to_string(event_type) -> str:
    """Return the display name of an event type, or "UnknownEventType"."""
    if isinstance(event_type, EventType):
        return event_type.value
    return "UnknownEventType"


class Event:
    """Base class of all events. Every new event receives a unique, increasing id."""

    event_type: ClassVar[EventType]
    priority: ClassVar[Priority] = Priority.NORMAL
    default_source: ClassVar[str] = "Unknown"

    def __init__(self, source: str | None = None) -> None:
        if not hasattr(type(self), "event_type"):
            raise TypeError(f"{type(self).__name__} does not define an event type")
        self.id = _next_id()
        self.source = self.default_source if source is None else source

    def _payload(self) -> tuple:
        return ()

    def clone(self) -> "Event":
        """Return a new event with the same payload and source and a fresh id."""
        return type(self)(*self._payload(), source=self.source)

    def __repr__(self) -> str:
        fields = ", ".join(repr(value) for value in self._payload())
        prefix = f"{fields}, " if fields else ""
        return f"{type(self).__name__}({prefix}source={self.source!r}) #{self.id}"


class OnStart(Event):
    event_type = EventType.ON_START


class MeasurementEvent(Event):
    event_type = EventType.MEASUREMENT

    def __init__(self, value: float, source: str | None = None) -> None:
        super().__init__(source)
        self.value = value

    def _payload(self) -> tuple:
        return (self.value,)


class ScreenRefreshEvent(Event):
    event_type = EventType.SCREEN_REFRESH
    priority = Priority.LOW


class ButtonClicked(Event):
    event_type = EventType.BUTTON_CLICKED

    def __init__(self, button_id: int, state: int, source: str | None = None) -> None:
        super().__init__(source)
        self.button_id = button_id
        self.state = state

    def _payload(self) -> tuple:
        return (self.button_id, self.state)


class SystemResetEvent(Event):
    event_type = EventType.SYSTEM_RESET


class WiFiConnectedEvent(Event):
    event_type = EventType.WIFI_CONNECTED
    default_source = "WiFi"


class WiFiDisconnectedEvent(Event):
    event_type = EventType.WIFI_DISCONNECTED
    default_source = "WiFi"


class WiFiConnectingEvent(Event):
    event_type = EventType.WIFI_CONNECTING
    default_source = "WiFi"


class WiFiReconnectEvent(Event):
    event_type = EventType.WIFI_RECONNECT

    def clone(self) -> "Event":
        """Return an exact copy, keeping the id."""
        return copy.copy(self)


class WiFiFailedEvent(Event):
    event_type = EventType.WIFI_FAILED

    def clone(self) -> "Event":
        """Return an exact copy, keeping the id."""
        return copy.copy(self)


class WiFiRestoredEvent(Event):
    event_type = EventType.WIFI_RESTORED

    def clone(self) -> "Event":
        """Return an exact copy, keeping the id."""
        return copy.copy(self)


class WiFiGotIPEvent(Event):
    event_type = EventType.WIFI_GOT_IP
    default_source = "WiFi"

    def __init__(self, ip: str, source: str | None = None) -> None:
        super().__init__(source)
        self.ip = ip

    def _payload(self) -> tuple:
        return (self.ip,)


class WiFiDisconnectedByRequestEvent(Event):
    # Reports itself as a plain disconnect.
    event_type = EventType.WIFI_DISCONNECTED
    default_source = "WiFi"


class WiFiShutdownEvent(Event):
    # Reports itself as a failure.
    event_type = EventType.WIFI_FAILED
    default_source = "WiFi"


Handler = Callable[[Event], object]


class EventBus:
    """Delivers a separate clone of each published event to every subscriber of its type."""

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        """Register a handler for one event type."""
        with self._lock:
            self._handlers[event_type].append(handler)

    def publish(self, event: Event) -> int:
        """Hand a clone of the event to each handler; return how many were called."""
        log.debug(
            "[Event:%05d] Publish %s from %s",
            event.id,
            type_to_string(event.event_type),
            event.source,
        )
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, ()))
        for index, handler in enumerate(handlers):
            cloned = event.clone()
            log.debug("[Event:%05d] Clone to handler %d", cloned.id, index)
            handler(cloned)
        log.debug("[Event:%05d] Delete original", event.id)
        return len(handlers)


_default_bus = EventBus()


def get_event_bus() -> EventBus:
    """Return the process-wide event bus."""
    return _default_bus