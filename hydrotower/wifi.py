"""Wi-Fi station actor with retry logic, and the outgoing payload queue."""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import Callable

from .active_object import ActiveObject
from .events import (
    Event,
    EventType,
    WiFiConnectedEvent,
    WiFiDisconnectedEvent,
    WiFiFailedEvent,
    WiFiRestoredEvent,
    type_to_string,
)

log = logging.getLogger(__name__)

SSID_MAX_BYTES = 32
PASSWORD_MAX_BYTES = 64

_STOP = object()


class WiFiComm:
    """Queues outgoing payloads and sends them from a worker thread."""

    def __init__(self, sink: Callable[[str], object] | None = None, queue_size: int = 10) -> None:
        self._sink = sink
        self._queue: queue.Queue = queue.Queue(maxsize=queue_size)
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the sending thread."""
        if self._thread is None:
            self._thread = threading.Thread(
                target=self._task_loop, name="WiFiCommTask", daemon=True
            )
            self._thread.start()

    def send(self, payload: str) -> bool:
        """Queue a payload; return False if the queue was full and it was dropped."""
        try:
            self._queue.put_nowait(payload)
        except queue.Full:
            log.warning("Queue full, message dropped")
            return False
        log.info("Queued: %s", payload)
        return True

    def stop(self) -> None:
        """Send what is queued, then stop the sending thread."""
        thread, self._thread = self._thread, None
        if thread is None:
            return
        self._queue.put(_STOP)
        thread.join()

    def _task_loop(self) -> None:
        while True:
            payload = self._queue.get()
            if payload is _STOP:
                return
            log.info("Sending: %s", payload)
            if self._sink is not None:
                try:
                    self._sink(payload)
                except Exception:
                    log.exception("sending payload failed")


class StationEvent(Enum):
    """Notifications that the radio driver reports to the actor."""

    STA_START = "sta_start"
    STA_DISCONNECTED = "sta_disconnected"
    GOT_IP = "got_ip"


class WiFiState(Enum):
    INIT = "init"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


def _truncate(text: str, limit: int) -> str:
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


class SimulatedRadio:
    """Station radio that records its configuration and the requests made of it."""

    def __init__(self) -> None:
        self.ssid = ""
        self.passphrase = ""
        self.auth_mode: str | None = None
        self.initialized = True
        self.started = False
        self.connect_attempts = 0
        self.disconnects = 0
        self.shutdowns = 0

    def configure(self, ssid: str, password: str) -> None:
        """Set station mode with the given network and start the radio."""
        self.ssid = _truncate(ssid, SSID_MAX_BYTES)
        self.passphrase = _truncate(password, PASSWORD_MAX_BYTES)
        self.auth_mode = "WPA2_PSK"
        self.initialized = True
        self.started = True

    def connect(self) -> None:
        self.connect_attempts += 1

    def disconnect(self) -> None:
        self.disconnects += 1

    def shutdown(self) -> None:
        self.started = False
        self.initialized = False
        self.shutdowns += 1


class WiFiActor(ActiveObject):
    """Drives the station connection, retrying lost connections a bounded number of times."""

    MAX_RETRIES = 5

    def __init__(self, radio: SimulatedRadio | None = None, comm: WiFiComm | None = None) -> None:
        super().__init__("WiFi", queue_size=10)
        self.radio = radio if radio is not None else SimulatedRadio()
        self.comm = comm if comm is not None else WiFiComm()
        self.ssid = ""
        self._station_config = ("", "")
        self.connected = False
        self.ip: str | None = None
        self.state = WiFiState.INIT
        self.retries = 0
        self.comm.start()

    def configure(self, ssid: str, password: str) -> None:
        """Store the network, configure the radio and start connecting."""
        self.ssid = ssid
        self._station_config = (ssid, password)
        self.radio.configure(ssid, password)
        self.radio.connect()
        log.info("WiFi configured with SSID: %s", ssid)

    def disconnect(self) -> None:
        self.radio.disconnect()
        log.info("Disconnected manually")

    def shutdown(self) -> None:
        self.radio.shutdown()
        log.info("WiFi shut down")

    def send_payload(self, payload: str) -> bool:
        """Queue a payload for sending; return False if it was dropped."""
        return self.comm.send(payload)

    def stop(self) -> None:
        super().stop()
        self.comm.stop()

    def on_station_event(self, kind: StationEvent, ip: str | None = None) -> None:
        """Translate a radio notification into an event posted to this actor."""
        if kind is StationEvent.STA_START:
            log.info("WiFi STA Start → waiting for connect...")
        elif kind is StationEvent.STA_DISCONNECTED:
            log.warning("WiFi Disconnected → Posting Event")
            self.connected = False
            self.post(WiFiDisconnectedEvent())
        elif kind is StationEvent.GOT_IP:
            log.info("WiFi Connected → Got IP")
            self.connected = True
            self.ip = ip
            self.post(WiFiConnectedEvent())

    def _retry_or_fail(self) -> None:
        if self.retries < self.MAX_RETRIES:
            self.retries += 1
            print(f"[WiFi] 🔁 Retry #{self.retries}...")
            self.state = WiFiState.CONNECTING
            self.radio.connect()
        else:
            print("[WiFi] ❌ Max retries reached → FAILED")
            self.state = WiFiState.FAILED
            self.retries = 0
            self.post(WiFiFailedEvent("WiFi"))

    def _shut_down_to_init(self) -> None:
        self.shutdown()
        self.state = WiFiState.INIT
        self.retries = 0

    def dispatch(self, event: Event) -> None:
        kind = event.event_type
        if self.state is WiFiState.INIT:
            if kind is EventType.ON_START:
                print("[WiFi] INIT → CONNECTING")
                self.state = WiFiState.CONNECTING
                self.configure(*self._station_config)
        elif self.state is WiFiState.CONNECTING:
            if kind is EventType.WIFI_CONNECTED:
                print("[WiFi] ✅ Connected")
                self.state = WiFiState.CONNECTED
                if self.retries > 0:
                    self.post(WiFiRestoredEvent("WiFi"))
                self.retries = 0
            elif kind is EventType.WIFI_DISCONNECTED:
                print("[WiFi] ❌ Disconnected while connecting")
                self._retry_or_fail()
            elif kind is EventType.WIFI_SHUTDOWN:
                print("[WiFi] 🔻 Shutdown while connecting")
                self._shut_down_to_init()
        elif self.state is WiFiState.CONNECTED:
            if kind is EventType.WIFI_GOT_IP:
                print(f"[WiFi] 📡 Got IP: {event.ip}")
            elif kind is EventType.WIFI_DISCONNECTED:
                print("[WiFi] ⚠️ Connection lost")
                self._retry_or_fail()
            elif kind is EventType.WIFI_DISCONNECTED_BY_REQUEST:
                print("[WiFi] 🔌 Disconnected manually")
                self.disconnect()
                self.state = WiFiState.INIT
                self.retries = 0
            elif kind is EventType.WIFI_SHUTDOWN:
                print("[WiFi] 🔻 Shutdown requested")
                self._shut_down_to_init()
        else:
            print(f"[WiFi] ⛔ Ignoring event in FAILED state: {type_to_string(kind)}")