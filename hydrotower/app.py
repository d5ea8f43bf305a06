"""The tower application: sensor, display, logger, buttons and Wi-Fi actors wired together."""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass
from enum import Enum

from .active_object import ActiveObject
from .button import ButtonActor
from .events import (
    Event,
    EventBus,
    EventType,
    MeasurementEvent,
    OnStart,
    ScreenRefreshEvent,
    get_event_bus,
)
from .wifi import SimulatedRadio, WiFiActor

log = logging.getLogger(__name__)

SENSOR_PERIOD = 1.5
DISPLAY_REFRESH_PERIOD = 2.5
MEASUREMENT_VALUE = 42.0
BUTTON_PINS = (1, 2, 3, 10)
SSID = "MySSID"
PASSWORD = "password"
_SETTLE_DELAY = 0.1
_START_GAP = 0.005


class State(Enum):
    INIT = "init"
    IDLE = "idle"
    ACTIVE = "active"


class SensorActor(ActiveObject):
    """Publishes a measurement on the bus every sensor period once started."""

    def __init__(self, bus: EventBus | None = None) -> None:
        super().__init__("Sensor", queue_size=10)
        self.bus = bus if bus is not None else get_event_bus()
        self.state = State.INIT

    def dispatch(self, event: Event) -> None:
        if event.event_type is not EventType.ON_START:
            return
        if self.state is State.INIT:
            print("[Sensor] INIT -> IDLE")
            self.state = State.IDLE
            self.timer.start(SENSOR_PERIOD, OnStart())
        elif self.state is State.IDLE:
            print("[Sensor] IDLE -> ACTIVE")
            self.state = State.ACTIVE
            self.bus.publish(MeasurementEvent(MEASUREMENT_VALUE))
            self.state = State.IDLE
            self.timer.start(SENSOR_PERIOD, OnStart())


class DisplayActor(ActiveObject):
    """Shows measurements and refreshes its screen periodically."""

    def __init__(self) -> None:
        super().__init__("Display", queue_size=10)
        self.state = State.INIT
        self.last_value: float | None = None

    def dispatch(self, event: Event) -> None:
        if event.event_type is EventType.SCREEN_REFRESH:
            print("[Display] 🔄 Refresh triggered")
            self.timer.start(DISPLAY_REFRESH_PERIOD, ScreenRefreshEvent())
            return
        if self.state is State.INIT:
            if event.event_type is EventType.ON_START:
                print("[Display] INIT -> IDLE")
                self.state = State.IDLE
                self.timer.start(DISPLAY_REFRESH_PERIOD, ScreenRefreshEvent())
        elif self.state is State.IDLE:
            if event.event_type is EventType.MEASUREMENT:
                print("[Display] IDLE -> ACTIVE")
                self.state = State.ACTIVE
                self.last_value = event.value
                print(f"📟 Display: {event.value:.2f}")
                self.state = State.IDLE


class LoggerActor(ActiveObject):
    """Records every measurement it receives."""

    def __init__(self) -> None:
        super().__init__("Logger", queue_size=10)
        self.values: list[float] = []

    def dispatch(self, event: Event) -> None:
        if event.event_type is EventType.MEASUREMENT:
            self.values.append(event.value)
            print(f"[Logger] 📝 Value logged: {event.value:.2f}")


@dataclass
class Application:
    """The running set of actors."""

    wifi: WiFiActor
    sensor: SensorActor
    display: DisplayActor
    logger: LoggerActor
    buttons: tuple[ButtonActor, ...]

    @property
    def actors(self) -> tuple[ActiveObject, ...]:
        return (self.wifi, self.sensor, self.display, self.logger, *self.buttons)

    def stop(self) -> None:
        """Stop every actor."""
        for actor in self.actors:
            actor.stop()


def app_start(bus: EventBus | None = None, radio: SimulatedRadio | None = None) -> Application:
    """Create the actors, subscribe them to the bus, start them and kick off Wi-Fi."""
    bus = bus if bus is not None else get_event_bus()
    wifi = WiFiActor(radio=radio)
    sensor = SensorActor(bus)
    display = DisplayActor()
    logger = LoggerActor()
    buttons = tuple(ButtonActor(pin) for pin in BUTTON_PINS)
    app = Application(wifi, sensor, display, logger, buttons)

    wifi.configure(SSID, PASSWORD)

    bus.subscribe(EventType.MEASUREMENT, display.post)
    bus.subscribe(EventType.MEASUREMENT, logger.post)

    time.sleep(_SETTLE_DELAY)
    for actor in app.actors:
        actor.start()
        time.sleep(_START_GAP)

    wifi.post(OnStart("App"))
    return app


def main(argv=None) -> int:
    """Run the application until interrupted or for the given duration."""
    parser = argparse.ArgumentParser(
        prog="hydrotower", description="Run the hydroponic tower actors."
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="seconds to run; runs until interrupted when omitted",
    )
    args = parser.parse_args(argv)
    if args.duration is not None and args.duration < 0:
        parser.error("--duration must not be negative")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    log.info("System initialized")
    app = app_start()
    try:
        if args.duration is None:
            while True:
                time.sleep(1.0)
        else:
            time.sleep(args.duration)
    except KeyboardInterrupt:
        pass
    finally:
        app.stop()
    return 0