# hydrotower

A small active-object framework and the controller application for a
hydroponic tower, with the network station simulated in software.

- `hydrotower.events` holds the event classes and the bus. The classes are
  `OnStart`, `MeasurementEvent`, `ScreenRefreshEvent`, `ButtonClicked`,
  `SystemResetEvent` and the Wi-Fi events. Each event gets a unique,
  increasing `id`. `EventBus.publish()` hands a fresh clone of the event to
  every handler subscribed to its `event_type` and returns how many
  handlers it called. `get_event_bus()` returns the process-wide bus.
- `hydrotower.timer.Timer` calls its callback with the stored event once
  its period, given in seconds, has expired.
- `hydrotower.active_object.ActiveObject` is an actor with a bounded event
  queue, a worker thread, and a `timer` that posts back into that queue.
- `hydrotower.button.ButtonActor` turns pin level changes, fed through
  `on_level(level, now_ms)`, into events. A press shorter than 500 ms
  becomes `ButtonClicked`. A longer press becomes `SystemResetEvent`.
- `hydrotower.wifi.WiFiActor` runs the station state machine:
  `INIT`, `CONNECTING`, `CONNECTED` and `FAILED`. It retries up to 5 times
  and drives a `SimulatedRadio`. Outgoing payloads go to a `WiFiComm`
  queue.
- `hydrotower.app` wires the sensor, display, logger, button and Wi-Fi
  actors together.

## Installing

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Running the controller

```
hydrotower
hydrotower --duration 10
```

This starts the Wi-Fi, sensor, display, logger and four button actors
against a `SimulatedRadio`. It then posts `OnStart` to the Wi-Fi actor.
The actors print their traces. The command runs until interrupted with
Ctrl+C, or for `--duration` seconds when given, and then stops every actor.

## Using the framework

```python
from hydrotower.active_object import ActiveObject
from hydrotower.events import EventType, MeasurementEvent, get_event_bus


class Printer(ActiveObject):
    def dispatch(self, event):
        if event.event_type is EventType.MEASUREMENT:
            print(f"value: {event.value:.2f}")


printer = Printer("Printer")
bus = get_event_bus()
bus.subscribe(EventType.MEASUREMENT, printer.post)
printer.start()

bus.publish(MeasurementEvent(42.0, source="Sensor"))
printer.stop()
```

`post()` waits for room when the queue is full. `post_isr()` never waits.
It returns `False` when the queue is full.

`process_pending()` lets you drive an actor step by step without starting
its worker thread. It makes one pass over the priorities, from `HIGH` to
`LOW`. In that pass it handles the event at the front of the queue
whenever that event's priority matches, and it returns the number of
events handled.

The whole application can also be assembled in code:

```python
from hydrotower.app import app_start
from hydrotower.events import EventBus
from hydrotower.wifi import SimulatedRadio

application = app_start(EventBus(), SimulatedRadio())
...
application.stop()
```

## What it does not do

- There is no real network or pin hardware behind the package.
  - `SimulatedRadio` only records what was asked of it: its configuration, connect attempts, disconnects and shutdowns. It never reports back by itself.
  - To move the Wi-Fi actor on from `CONNECTING`, feed it station notifications yourself with `WiFiActor.on_station_event(StationEvent.GOT_IP, ip)` or `StationEvent.STA_DISCONNECTED`.
  - Button presses come only from `ButtonActor.on_level()`.
- `WiFiComm` hands queued payloads to the optional `sink` callable given to it. Without one, it only logs them.
- `app_start()` posts `OnStart` to the Wi-Fi actor only. The sensor and display actors start their periodic measurements and screen refreshes only once they are sent an `OnStart` themselves.