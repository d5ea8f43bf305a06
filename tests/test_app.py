import time

import pytest

from hydrotower.app import (
    DISPLAY_REFRESH_PERIOD,
    MEASUREMENT_VALUE,
    SENSOR_PERIOD,
    SSID,
    DisplayActor,
    LoggerActor,
    SensorActor,
    State,
    app_start,
    main,
)
from hydrotower.events import (
    EventBus,
    EventType,
    MeasurementEvent,
    OnStart,
    ScreenRefreshEvent,
)
from hydrotower.wifi import SimulatedRadio, WiFiState


def _wait_until(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_sensor_first_start_arms_timer():
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.MEASUREMENT, seen.append)
    sensor = SensorActor(bus)
    try:
        sensor.dispatch(OnStart())
        assert sensor.state is State.IDLE
        assert seen == []
        assert sensor.timer.active
        assert sensor.timer.period == SENSOR_PERIOD
    finally:
        sensor.stop()


def test_sensor_publishes_measurement_when_idle():
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.MEASUREMENT, seen.append)
    sensor = SensorActor(bus)
    try:
        sensor.dispatch(OnStart())
        sensor.dispatch(OnStart())
        assert [event.value for event in seen] == [MEASUREMENT_VALUE]
        assert sensor.state is State.IDLE
    finally:
        sensor.stop()


def test_sensor_ignores_other_events():
    sensor = SensorActor(EventBus())
    try:
        sensor.dispatch(MeasurementEvent(1.0))
        assert sensor.state is State.INIT
        assert not sensor.timer.active
    finally:
        sensor.stop()


def test_display_ignores_measurement_before_start():
    display = DisplayActor()
    try:
        display.dispatch(MeasurementEvent(3.25))
        assert display.last_value is None
        assert display.state is State.INIT
    finally:
        display.stop()


def test_display_shows_measurement_when_idle(capsys):
    display = DisplayActor()
    try:
        display.dispatch(OnStart())
        assert display.state is State.IDLE
        assert display.timer.period == DISPLAY_REFRESH_PERIOD
        display.dispatch(MeasurementEvent(3.25))
        assert display.last_value == 3.25
        assert "📟 Display: 3.25" in capsys.readouterr().out
    finally:
        display.stop()


def test_display_refresh_in_any_state(capsys):
    display = DisplayActor()
    try:
        display.dispatch(ScreenRefreshEvent())
        assert display.state is State.INIT
        assert display.timer.active
        assert "Refresh triggered" in capsys.readouterr().out
    finally:
        display.stop()


def test_logger_records_measurements(capsys):
    logger = LoggerActor()
    try:
        logger.dispatch(MeasurementEvent(3.25))
        logger.dispatch(OnStart())
        assert logger.values == [3.25]
        assert "Value logged: 3.25" in capsys.readouterr().out
    finally:
        logger.stop()


def test_app_start_wires_actors():
    bus = EventBus()
    radio = SimulatedRadio()
    app = app_start(bus, radio)
    try:
        assert radio.ssid == SSID
        assert _wait_until(lambda: app.wifi.state is WiFiState.CONNECTING)
        assert len(app.buttons) == 4
        assert bus.publish(MeasurementEvent(7.5)) == 2
        assert _wait_until(lambda: app.logger.values == [7.5])
        assert app.display.last_value is None
    finally:
        app.stop()


def test_main_runs_for_duration():
    assert main(["--duration", "0"]) == 0


def test_main_rejects_negative_duration():
    with pytest.raises(SystemExit):
        main(["--duration", "-1"])