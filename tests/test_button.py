import pytest

from hydrotower.button import PRESS_THRESHOLD_MS, ButtonActor
from hydrotower.events import ButtonClicked, EventType, SystemResetEvent


@pytest.fixture
def button():
    actor = ButtonActor(4)
    yield actor
    actor.stop()


def test_short_press_posts_click(button):
    assert button.on_level(0, 1000) is None
    assert button.pressed
    event = button.on_level(1, 1100)
    assert isinstance(event, ButtonClicked)
    assert event.button_id == 4
    assert event.state == 1
    assert event.source == "ShortPress"
    assert not button.pressed
    assert button.peek() is event
    assert len(button) == 1


def test_long_press_posts_reset(button):
    button.on_level(0, 0)
    event = button.on_level(1, PRESS_THRESHOLD_MS * 3)
    assert isinstance(event, SystemResetEvent)
    assert event.source == "LongPress"
    assert event.event_type is EventType.SYSTEM_RESET


def test_threshold_is_inclusive(button):
    button.on_level(0, 0)
    long_press = button.on_level(1, PRESS_THRESHOLD_MS)
    assert long_press.event_type is EventType.SYSTEM_RESET
    assert long_press.source == "LongPress"
    button.on_level(0, 0)
    short_press = button.on_level(1, PRESS_THRESHOLD_MS - 1)
    assert short_press.source == "ShortPress"
    assert short_press.button_id == 4


def test_release_without_press_is_ignored(button):
    assert button.on_level(1, 50) is None
    assert len(button) == 0


def test_repeated_press_keeps_first_start(button):
    assert button.on_level(0, 0) is None
    assert button.on_level(0, PRESS_THRESHOLD_MS - 1) is None
    event = button.on_level(1, PRESS_THRESHOLD_MS)
    assert event.event_type is EventType.SYSTEM_RESET
    assert event.source == "LongPress"


def test_full_queue_drops_event(button):
    for step in range(button.queue_size):
        button.on_level(0, step * 10)
        assert button.on_level(1, step * 10 + 1) is not None
    button.on_level(0, 5000)
    assert button.on_level(1, 5001) is None
    assert len(button) == button.queue_size


def test_dispatch_short_press_output(button, capsys):
    button.dispatch(ButtonClicked(4, 1, "ShortPress"))
    assert capsys.readouterr().out == "[Button GPIO4] Short Press\n"


def test_dispatch_long_press_output(button, capsys):
    button.dispatch(SystemResetEvent("LongPress"))
    assert "SYSTEM RESET requested" in capsys.readouterr().out


def test_process_pending_handles_queued_click(button, capsys):
    button.on_level(0, 0)
    button.on_level(1, 10)
    assert button.process_pending() == 1
    assert len(button) == 0
    assert "Short Press" in capsys.readouterr().out