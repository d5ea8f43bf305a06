"""Push-button actor that turns pin level changes into click or reset events."""

from __future__ import annotations

from .active_object import ActiveObject
from .events import ButtonClicked, Event, EventType, SystemResetEvent

PRESS_THRESHOLD_MS = 500


class ButtonActor(ActiveObject):
    """Watches one input pin (active low) and reports short and long presses.

    A press shorter than the threshold posts a :class:`ButtonClicked`; a press
    at least as long posts a :class:`SystemResetEvent`.
    """

    def __init__(self, pin: int, threshold_ms: int = PRESS_THRESHOLD_MS) -> None:
        super().__init__("Button", queue_size=10)
        self.pin = pin
        self.threshold_ms = threshold_ms
        self._press_start_ms = 0
        self._waiting_release = False

    @property
    def pressed(self) -> bool:
        """Whether a press has been seen and its release is awaited."""
        return self._waiting_release

    def on_level(self, level: int, now_ms: int) -> Event | None:
        """Feed a pin level change observed at ``now_ms``.

        Returns the event that was queued, or None when the change produced no
        event or the queue had no room for it.
        """
        event: Event | None = None
        if level == 0 and not self._waiting_release:
            self._press_start_ms = now_ms
            self._waiting_release = True
        elif level == 1 and self._waiting_release:
            duration = now_ms - self._press_start_ms
            self._waiting_release = False
            if duration >= self.threshold_ms:
                event = SystemResetEvent("LongPress")
            else:
                event = ButtonClicked(self.pin, 1, "ShortPress")
        if event is None:
            return None
        return event if self.post_isr(event) else None

    def dispatch(self, event: Event) -> None:
        if event.event_type is EventType.BUTTON_CLICKED:
            print(f"[Button GPIO{event.button_id}] Short Press")
        elif event.event_type is EventType.SYSTEM_RESET:
            print("[Button] Long Press → SYSTEM RESET requested")