"""One-shot or auto-reloading software timer that hands a stored event to a callback."""

from __future__ import annotations

import threading
from typing import Callable

from .events import Event


class Timer:
    """Delivers the event given to :meth:`start` to the callback when the period expires.

    The event is delivered only once; an auto-reloading timer keeps running
    afterwards but has nothing more to deliver until started with a new event.
    """

    def __init__(
        self,
        name: str,
        auto_reload: bool,
        callback: Callable[[Event], object] | None,
        identify: int = 0,
    ) -> None:
        self.name = name
        self.auto_reload = auto_reload
        self.callback = callback
        self.identify = identify
        self._period = 1.0
        self._event: Event | None = None
        self._lock = threading.Lock()
        self._thread: threading.Timer | None = None
        self._generation = 0
        self._closed = False

    @property
    def period(self) -> float:
        """Current period in seconds."""
        return self._period

    @property
    def active(self) -> bool:
        """Whether the timer is running."""
        with self._lock:
            return self._thread is not None

    def start(self, duration: float, event: Event | None = None) -> None:
        """(Re)start the timer with a period in seconds and the event to deliver."""
        if duration <= 0:
            raise ValueError("timer duration must be positive")
        with self._lock:
            self._event = event
            self._period = duration
            self._arm()

    def stop(self) -> None:
        """Stop the timer; a pending event stays stored."""
        with self._lock:
            self._disarm()

    def reset(self) -> None:
        """Restart the timer from now with its current period."""
        with self._lock:
            self._arm()

    def close(self) -> None:
        """Stop the timer for good; later starts have no effect."""
        with self._lock:
            self._disarm()
            self._closed = True
            self._event = None

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _disarm(self) -> None:
        self._generation += 1
        if self._thread is not None:
            self._thread.cancel()
            self._thread = None

    def _arm(self) -> None:
        if self._closed:
            return
        self._disarm()
        thread = threading.Timer(self._period, self._expire, args=(self._generation,))
        thread.daemon = True
        thread.name = self.name
        self._thread = thread
        thread.start()

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._closed:
                return
            callback = self.callback
            event = None
            if callback is not None:
                event, self._event = self._event, None
            if self.auto_reload:
                self._arm()
            else:
                self._thread = None
        if callback is not None and event is not None:
            callback(event)