"""Actor with its own event queue and worker thread."""

from __future__ import annotations

import abc
import logging
import threading
from collections import deque

from .events import Event, Priority, type_to_string
from .timer import Timer

log = logging.getLogger(__name__)


class ActiveObject(abc.ABC):
    """Owns a bounded event queue, a worker thread and a timer that posts back to it."""

    def __init__(self, name: str, queue_size: int = 10) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self.name = name
        self.queue_size = queue_size
        self._queue: deque[Event] = deque()
        self._cond = threading.Condition()
        self._dispatch_lock = threading.RLock()
        self._thread: threading.Thread | None = None
        self._running = False
        self.timer = Timer(f"{name}.timer", False, self._on_timer)

    def _on_timer(self, event: Event | None) -> None:
        if event is not None:
            self.post(event)

    @abc.abstractmethod
    def dispatch(self, event: Event) -> None:
        """Handle one event."""

    def start(self) -> bool:
        """Start the worker thread; return whether it is running."""
        with self._cond:
            if self._thread is None:
                self._running = True
                self._thread = threading.Thread(
                    target=self._event_loop, name=self.name, daemon=True
                )
                self._thread.start()
            return self._thread.is_alive()

    def stop(self) -> None:
        """Stop the worker thread and the timer."""
        self.timer.close()
        with self._cond:
            self._running = False
            thread, self._thread = self._thread, None
            self._cond.notify_all()
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def __enter__(self) -> "ActiveObject":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def post(self, event: Event) -> None:
        """Queue an event, waiting for room if the queue is full."""
        if event is None:
            raise ValueError("cannot post None")
        with self._cond:
            self._cond.wait_for(lambda: len(self._queue) < self.queue_size)
            self._queue.append(event)
            self._cond.notify_all()

    def post_isr(self, event: Event) -> bool:
        """Queue an event without waiting; return False if the queue was full."""
        if event is None:
            raise ValueError("cannot post None")
        with self._cond:
            if len(self._queue) >= self.queue_size:
                return False
            self._queue.append(event)
            self._cond.notify_all()
            return True

    def peek(self) -> Event | None:
        """Return the event at the front of the queue without removing it."""
        with self._cond:
            return self._queue[0] if self._queue else None

    def __len__(self) -> int:
        with self._cond:
            return len(self._queue)

    def process_pending(self) -> int:
        """Run one pass over the priorities, handling the front event when it matches.

        Returns the number of events handled in this pass.
        """
        handled = 0
        with self._dispatch_lock:
            for priority in Priority:
                with self._cond:
                    if not self._queue or self._queue[0].priority != priority:
                        continue
                    event = self._queue.popleft()
                    self._cond.notify_all()
                log.debug(
                    "[%s] Handling Event: %s (Priority: %d)",
                    self.name,
                    type_to_string(event.event_type),
                    int(event.priority),
                )
                self.dispatch(event)
                handled += 1
        return handled

    def _event_loop(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._queue or not self._running)
                if not self._running:
                    return
            try:
                self.process_pending()
            except Exception:
                log.exception("[%s] dispatch failed", self.name)