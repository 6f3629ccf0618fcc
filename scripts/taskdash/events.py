"""
Merged event stream for the render loop.

Two producer threads push into a single FIFO queue:
- the key poller waits up to one tick interval for a key press and
  forwards every key as soon as it arrives;
- the ticker emits one Tick per interval, measured from the previous tick.

The consumer (the render loop) pulls events one at a time with next().
"""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from taskdash.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_TICK_RATE = 0.2


@dataclass(frozen=True)
class Input:
    """A key press, already decoded to a key name such as "q" or "down"."""

    key: str


@dataclass(frozen=True)
class Tick:
    """Periodic timer event."""


Event = Union[Input, Tick]

KeyPoller = Callable[[float], Optional[str]]


class EventSource:
    """Key poller and ticker threads feeding one ordered queue."""

    def __init__(
        self,
        poll_key: KeyPoller,
        tick_rate: float = DEFAULT_TICK_RATE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._poll_key = poll_key
        self._tick_rate = tick_rate
        self._clock = clock
        self._queue: "queue.Queue[Event]" = queue.Queue()
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    def start(self) -> None:
        """Start both producer threads. Calling twice is a no-op."""
        if self._threads:
            return
        self._threads = [
            threading.Thread(target=self._poll_keys, name="taskdash-keys", daemon=True),
            threading.Thread(target=self._tick, name="taskdash-ticker", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask both producers to finish and wait for them."""
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout if timeout is not None else self._tick_rate * 2)

    def next(self, timeout: float | None = None) -> Event:
        """Block until the next event is available."""
        return self._queue.get(timeout=timeout)

    def _poll_keys(self) -> None:
        while not self._stop.is_set():
            try:
                key = self._poll_key(self._tick_rate)
            except Exception:
                logger.exception("Key polling failed; keyboard input disabled")
                return
            if key is not None:
                self._queue.put(Input(key))

    def _tick(self) -> None:
        last_tick = self._clock()
        while True:
            timeout = max(self._tick_rate - (self._clock() - last_tick), 0.0)
            if self._stop.wait(timeout):
                return
            if self._clock() - last_tick >= self._tick_rate:
                self._queue.put(Tick())
                last_tick = self._clock()
