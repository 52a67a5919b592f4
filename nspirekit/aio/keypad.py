"""Listening for key presses and releases.

Keys are read from a key source: a callable returning the keys that are
held down right now. A :class:`KeypadListener` compares successive
readings and turns the differences into :class:`KeyEvent` items, which
every :class:`KeyStream` receives.
"""

from __future__ import annotations

import enum
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from nspirekit.aio.combinators import _PENDING, _Poll, _WakerSlot
from nspirekit.aio.timer import (
    TICKS_PER_SECOND,
    Clock,
    Interval,
    TimerListener,
    seconds_to_ticks,
)

DEFAULT_BUFFER = 100


class KeyState(enum.Enum):
    """Whether a key went down or came up."""

    PRESSED = "pressed"
    RELEASED = "released"


@dataclass(frozen=True)
class KeyEvent:
    """One press or release of a key, with the tick it was seen at."""

    key: Any
    state: KeyState
    tick_at: int


class _SharedKeyQueue:
    def __init__(self, size: int) -> None:
        self.size = size
        self.queue: deque[KeyEvent] = deque()
        self.waker = _WakerSlot()

    def push(self, event: KeyEvent) -> None:
        if len(self.queue) < self.size:
            self.queue.append(event)


class _KeypadState:
    def __init__(self, key_source: Callable[[], Iterable[Any]], clock) -> None:
        self.key_source = key_source
        self.clock = clock
        self.queues: list[weakref.ref[_SharedKeyQueue]] = []
        self.keys: list[Any] = []

    def add_queue(self, queue: _SharedKeyQueue) -> None:
        self.queues.append(weakref.ref(queue))

    def _live_queues(self) -> list[_SharedKeyQueue]:
        live = [q for q in (ref() for ref in self.queues) if q is not None]
        self.queues = [weakref.ref(q) for q in live]
        return live

    def _broadcast(self, queues, event: KeyEvent) -> None:
        for queue in queues:
            queue.push(event)

    def poll(self) -> None:
        queues = self._live_queues()
        if not queues:
            return
        keys = self.keys
        retain = 0
        change = False
        for key in self.key_source():
            index = next((i for i, other in enumerate(keys) if other == key), None)
            if index is not None:
                if index > retain:
                    keys[retain], keys[index] = keys[index], keys[retain]
            else:
                change = True
                keys.append(key)
                self._broadcast(
                    queues, KeyEvent(key, KeyState.PRESSED, self.clock.get_ticks())
                )
                if len(keys) > retain + 1:
                    keys[retain], keys[-1] = keys[-1], keys[retain]
            retain += 1
        tick_at = self.clock.get_ticks()
        while len(keys) > retain:
            change = True
            self._broadcast(queues, KeyEvent(keys.pop(), KeyState.RELEASED, tick_at))
        if change:
            for queue in queues:
                queue.waker.wake()


class _PollDriver:
    """Polls the keypad each time its interval fires; does nothing without one."""

    def __init__(self, interval: Interval | None, state: _KeypadState) -> None:
        self._interval = interval
        self._state = state

    def step(self) -> None:
        if self._interval is None:
            return
        while True:
            pending = self._interval.__anext__().__await__()
            try:
                next(pending)
            except StopIteration:
                self._state.poll()
                continue
            pending.close()
            return


class KeyStream:
    """An endless stream of :class:`KeyEvent`, iterated with ``async for``."""

    def __init__(self, queue: _SharedKeyQueue, driver: _PollDriver) -> None:
        self._queue = queue
        self._driver = driver

    def _poll_next(self):
        self._driver.step()
        self._queue.waker.register()
        if self._queue.queue:
            return self._queue.queue.popleft()
        return _PENDING

    def __len__(self) -> int:
        return len(self._queue.queue)

    def __aiter__(self) -> KeyStream:
        return self

    def __anext__(self) -> _Poll:
        return _Poll(self._poll_next)


class KeypadListener:
    """Polls the keypad and hands every change to each of its streams.

    By default the keypad is polled 30 times per second by a timer of
    ``timer_listener``. Without a timer listener it must be polled with
    :meth:`poll`.
    """

    def __init__(
        self,
        timer_listener: TimerListener | None,
        key_source: Callable[[], Iterable[Any]],
        ticks: int = TICKS_PER_SECOND // 30,
        *,
        clock=None,
    ) -> None:
        if clock is None:
            clock = timer_listener.clock if timer_listener is not None else Clock()
        self._timer_listener = timer_listener
        self._rate = ticks
        self._state = _KeypadState(key_source, clock)
        self._driver: weakref.ref[_PollDriver] | None = None

    @classmethod
    def with_hz(cls, timer_listener, key_source, hz) -> KeypadListener:
        """Poll the keypad ``hz`` times per second."""
        return cls.with_ticks(timer_listener, key_source, TICKS_PER_SECOND // hz)

    @classmethod
    def with_ms(cls, timer_listener, key_source, ms) -> KeypadListener:
        """Poll the keypad every ``ms`` milliseconds."""
        return cls.with_ticks(timer_listener, key_source, seconds_to_ticks(ms / 1000))

    @classmethod
    def with_ticks(cls, timer_listener, key_source, ticks) -> KeypadListener:
        """Poll the keypad every ``ticks`` ticks."""
        return cls(timer_listener, key_source, ticks)

    @classmethod
    def manually_polled(cls, key_source) -> KeypadListener:
        """Create a listener that only polls when :meth:`poll` is called."""
        return cls(None, key_source, 0)

    def _poll_driver(self) -> _PollDriver:
        driver = self._driver() if self._driver is not None else None
        if driver is None:
            interval = (
                self._timer_listener.every_ticks(self._rate)
                if self._timer_listener is not None
                else None
            )
            driver = _PollDriver(interval, self._state)
            self._driver = weakref.ref(driver)
        return driver

    def poll(self) -> None:
        """Read the keypad now and queue any changes."""
        self._state.poll()

    def stream(self, size=DEFAULT_BUFFER) -> KeyStream:
        """Return a new stream that receives every later event.

        At most ``size`` events are buffered; further ones are dropped
        until the stream is read. Create the stream once, outside any loop,
        or events will be lost.
        """
        if size <= 0:
            raise ValueError("buffer size must be positive")
        queue = _SharedKeyQueue(size)
        self._state.add_queue(queue)
        return KeyStream(queue, self._poll_driver())

    def list_keys(self) -> list:
        """Return the keys currently held down."""
        return list(self._state.keys)