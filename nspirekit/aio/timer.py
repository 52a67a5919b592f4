"""Timers, timeouts and intervals measured in clock ticks.

Ticks count at :data:`TICKS_PER_SECOND` and wrap around at 2**32. Waiting
more than 2**31 ticks (about 18 hours) ahead is not supported.
"""

from __future__ import annotations

import time
import weakref

from nspirekit.aio.combinators import _PENDING, _Poll, _WakerSlot, select

TICKS_PER_SECOND = 32768
_MASK = 0xFFFFFFFF
_HALF = 1 << 31


def seconds_to_ticks(seconds) -> int:
    """Convert a duration in seconds to whole ticks."""
    if seconds < 0:
        raise ValueError("duration must not be negative")
    return int(seconds * TICKS_PER_SECOND)


def ticks_to_seconds(ticks) -> float:
    """Convert a tick count to seconds."""
    return ticks / TICKS_PER_SECOND


class Clock:
    """A wrapping 32-bit tick counter backed by the monotonic clock."""

    def __init__(self) -> None:
        self._origin = time.monotonic()
        self._wake_at: float | None = None

    def get_ticks(self) -> int:
        return int((time.monotonic() - self._origin) * TICKS_PER_SECOND) & _MASK

    def has_time_passed(self, tick) -> bool:
        """Whether ``tick`` is now or in the (wrapping) past."""
        return ((self.get_ticks() - tick) & _MASK) < _HALF

    def configure_sleep(self, ticks) -> None:
        """Arrange for the next :meth:`idle` to last at most ``ticks``."""
        self._wake_at = time.monotonic() + ticks_to_seconds(ticks)

    def idle(self) -> None:
        """Sleep until the configured wake-up time, then clear it."""
        wake_at, self._wake_at = self._wake_at, None
        if wake_at is not None:
            remaining = wake_at - time.monotonic()
            if remaining > 0:
                time.sleep(remaining)


class TimeoutExpired(TimeoutError):
    """Raised when an awaited operation times out."""

    def __init__(self) -> None:
        super().__init__("future has timed out")


class Timer:
    """Completes at a given tick; the result is how late it fired, in seconds."""

    def __init__(self, clock: Clock, at_tick: int) -> None:
        self._clock = clock
        self._at_tick = at_tick & _MASK
        self._waker = _WakerSlot()

    def at_tick(self) -> int:
        return self._at_tick

    def reschedule_ms(self, ms) -> None:
        self.reschedule(ms / 1000)

    def reschedule(self, seconds) -> None:
        self.reschedule_ticks(seconds_to_ticks(seconds))

    def reschedule_ticks(self, ticks) -> None:
        self.reschedule_at(self._clock.get_ticks() + ticks)

    def reschedule_at(self, ticks) -> None:
        self._at_tick = ticks & _MASK

    def _due(self) -> bool:
        return self._clock.has_time_passed(self._at_tick)

    def _poll(self):
        if self._due():
            return ticks_to_seconds((self._clock.get_ticks() - self._at_tick) & _MASK)
        self._waker.register()
        return _PENDING

    def __await__(self):
        return _Poll(self._poll).__await__()


class Interval:
    """A repeating timer, iterated with ``async for``.

    Each item is how late, in seconds, the tick fired. After a long delay
    only one item is produced, not one per missed period.
    """

    def __init__(self, interval: int, timer: Timer) -> None:
        self._interval = interval
        self._timer = timer

    def interval(self) -> float:
        return ticks_to_seconds(self._interval)

    def interval_ms(self) -> int:
        return round(self.interval() * 1000)

    def interval_ticks(self) -> int:
        return self._interval

    def reschedule_ms(self, ms) -> None:
        self.reschedule(ms / 1000)

    def reschedule(self, seconds) -> None:
        self.reschedule_ticks(seconds_to_ticks(seconds))

    def reschedule_ticks(self, ticks) -> None:
        self._interval = ticks
        self._timer.reschedule_ticks(ticks)

    def _poll_next(self):
        late = self._timer._poll()
        if late is _PENDING:
            return _PENDING
        self._timer.reschedule_ticks(self._interval)
        return late

    def __aiter__(self) -> Interval:
        return self

    def __anext__(self) -> _Poll:
        return _Poll(self._poll_next)


class TimerListener:
    """Creates timers and wakes those that are due."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock if clock is not None else Clock()
        self._timers: list[weakref.ref[Timer]] = []

    def _live(self) -> list[Timer]:
        live = [t for t in (ref() for ref in self._timers) if t is not None]
        self._timers = [weakref.ref(t) for t in live]
        return live

    def poll(self) -> None:
        """Wake every timer whose tick has passed."""
        for timer in self._live():
            if timer._due():
                timer._waker.wake()

    def config_sleep(self) -> None:
        """Configure the clock to sleep until the earliest pending timer."""
        live = self._live()
        if live:
            now = self.clock.get_ticks()
            self.clock.configure_sleep(
                min(((timer.at_tick() - now) & _MASK) % _HALF for timer in live)
            )

    def sleep_ms(self, ms) -> Timer:
        return self.sleep(ms / 1000)

    def sleep(self, seconds) -> Timer:
        return self.sleep_ticks(seconds_to_ticks(seconds))

    def sleep_ticks(self, ticks) -> Timer:
        return self.sleep_until(self.clock.get_ticks() + ticks)

    def sleep_until(self, ticks) -> Timer:
        timer = Timer(self.clock, ticks)
        self._timers.append(weakref.ref(timer))
        return timer

    async def timeout_ms(self, ms, awaitable):
        return await self.timeout(ms / 1000, awaitable)

    async def timeout(self, seconds, awaitable):
        return await self.timeout_ticks(seconds_to_ticks(seconds), awaitable)

    async def timeout_ticks(self, ticks, awaitable):
        return await self.timeout_until(self.clock.get_ticks() + ticks, awaitable)

    async def timeout_until(self, ticks, awaitable):
        """Await ``awaitable``, raising :class:`TimeoutExpired` at tick ``ticks``."""
        index, value = await select(awaitable, self.sleep_until(ticks))
        if index == 0:
            return value
        raise TimeoutExpired()

    def every_hz(self, hz) -> Interval:
        return self.every_ticks(TICKS_PER_SECOND // hz)

    def every_ms(self, ms) -> Interval:
        return self.every(ms / 1000)

    def every(self, seconds) -> Interval:
        return self.every_ticks(seconds_to_ticks(seconds))

    def every_ticks(self, ticks) -> Interval:
        return Interval(ticks, self.sleep_ticks(ticks))