"""Running a task to completion while serving timers and yields.

:func:`block_on` drives one awaitable. Between polls it wakes due timers
and pending yields. When nothing is ready it puts the clock to sleep
until the next timer is due.
"""

from __future__ import annotations

from nspirekit.aio.combinators import _CURRENT_WAKER
from nspirekit.aio.timer import Clock, TimerListener
from nspirekit.aio.yield_now import Yield, YieldListener


class AsyncListeners:
    """Sources of wake-ups for tasks run with :func:`block_on`."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._timer = TimerListener(clock)
        self._yielder = YieldListener()

    def timer(self) -> TimerListener:
        """Return the listener used to create timers."""
        return self._timer

    def yield_now(self) -> Yield:
        """Let other tasks run before continuing this one.

        If nothing else is scheduled, the task continues at once. This does
        not let the clock sleep; use a timer when a delay is wanted.
        """
        return self._yielder.yield_now()


class _TaskWaker:
    __slots__ = ("woken",)

    def __init__(self) -> None:
        self.woken = True

    def __call__(self) -> None:
        self.woken = True


def block_on(listeners, task):
    """Run ``task`` until it finishes and return its result."""
    timer = listeners._timer
    yielder = listeners._yielder
    waker = _TaskWaker()
    iterator = task.__await__()
    try:
        while True:
            timer.poll()
            yielder.poll()
            while waker.woken:
                waker.woken = False
                token = _CURRENT_WAKER.set(waker)
                try:
                    iterator.send(None)
                except StopIteration as done:
                    return done.value
                finally:
                    _CURRENT_WAKER.reset(token)
                timer.poll()
                yielder.poll()
            timer.config_sleep()
            timer.clock.idle()
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()