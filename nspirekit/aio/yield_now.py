"""Letting other tasks run before continuing."""

from __future__ import annotations

import weakref

from nspirekit.aio.combinators import _PENDING, _Poll, _WakerSlot


class Yield:
    """Completes once the listener that created it has been polled."""

    def __init__(self) -> None:
        self._done = False
        self._waker = _WakerSlot()

    def _poll(self):
        if self._done:
            return None
        self._waker.register()
        return _PENDING

    def _finish(self) -> None:
        self._done = True
        self._waker.wake()

    def __await__(self):
        return _Poll(self._poll).__await__()


class YieldListener:
    """Tracks outstanding yields and releases them on each poll."""

    def __init__(self) -> None:
        self._yields: list[weakref.ref[Yield]] = []

    def _live(self) -> list[Yield]:
        live = [y for y in (ref() for ref in self._yields) if y is not None]
        self._yields = [weakref.ref(y) for y in live]
        return live

    def poll(self) -> None:
        """Release every yield that is still being waited on."""
        for pending in self._live():
            pending._finish()

    def yield_now(self) -> Yield:
        """Return an awaitable that completes at the next poll."""
        pending = Yield()
        self._yields.append(weakref.ref(pending))
        return pending