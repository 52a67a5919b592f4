"""Polling protocol shared by the awaitables of this package, and combinators over them.

Awaitables here suspend by yielding ``None`` to the loop that drives them.
Before suspending they record the current waker, a callable that the loop
installs in ``_CURRENT_WAKER``. When whatever they wait for happens, that
waker is called so the loop knows the task is worth polling again.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Callable

_CURRENT_WAKER: ContextVar[Callable[[], None] | None] = ContextVar(
    "nspirekit_waker", default=None
)

_PENDING = object()


class _WakerSlot:
    """Holds the waker of the task that last waited on a resource."""

    __slots__ = ("_waker",)

    def __init__(self) -> None:
        self._waker: Callable[[], None] | None = None

    def register(self) -> None:
        self._waker = _CURRENT_WAKER.get()

    def wake(self) -> None:
        waker, self._waker = self._waker, None
        if waker is not None:
            waker()


class _Poll:
    """Awaitable driven by a poll function returning a value or ``_PENDING``."""

    __slots__ = ("_poll",)

    def __init__(self, poll: Callable[[], Any]) -> None:
        self._poll = poll

    def __await__(self):
        while True:
            result = self._poll()
            if result is not _PENDING:
                return result
            yield


def _close(iterators) -> None:
    for iterator in iterators:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


class _Combinator:
    def __init__(self, awaitables: tuple) -> None:
        self._awaitables = awaitables
        self._started = False

    def _start(self) -> list:
        if self._started:
            raise RuntimeError("a combinator can only be awaited once")
        self._started = True
        awaitables, self._awaitables = self._awaitables, ()
        return [awaitable.__await__() for awaitable in awaitables]


class _Select(_Combinator):
    def __init__(self, awaitables: tuple) -> None:
        if not awaitables:
            raise ValueError("select needs at least one awaitable")
        super().__init__(awaitables)

    def __await__(self):
        pending = self._start()
        try:
            while True:
                for index, iterator in enumerate(pending):
                    try:
                        iterator.send(None)
                    except StopIteration as done:
                        return index, done.value
                yield
        finally:
            _close(pending)
            pending.clear()


class _Join(_Combinator):
    def __await__(self):
        iterators = self._start()
        results: list[Any] = [None] * len(iterators)
        pending = dict(enumerate(iterators))
        try:
            while pending:
                for index, iterator in list(pending.items()):
                    try:
                        iterator.send(None)
                    except StopIteration as done:
                        results[index] = done.value
                        del pending[index]
                if pending:
                    yield
        finally:
            _close(pending.values())
            pending.clear()
        return tuple(results)


class _First:
    def __init__(self, chosen: _Select) -> None:
        self._select = chosen

    def __await__(self):
        yield from self._select.__await__()
        return None


def select(*args) -> _Select:
    """Await the first of ``args`` to finish; the result is ``(index, value)``.

    Awaitables are polled in argument order, so earlier ones win ties.
    The others are cancelled.
    """
    return _Select(args)


def first(*args) -> _First:
    """Await the first of ``args`` to finish, cancel the rest, and return None."""
    return _First(_Select(args))


def join(*args) -> _Join:
    """Await all of ``args`` concurrently; the result is a tuple in argument order."""
    return _Join(args)