"""A bounded multi-producer, single-consumer channel between tasks.

:func:`channel` returns a :class:`Sender` and a :class:`Receiver`. The
receiver is an asynchronous iterator; it ends once every sender has been
closed and the queue is drained. Sending into a full channel is rejected.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from nspirekit.aio.combinators import _PENDING, _Poll, _WakerSlot


class ChannelFull(Exception):
    """Raised when sending into a channel that is at capacity."""

    def __init__(self, value: Any) -> None:
        super().__init__("channel is full")
        self.value = value


class _Channel:
    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self.queue: deque[Any] = deque()
        self.waker = _WakerSlot()
        self.senders = 1


class Sender:
    """The sending end of a channel. Clone it to get more senders."""

    def __init__(self, channel: _Channel) -> None:
        self._channel = channel
        self._closed = False

    def send(self, data) -> None:
        """Queue ``data`` for the receiver; raise :class:`ChannelFull` if full."""
        if self._closed:
            raise ValueError("send on a closed sender")
        channel = self._channel
        channel.waker.wake()
        if len(channel.queue) >= channel.capacity:
            raise ChannelFull(data)
        channel.queue.append(data)

    def clone(self) -> Sender:
        """Return another sender for the same channel."""
        if self._closed:
            raise ValueError("cannot clone a closed sender")
        self._channel.senders += 1
        return Sender(self._channel)

    def close(self) -> None:
        """Stop using this sender; the stream ends when all are closed."""
        if self._closed:
            return
        self._closed = True
        channel = self._channel
        channel.senders -= 1
        if channel.senders == 0:
            channel.waker.wake()

    def capacity(self) -> int:
        return self._channel.capacity

    def is_empty(self) -> bool:
        return not self._channel.queue

    def is_full(self) -> bool:
        return len(self._channel.queue) >= self._channel.capacity

    def __len__(self) -> int:
        return len(self._channel.queue)

    def __enter__(self) -> Sender:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self) -> None:
        if hasattr(self, "_channel"):
            self.close()


class Receiver:
    """The receiving end of a channel, iterated with ``async for``."""

    def __init__(self, channel: _Channel) -> None:
        self._channel = channel

    def _poll_next(self):
        channel = self._channel
        channel.waker.register()
        if channel.queue:
            return channel.queue.popleft()
        if channel.senders == 0:
            raise StopAsyncIteration
        return _PENDING

    def __len__(self) -> int:
        return len(self._channel.queue)

    def __aiter__(self) -> Receiver:
        return self

    def __anext__(self) -> _Poll:
        return _Poll(self._poll_next)


def channel(buffer) -> tuple[Sender, Receiver]:
    """Create a channel holding at most ``buffer`` unreceived items."""
    if buffer <= 0:
        raise ValueError("channel capacity must be positive")
    shared = _Channel(buffer)
    return Sender(shared), Receiver(shared)