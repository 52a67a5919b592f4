import gc

import pytest

from nspirekit.aio.combinators import _CURRENT_WAKER
from nspirekit.aio.mpsc import ChannelFull, channel


def drive(awaitable, limit=1000):
    iterator = awaitable.__await__()
    for _ in range(limit):
        try:
            iterator.send(None)
        except StopIteration as done:
            return done.value
    raise AssertionError("awaitable did not finish")


def step(iterator):
    try:
        return ("pending", iterator.send(None))
    except StopIteration as done:
        return ("done", done.value)


async def collect(rx):
    return [item async for item in rx]


def test_full_channel_rejects_send():
    tx, _rx = channel(2)
    tx.send("a")
    tx.send("b")
    assert tx.is_full()
    assert len(tx) == 2
    assert tx.capacity() == 2
    with pytest.raises(ChannelFull) as info:
        tx.send("c")
    assert info.value.value == "c"


def test_new_channel_is_empty():
    tx, rx = channel(3)
    assert tx.is_empty()
    assert len(rx) == 0


def test_receiver_yields_in_order_then_ends():
    tx, rx = channel(4)
    tx.send("a")
    tx.send("b")
    tx.close()
    assert drive(collect(rx)) == ["a", "b"]


def test_stream_ends_without_senders():
    tx, rx = channel(1)
    tx.close()
    assert drive(collect(rx)) == []


def test_clone_keeps_channel_open():
    tx, rx = channel(1)
    other = tx.clone()
    tx.close()
    iterator = rx.__anext__().__await__()
    assert step(iterator) == ("pending", None)
    other.close()
    with pytest.raises(StopAsyncIteration):
        iterator.send(None)


def test_send_wakes_receiver():
    tx, rx = channel(1)
    woken = []
    waker_reset = _CURRENT_WAKER.set(lambda: woken.append("woken"))
    try:
        iterator = rx.__anext__().__await__()
        step(iterator)
    finally:
        _CURRENT_WAKER.reset(waker_reset)
    tx.send("x")
    assert woken == ["woken"]
    assert step(iterator) == ("done", "x")


def test_zero_capacity_rejected():
    with pytest.raises(ValueError):
        channel(0)


def test_send_after_close_rejected():
    tx, _rx = channel(1)
    tx.close()
    with pytest.raises(ValueError):
        tx.send("x")


def test_context_manager_closes_sender():
    tx, rx = channel(2)
    with tx:
        tx.send("a")
    assert drive(collect(rx)) == ["a"]


def test_dropping_sender_closes_it():
    tx, rx = channel(2)
    tx.send("a")
    del tx
    gc.collect()
    assert drive(collect(rx)) == ["a"]