import pytest

from nspirekit.aio.combinators import first, join, select


class Steps:
    def __init__(self, steps, value):
        self.steps = steps
        self.value = value
        self.cancelled = False

    def __await__(self):
        try:
            for _ in range(self.steps):
                yield
        except GeneratorExit:
            self.cancelled = True
            raise
        return self.value


class Boom:
    def __await__(self):
        yield
        raise KeyError("boom")


def drive(awaitable, limit=1000):
    iterator = awaitable.__await__()
    for step in range(limit):
        try:
            iterator.send(None)
        except StopIteration as done:
            return done.value, step
    raise AssertionError("awaitable did not finish")


async def wrap(awaitable):
    return await awaitable


def test_join_returns_results_in_argument_order():
    value, _ = drive(join(Steps(3, "slow"), Steps(0, "fast")))
    assert value == ("slow", "fast")


def test_join_waits_for_slowest():
    _, steps = drive(join(Steps(3, "slow"), Steps(0, "fast")))
    assert steps == 3


def test_join_of_nothing_is_empty():
    value, _ = drive(join())
    assert value == ()


def test_join_accepts_coroutines():
    value, _ = drive(join(wrap(Steps(1, "x")), wrap(Steps(2, "y"))))
    assert value == ("x", "y")


def test_select_returns_first_finished_and_cancels_rest():
    slow = Steps(5, "a")
    value, _ = drive(select(slow, Steps(1, "b")))
    assert value == (1, "b")
    assert slow.cancelled


def test_select_is_biased_toward_earlier_arguments():
    value, _ = drive(select(Steps(1, "a"), Steps(1, "b")))
    assert value == (0, "a")


def test_first_returns_none_and_cancels_others():
    slow, fast = Steps(10, "slow"), Steps(2, "fast")
    value, _ = drive(first(slow, fast))
    assert value is None
    assert slow.cancelled
    assert not fast.cancelled


def test_select_without_awaitables_raises():
    with pytest.raises(ValueError):
        select()


def test_first_without_awaitables_raises():
    with pytest.raises(ValueError):
        first()


def test_exception_propagates_and_cancels_others():
    other = Steps(10, "other")
    with pytest.raises(KeyError):
        drive(join(Boom(), other))
    assert other.cancelled


def test_select_cannot_be_awaited_twice():
    chosen = select(Steps(0, "a"))
    value, _ = drive(chosen)
    assert value == (0, "a")
    with pytest.raises(RuntimeError):
        drive(chosen)