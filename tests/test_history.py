import threading

import pytest

from galaxy.history import History


class Counter:
    def __init__(self):
        self.value = 0

    def __call__(self):
        self.value += 1
        return self.value


def test_keeps_last_values_in_sampling_order():
    history = History(Counter(), limit=5)
    for _ in range(12):
        history.add_current_value()
    assert len(history) == 5
    assert history.values() == [8, 9, 10, 11, 12]
    assert list(history) == [8, 9, 10, 11, 12]
    assert history.last() == 12


def test_below_limit_keeps_everything():
    history = History(Counter(), limit=10)
    for _ in range(3):
        history.add_current_value()
    assert history.values() == [1, 2, 3]


def test_default_limit():
    assert History(Counter()).limit == 10


def test_lowered_limit_applies_on_next_sample():
    history = History(Counter(), limit=10)
    for _ in range(10):
        history.add_current_value()

    history.set_limit(4)
    assert history.limit == 4
    assert len(history) == 10

    history.add_current_value()
    assert history.values() == [8, 9, 10, 11]
    history.add_current_value()
    assert history.values() == [9, 10, 11, 12]


def test_raised_limit_grows_buffer():
    history = History(Counter(), limit=2)
    for _ in range(5):
        history.add_current_value()
    history.set_limit(4)
    for _ in range(5):
        history.add_current_value()
    assert history.values() == [7, 8, 9, 10]


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        History(Counter(), limit=0)
    history = History(Counter())
    with pytest.raises(ValueError):
        history.set_limit(-3)


def test_snapshot_is_detached_from_buffer():
    history = History(Counter(), limit=3)
    history.add_current_value()
    snapshot = history.values()
    history.add_current_value()
    assert snapshot == [1]


def test_clear_and_empty_last():
    history = History(Counter(), limit=3)
    assert history.last() is None
    history.add_current_value()
    history.clear()
    assert len(history) == 0
    assert history.last() is None


def test_concurrent_append_and_iterate():
    history = History(Counter(), limit=50)
    done = threading.Event()
    errors = []

    def reader():
        while not done.is_set():
            try:
                values = list(history)
                assert len(values) <= 50
                assert values == sorted(values)
            except Exception as e:  # collected for the main thread
                errors.append(e)
                return

    t = threading.Thread(target=reader)
    t.start()
    for _ in range(5000):
        history.add_current_value()
    done.set()
    t.join()
    assert errors == []
    assert len(history) == 50
