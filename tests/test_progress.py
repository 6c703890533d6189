# tests/test_progress.py
"""
ProgressChannel: signature detection, no-op behavior, and serialization
across threads.
"""

import threading

import pytest

from kclust.base.progress import ProgressChannel


def test_no_callback_is_noop():
    channel = ProgressChannel()
    assert not channel.active
    channel.notify(0, 1.0)
    assert channel.n_notifications == 0


def test_two_argument_callback():
    events = []
    channel = ProgressChannel(lambda i, v: events.append((i, v)))
    channel.notify(3, 2.5)
    assert events == [(3, 2.5)]
    assert channel.n_notifications == 1


def test_zero_argument_callback():
    calls = []
    channel = ProgressChannel(lambda: calls.append(True))
    channel.notify(0, 0.0)
    channel.notify(1, 0.0)
    assert calls == [True, True]


def test_varargs_and_bound_method():
    class Recorder:
        def __init__(self):
            self.seen = []

        def __call__(self, index, value):
            self.seen.append(index)

    rec = Recorder()
    ProgressChannel(rec).notify(5, 0.0)
    assert rec.seen == [5]

    seen = []
    ProgressChannel(lambda *args: seen.append(args)).notify(1, 2.0)
    assert seen == [(1, 2.0)]


def test_values_are_plain_python_numbers():
    import torch

    events = []
    ProgressChannel(lambda i, v: events.append((i, v))).notify(torch.tensor(2), torch.tensor(1.5))
    (i, v), = events
    assert type(i) is int and type(v) is float


def test_non_callable_rejected():
    with pytest.raises(TypeError):
        ProgressChannel(42)


def test_callback_errors_propagate():
    def boom(i, v):
        raise RuntimeError("stop")

    with pytest.raises(RuntimeError, match="stop"):
        ProgressChannel(boom).notify(0, 0.0)


def test_notifications_do_not_interleave():
    active = []
    overlaps = []

    def slow(i, v):
        active.append(i)
        if len(active) > 1:
            overlaps.append(tuple(active))
        # Give another thread a chance to enter if it could
        threading.Event().wait(0.001)
        active.remove(i)

    channel = ProgressChannel(slow)
    threads = [threading.Thread(target=channel.notify, args=(k, 0.0)) for k in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []
    assert channel.n_notifications == 8


def test_single_argument_callback_rejected():
    with pytest.raises(TypeError, match=r"\(index, value\)"):
        ProgressChannel(lambda it: None)


def test_optional_single_argument_called_without_arguments():
    calls = []
    ProgressChannel(lambda flag=None: calls.append(flag)).notify(2, 1.0)
    assert calls == [None]


def test_nested_notification_on_same_thread():
    inner_events = []
    outer_events = []
    inner = ProgressChannel(lambda i, v: inner_events.append(i))

    def outer(i, v):
        outer_events.append(i)
        inner.notify(i + 10, v)

    finished = threading.Event()

    def run():
        ProgressChannel(outer).notify(0, 1.0)
        finished.set()

    t = threading.Thread(target=run, daemon=True)
    t.start()
    t.join(timeout=5)

    assert finished.is_set()
    assert outer_events == [0]
    assert inner_events == [10]
