# tests/test_device.py
"""
Device parsing, batch sizing, memory estimates, and ThreadContext.
"""

import pytest
import torch

from kclust.utils.device import (
    parse_device,
    get_device_info,
    estimate_memory_usage,
    get_batch_size,
    ThreadContext,
)


def test_parse_device():
    assert parse_device(None) == torch.device("cpu")
    assert parse_device("cpu") == torch.device("cpu")
    dev = torch.device("cpu")
    assert parse_device(dev) is dev
    assert isinstance(parse_device("auto"), torch.device)

    with pytest.raises(ValueError):
        parse_device("tpu")
    with pytest.raises(TypeError):
        parse_device(0)


def test_device_info_cpu():
    info = get_device_info(torch.device("cpu"))
    assert info["type"] == "cpu"
    assert info["num_threads"] >= 1


def test_batch_size_bounds():
    cpu = torch.device("cpu")
    assert get_batch_size(10, 3, cpu) == 10
    small = get_batch_size(10_000_000, 10_000, cpu, target_memory_mb=1)
    assert 1 <= small < 10_000_000
    assert get_batch_size(5, 10 ** 12, cpu) == 1


def test_memory_estimate():
    est = estimate_memory_usage(1000, 10, 5, dtype=torch.float64)
    assert est["data"] == 1000 * 10 * 8
    assert est["total"] == sum(v for k, v in est.items() if k != "total")


def test_thread_context_restores():
    before = torch.get_num_threads()
    with ThreadContext(2):
        assert torch.get_num_threads() == 2
    assert torch.get_num_threads() == before


def test_thread_context_restores_on_error():
    before = torch.get_num_threads()
    with pytest.raises(KeyError):
        with ThreadContext(3):
            raise KeyError("x")
    assert torch.get_num_threads() == before


def test_thread_context_none_is_noop():
    before = torch.get_num_threads()
    with ThreadContext(None):
        assert torch.get_num_threads() == before


def test_thread_context_validates():
    with pytest.raises(ValueError):
        ThreadContext(0)
