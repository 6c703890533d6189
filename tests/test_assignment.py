# tests/test_assignment.py
"""
Nearest-center assignment: correctness against brute force, tie-breaking,
batching, and input checks.
"""

import functools

import pytest
import torch

from kclust.assignments import HardAssignment, assign
from kclust.base.data_structures import AssignmentResult
from kclust.base.exceptions import DimensionalityError
from kclust.distances import EuclideanDistance, MinimumImageDistance


def test_matches_brute_force(rng):
    X = torch.from_numpy(rng.normal(size=(120, 3)))
    C = torch.from_numpy(rng.normal(size=(5, 3)))

    labels, distances = assign(X, C)

    brute = ((X[:, None, :] - C[None, :, :]) ** 2).sum(dim=2)
    assert torch.equal(labels, brute.argmin(dim=1))
    assert torch.allclose(distances, brute.min(dim=1).values, atol=1e-10)


def test_ties_go_to_lowest_index():
    X = torch.tensor([[0.0, 0.0], [1.0, 0.0]])
    # Both centers are equidistant from every point
    C = torch.tensor([[0.5, 1.0], [0.5, -1.0]])
    labels, _ = assign(X, C)
    assert labels.tolist() == [0, 0]


def test_duplicate_centers_use_first():
    X = torch.tensor([[0.0], [5.0]])
    C = torch.tensor([[5.0], [0.0], [0.0]])
    labels, distances = assign(X, C)
    assert labels.tolist() == [1, 0]
    assert distances.tolist() == [0.0, 0.0]


def test_batched_strategy_matches(rng):
    X = torch.from_numpy(rng.normal(size=(101, 2)))
    C = torch.from_numpy(rng.normal(size=(4, 2)))
    metric = EuclideanDistance()
    norms = metric.precompute_norms(X)

    full = HardAssignment(metric).compute_assignments(X, C)
    batched = HardAssignment(metric, batch_size=8).compute_assignments(X, C, data_norms=norms)

    assert isinstance(full, AssignmentResult)
    assert torch.equal(full.assignments, batched.assignments)
    assert torch.allclose(full.distances, batched.distances, atol=1e-10)


def test_assignment_result_helpers():
    result = AssignmentResult(torch.tensor([0, 2, 2, 0, 2]), torch.ones(5), n_clusters=4)
    assert result.n_points == 5
    assert result.count_per_cluster().tolist() == [2, 0, 3, 0]
    assert result.get_cluster_indices(2).tolist() == [1, 2, 4]
    assert result.total_distance() == pytest.approx(5.0)

    labels, distances = result
    assert labels.dtype == torch.long
    assert distances.shape == (5,)


def test_periodic_assignment():
    X = torch.tensor([[0.2], [9.9], [5.0]])
    C = torch.tensor([[0.0], [5.0]])
    labels, _ = assign(X, C, metric=MinimumImageDistance(box=10.0))
    assert labels.tolist() == [0, 0, 1]

    labels, _ = assign(X, C)
    assert labels.tolist() == [0, 1, 1]


def test_root_metric_distances():
    X = torch.tensor([[3.0, 4.0]])
    C = torch.tensor([[0.0, 0.0]])
    _, distances = assign(X, C, metric="euclidean_root")
    assert distances.item() == pytest.approx(5.0)


def test_dimension_mismatch():
    with pytest.raises(DimensionalityError):
        assign(torch.zeros(4, 3), torch.zeros(2, 2))


def test_thread_count_restored(rng):
    X = torch.from_numpy(rng.normal(size=(20, 2)))
    before = torch.get_num_threads()
    assign(X, X[:3], n_threads=2)
    assert torch.get_num_threads() == before


class _RecordingPeriodic(MinimumImageDistance):
    """Periodic metric that records the column count of every direct block."""

    def __init__(self, box):
        super().__init__(box)
        self.block_columns = []

    def compute(self, x, y):
        self.block_columns.append(y.shape[0])
        return super().compute(x, y)


def test_direct_path_batches_account_for_features(monkeypatch):
    from kclust.assignments import hard
    from kclust.utils.device import get_batch_size

    # 10 KB per block keeps the blocks small enough to count
    monkeypatch.setattr(hard, "get_batch_size",
                        functools.partial(get_batch_size, target_memory_mb=0.01))

    gen = torch.Generator().manual_seed(0)
    X = torch.rand(500, 4, generator=gen, dtype=torch.float64) * 5.0
    C = X[:3].clone()
    metric = _RecordingPeriodic(5.0)

    result = HardAssignment(metric).compute_assignments(X, C)

    limit = get_batch_size(500, 3 * 4, X.device, X.dtype, target_memory_mb=0.01)
    assert len(metric.block_columns) > 1
    assert max(metric.block_columns) <= limit
    assert sum(metric.block_columns) == 500

    expected = MinimumImageDistance(5.0).compute(C, X).argmin(dim=0)
    assert torch.equal(result.assignments, expected)
