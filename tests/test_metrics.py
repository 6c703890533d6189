# tests/test_metrics.py
"""
Distance metric variants: Euclidean (squared and root), weighted, and
minimum-image, plus name resolution.
"""

import math

import pytest
import torch

from kclust.base.interfaces import DistanceMetric
from kclust.distances import (
    EuclideanDistance,
    WeightedEuclideanDistance,
    MinimumImageDistance,
    get_metric,
)


def test_euclidean_squared_and_root():
    a = torch.tensor([[0.0, 0.0]])
    b = torch.tensor([[3.0, 4.0]])

    assert EuclideanDistance().compute(a, b).item() == pytest.approx(25.0)
    assert EuclideanDistance(squared=False).compute(a, b).item() == pytest.approx(5.0)
    assert EuclideanDistance().distance(a[0], b[0]) == pytest.approx(25.0)


def test_euclidean_norm_path_matches_direct(rng):
    x = torch.from_numpy(rng.normal(size=(7, 4)))
    y = torch.from_numpy(rng.normal(size=(11, 4)))
    metric = EuclideanDistance()

    direct = metric.compute(x, y)
    expanded = metric.compute_from_norms(x, y, metric.precompute_norms(x), metric.precompute_norms(y))
    assert direct.shape == (7, 11)
    assert torch.allclose(direct, expanded, atol=1e-10)


def test_norm_path_never_negative():
    # Identical large-magnitude points: the expansion can round below zero
    x = torch.full((3, 5), 1e4)
    metric = EuclideanDistance()
    d = metric.compute_from_norms(x, x, metric.precompute_norms(x), metric.precompute_norms(x))
    assert (d >= 0).all()


def test_compute_paired():
    x = torch.tensor([[0.0, 0.0], [1.0, 1.0]])
    y = torch.tensor([[1.0, 0.0], [1.0, 3.0]])
    assert torch.allclose(EuclideanDistance().compute_paired(x, y), torch.tensor([1.0, 4.0]))


def test_weighted_euclidean(rng):
    w = torch.tensor([1.0, 4.0], dtype=torch.float64)
    metric = WeightedEuclideanDistance(w)
    a = torch.tensor([[0.0, 0.0]], dtype=torch.float64)
    b = torch.tensor([[1.0, 1.0]], dtype=torch.float64)
    assert metric.compute(a, b).item() == pytest.approx(5.0)

    x = torch.from_numpy(rng.normal(size=(5, 2)))
    y = torch.from_numpy(rng.normal(size=(6, 2)))
    expanded = metric.compute_from_norms(x, y, metric.precompute_norms(x), metric.precompute_norms(y))
    assert torch.allclose(metric.compute(x, y), expanded, atol=1e-10)


def test_weighted_euclidean_rejects_bad_weights():
    with pytest.raises(ValueError):
        WeightedEuclideanDistance(torch.tensor([1.0, -1.0]))
    with pytest.raises(ValueError):
        WeightedEuclideanDistance(torch.ones(2, 2))
    with pytest.raises(ValueError):
        WeightedEuclideanDistance(torch.ones(3)).compute(torch.zeros(1, 2), torch.zeros(1, 2))


def test_minimum_image_wraps_differences():
    metric = MinimumImageDistance(box=10.0)
    a = torch.tensor([[0.5]])
    b = torch.tensor([[9.5]])
    # Through the boundary the points are 1.0 apart, not 9.0
    assert metric.compute(a, b).item() == pytest.approx(1.0)
    assert MinimumImageDistance(box=10.0, squared=False).distance(a[0], b[0]) == pytest.approx(1.0)
    assert not metric.supports_precomputed_norms


def test_minimum_image_per_axis_box():
    metric = MinimumImageDistance(box=torch.tensor([10.0, 100.0]))
    a = torch.tensor([[1.0, 1.0]])
    b = torch.tensor([[9.0, 60.0]])
    # Each axis wraps with its own length: x to 2.0, y to 41.0
    expected = 2.0 ** 2 + 41.0 ** 2
    assert metric.compute(a, b).item() == pytest.approx(expected)


def test_minimum_image_rejects_bad_box():
    with pytest.raises(ValueError):
        MinimumImageDistance(box=0.0)
    with pytest.raises(ValueError):
        MinimumImageDistance(box=torch.ones(2, 2))


def test_get_metric_names():
    assert isinstance(get_metric("euclidean"), EuclideanDistance)
    assert get_metric("euclidean").squared
    assert get_metric("sqeuclidean").squared
    assert not get_metric("euclidean_root").squared

    metric = MinimumImageDistance(box=1.0)
    assert get_metric(metric) is metric
    assert isinstance(metric, DistanceMetric)


@pytest.mark.parametrize("name", ["minimum_image", "weighted_euclidean", "manhattan"])
def test_get_metric_rejects_names(name):
    with pytest.raises(ValueError):
        get_metric(name)


def test_get_metric_rejects_non_string():
    with pytest.raises(TypeError):
        get_metric(3)
