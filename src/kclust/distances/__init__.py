"""Distance metrics and the distance-matrix kernel."""

from typing import Union

from ..base.interfaces import DistanceMetric
from .euclidean import EuclideanDistance, WeightedEuclideanDistance
from .periodic import MinimumImageDistance
from .engine import precompute_norms, compute_distances


def get_metric(metric: Union[str, DistanceMetric] = 'euclidean') -> DistanceMetric:
    """Resolve a metric name or pass a metric instance through.

    Names:
        'euclidean', 'sqeuclidean': squared Euclidean (the k-means cost)
        'euclidean_root': plain (non-squared) Euclidean

    Weighted and periodic metrics need parameters; construct them directly.
    """
    if isinstance(metric, DistanceMetric):
        return metric
    if not isinstance(metric, str):
        raise TypeError(f"metric must be str or DistanceMetric, got {type(metric)}")

    if metric in ('euclidean', 'sqeuclidean'):
        return EuclideanDistance(squared=True)
    elif metric == 'euclidean_root':
        return EuclideanDistance(squared=False)
    elif metric in ('minimum_image', 'weighted_euclidean'):
        raise ValueError(f"Metric {metric!r} needs parameters; pass an instance instead")
    else:
        raise ValueError(f"Unknown metric: {metric}")


__all__ = [
    # Euclidean distances
    'EuclideanDistance',
    'WeightedEuclideanDistance',

    # Periodic distances
    'MinimumImageDistance',

    # Kernel
    'precompute_norms',
    'compute_distances',
    'get_metric'
]
