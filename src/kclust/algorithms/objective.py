"""
K-means cost (inertia): sum of per-point distances to the assigned centers.
"""

from typing import Optional, Union
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import ClusteringObjective, DistanceMetric
from ..assignments.hard import assign
from ..distances import get_metric
from ..utils.device import ThreadContext
from ..utils.validation import validate_data, validate_centers, validate_assignments


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of distances (squared Euclidean by default)
    from each point to its assigned center."""

    def __init__(self, metric: Union[str, DistanceMetric] = 'euclidean'):
        self.metric = get_metric(metric)

    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> Tensor:
        """Compute the cost of a hard assignment.

        Returns:
            0-d float64 tensor
        """
        distances = self.metric.compute_paired(points, centers[assignments])
        return distances.sum(dtype=torch.float64)

    @property
    def minimize(self) -> bool:
        return True


def cost(data: Tensor,
         centers: Tensor,
         metric: Union[str, DistanceMetric] = 'euclidean',
         n_threads: Optional[int] = None,
         assignments: Optional[Union[Tensor, np.ndarray, list]] = None) -> float:
    """Sum over all points of the distance to the assigned center.

    Args:
        data: (n, d) data points
        centers: (k, d) centers
        metric: Distance metric or metric name
        n_threads: Worker threads for the distance kernels
        assignments: Optional (n,) center index per point; the nearest
            center is used when omitted

    Returns:
        Non-negative cost; zero only if every point sits on its center
    """
    metric = get_metric(metric)
    data = validate_data(data)
    centers = validate_centers(centers, data.shape[1], dtype=data.dtype, device=data.device)

    if assignments is None:
        assignments, _ = assign(data, centers, metric=metric, n_threads=n_threads)
    else:
        assignments = validate_assignments(assignments, data.shape[0], centers.shape[0],
                                           device=data.device)

    with ThreadContext(n_threads):
        return KMeansObjective(metric).compute(data, centers, assignments).item()
