"""
Hard assignment strategy for clustering algorithms.

Assigns each point to its nearest center based on the distance metric.
"""

from typing import Optional, Tuple, Union
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, DistanceMetric
from ..base.data_structures import AssignmentResult
from ..distances import get_metric, compute_distances
from ..utils.device import get_batch_size, ThreadContext
from ..utils.validation import validate_data, validate_centers


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to the nearest center.

    Each point is assigned to exactly one center by minimum distance; ties
    go to the lowest center index.
    """

    def __init__(self, metric: Union[str, DistanceMetric] = 'euclidean',
                 batch_size: Optional[int] = None):
        """
        Args:
            metric: Distance metric or metric name
            batch_size: Data points per distance kernel (None for automatic)
        """
        super().__init__()
        self.metric = get_metric(metric)
        self.batch_size = batch_size

    def compute_assignments(self, points: Tensor,
                            centers: Tensor,
                            data_norms: Optional[Tensor] = None,
                            **kwargs) -> AssignmentResult:
        """Assign each point to its nearest center.

        Args:
            points: (n, d) data points
            centers: (k, d) centers
            data_norms: Optional (n,) precomputed norms of ``points``
            **kwargs: Ignored for basic hard assignment

        Returns:
            AssignmentResult with (n,) indices and (n,) distances
        """
        n_points, dimension = points.shape
        n_clusters = centers.shape[0]
        use_norms = data_norms is not None and self.metric.supports_precomputed_norms

        batch_size = self.batch_size
        if batch_size is None:
            # The direct path broadcasts over the feature axis as well
            rows = n_clusters if use_norms else n_clusters * dimension
            batch_size = get_batch_size(n_points, rows, points.device, points.dtype)

        assignments = torch.empty(n_points, dtype=torch.long, device=points.device)
        distances = torch.empty(n_points, dtype=points.dtype, device=points.device)

        center_norms = None
        if use_norms:
            center_norms = self.metric.precompute_norms(centers)

        for start in range(0, n_points, batch_size):
            stop = min(start + batch_size, n_points)
            block = compute_distances(
                centers, points[start:stop], self.metric,
                query_norms=center_norms,
                data_norms=data_norms[start:stop] if use_norms else None,
                batch_size=stop - start
            )
            # argmin returns the first minimal index on ties
            nearest = torch.argmin(block, dim=0)
            assignments[start:stop] = nearest
            distances[start:stop] = torch.gather(block, 0, nearest.unsqueeze(0)).squeeze(0)

        return AssignmentResult(assignments, distances, n_clusters)


def assign(data: Tensor,
           centers: Tensor,
           metric: Union[str, DistanceMetric] = 'euclidean',
           n_threads: Optional[int] = None,
           data_norms: Optional[Tensor] = None) -> Tuple[Tensor, Tensor]:
    """Nearest-center assignment for every data point.

    Args:
        data: (n, d) data points
        centers: (k, d) centers
        metric: Distance metric or metric name
        n_threads: Worker threads for the distance kernels
        data_norms: Optional precomputed norms of ``data``; computed here
            when the metric supports them

    Returns:
        assignments: (n,) long tensor of center indices
        distances: (n,) distance of each point to its center
    """
    metric = get_metric(metric)
    data = validate_data(data)
    centers = validate_centers(centers, data.shape[1], dtype=data.dtype, device=data.device)

    with ThreadContext(n_threads):
        if data_norms is None and metric.supports_precomputed_norms:
            data_norms = metric.precompute_norms(data)
        result = HardAssignment(metric).compute_assignments(data, centers, data_norms=data_norms)

    return result.assignments, result.distances
