"""
Mean update strategy for centroid-based clustering.
"""

import torch
from torch import Tensor

from ..base.interfaces import CenterUpdater


class MeanUpdater(CenterUpdater):
    """Updates each center to the mean of its assigned points.

    A center with no assigned points keeps its current value; it is not
    re-seeded.
    """

    def update(self, centers: Tensor,
               points: Tensor,
               assignments: Tensor,
               **kwargs) -> Tensor:
        """Compute new centers.

        Args:
            centers: (k, d) current centers
            points: (n, d) all data points
            assignments: (n,) hard assignments
            **kwargs: Ignored

        Returns:
            (k, d) new centers (a fresh tensor; ``centers`` is not modified)
        """
        n_clusters, dimension = centers.shape

        # Double-precision accumulation keeps the means independent of
        # summation order beyond float tolerance
        sums = torch.zeros(n_clusters, dimension, dtype=torch.float64, device=points.device)
        sums.index_add_(0, assignments, points.to(torch.float64))
        counts = torch.bincount(assignments, minlength=n_clusters)

        new_centers = centers.clone()
        nonempty = counts > 0
        if nonempty.any():
            means = sums[nonempty] / counts[nonempty].unsqueeze(1).to(torch.float64)
            new_centers[nonempty] = means.to(centers.dtype)

        return new_centers
