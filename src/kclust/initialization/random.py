"""
Uniform initialization strategy for clustering algorithms.

Selects distinct random points from the dataset as initial centers.
"""

from typing import Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..base.exceptions import DimensionalityError
from ..utils.validation import check_n_clusters, check_random_state


class UniformInit(InitializationStrategy):
    """Uniform initialization by selecting points from the dataset.

    Selects n_clusters random points (without replacement) as initial centers.
    """

    def __init__(self, random_state: Optional[Union[int, torch.Generator]] = None):
        """
        Args:
            random_state: Seed or generator; None for a randomly seeded one
        """
        self.random_state = random_state
        self.center_indices_ = []

    def initialize(self, points: Tensor, n_clusters: int,
                   **kwargs) -> Tensor:
        """Initialize centers with random data points.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters

        Returns:
            (n_clusters, d) tensor of centers
        """
        if points.dim() != 2:
            raise DimensionalityError("input data does not have two dimensions.")
        n_points = points.shape[0]
        check_n_clusters(n_clusters, n_points)

        generator = check_random_state(self.random_state)

        # Select random indices without replacement
        indices = torch.randperm(n_points, generator=generator)[:n_clusters]
        self.center_indices_ = indices.tolist()

        return points[indices.to(points.device)].clone()
