"""
Euclidean distance metrics for clustering.

The most common metric, used for the k-means cost. Both variants support
the squared-norm expansion used by the distance engine.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class EuclideanDistance(DistanceMetric):
    """(Squared) Euclidean distance metric.

    Computes ||x - y||² by default.
    """

    def __init__(self, squared: bool = True):
        """
        Args:
            squared: If True, return squared distances (default).
                    If False, return actual Euclidean distances.
        """
        self.squared = squared

    def _finalize(self, squared_distances: Tensor) -> Tensor:
        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)

    def compute(self, x: Tensor, y: Tensor) -> Tensor:
        """Direct pairwise distances, (m, d) x (n, d) -> (m, n)."""
        diff = x.unsqueeze(1) - y.unsqueeze(0)
        return self._finalize(torch.sum(diff * diff, dim=2))

    def compute_paired(self, x: Tensor, y: Tensor) -> Tensor:
        """Row-wise distances, (n, d) x (n, d) -> (n,)."""
        diff = x - y
        return self._finalize(torch.sum(diff * diff, dim=1))

    @property
    def supports_precomputed_norms(self) -> bool:
        return True

    def precompute_norms(self, x: Tensor) -> Tensor:
        """Squared norms ||x||²."""
        return torch.sum(x * x, dim=1)

    def compute_from_norms(self, x: Tensor, y: Tensor,
                           x_norms: Tensor, y_norms: Tensor) -> Tensor:
        """||x - y||² = ||x||² - 2<x,y> + ||y||², clamped at zero."""
        squared_distances = x_norms.unsqueeze(1) - 2 * torch.matmul(x, y.t()) + y_norms.unsqueeze(0)
        squared_distances = torch.clamp(squared_distances, min=0.0)  # round-off
        return self._finalize(squared_distances)

    def __repr__(self) -> str:
        return f"EuclideanDistance(squared={self.squared})"


class WeightedEuclideanDistance(EuclideanDistance):
    """Weighted Euclidean distance with feature weights.

    Computes sum_i w_i * (x_i - y_i)² (or its root).
    """

    def __init__(self, weights: Tensor, squared: bool = True):
        """
        Args:
            weights: (d,) tensor of non-negative feature weights
            squared: Whether to return squared distances
        """
        super().__init__(squared=squared)
        weights = torch.as_tensor(weights)
        if weights.dim() != 1:
            raise ValueError(f"weights must be 1D, got {weights.dim()}D")
        if (weights < 0).any():
            raise ValueError("weights must be non-negative")
        self.weights = weights

    def _weights_like(self, x: Tensor) -> Tensor:
        if self.weights.shape[0] != x.shape[1]:
            raise ValueError(f"Expected dimension {self.weights.shape[0]}, got {x.shape[1]}")
        # Ensure weights are on same device and dtype
        return self.weights.to(device=x.device, dtype=x.dtype)

    def compute(self, x: Tensor, y: Tensor) -> Tensor:
        weights = self._weights_like(x)
        diff = x.unsqueeze(1) - y.unsqueeze(0)
        return self._finalize(torch.sum(weights * diff * diff, dim=2))

    def compute_paired(self, x: Tensor, y: Tensor) -> Tensor:
        weights = self._weights_like(x)
        diff = x - y
        return self._finalize(torch.sum(weights.unsqueeze(0) * diff * diff, dim=1))

    def precompute_norms(self, x: Tensor) -> Tensor:
        """Weighted squared norms sum_i w_i x_i²."""
        weights = self._weights_like(x)
        return torch.sum(weights.unsqueeze(0) * x * x, dim=1)

    def compute_from_norms(self, x: Tensor, y: Tensor,
                           x_norms: Tensor, y_norms: Tensor) -> Tensor:
        weights = self._weights_like(x)
        cross = torch.matmul(x * weights.unsqueeze(0), y.t())
        squared_distances = x_norms.unsqueeze(1) - 2 * cross + y_norms.unsqueeze(0)
        squared_distances = torch.clamp(squared_distances, min=0.0)
        return self._finalize(squared_distances)

    def __repr__(self) -> str:
        return f"WeightedEuclideanDistance(dimension={self.weights.shape[0]}, squared={self.squared})"
