"""
Core data structures for the kclust clustering engine.

This module provides containers for cluster centers, hard assignments and
the per-iteration state recorded by the refinement loop.
"""

from typing import Optional, List, Dict, Any
import torch
from torch import Tensor
from dataclasses import dataclass, field
from enum import Enum


@dataclass
class ClusterState:
    """Container for the centers of all clusters at a given iteration."""

    centers: Tensor  # (K, d) cluster centers
    n_clusters: int
    dimension: int

    # Auxiliary information
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate dimensions."""
        assert self.centers.shape == (self.n_clusters, self.dimension)

    @classmethod
    def from_centers(cls, centers: Tensor) -> 'ClusterState':
        """Wrap a (K, d) tensor."""
        return cls(centers=centers, n_clusters=centers.shape[0], dimension=centers.shape[1])

    @property
    def device(self) -> torch.device:
        """Device where tensors are stored."""
        return self.centers.device

    def to(self, device: torch.device) -> 'ClusterState':
        """Move centers to specified device."""
        return ClusterState(
            centers=self.centers.to(device),
            n_clusters=self.n_clusters,
            dimension=self.dimension,
            metadata=self.metadata.copy()
        )

    def update_centers(self, new_centers: Tensor) -> None:
        """Update cluster centers in-place."""
        self.centers.copy_(new_centers)


class AssignmentResult:
    """Hard assignments of points to centers with the matching distances.

    Entries of ``assignments`` always lie in ``[0, n_clusters)``.
    """

    def __init__(self,
                 assignments: Tensor,
                 distances: Tensor,
                 n_clusters: int):
        """
        Args:
            assignments: (n,) nearest-center indices
            distances: (n,) distance of each point to its assigned center
            n_clusters: Number of clusters K
        """
        self.n_clusters = n_clusters
        self._validate_and_store(assignments, distances)

    def _validate_and_store(self, assignments: Tensor, distances: Tensor):
        assert assignments.dim() == 1
        assert distances.shape == assignments.shape
        if assignments.numel() > 0:
            assert assignments.max() < self.n_clusters
            assert assignments.min() >= 0
        self.assignments = assignments.long()
        self.distances = distances

    @property
    def n_points(self) -> int:
        """Number of data points."""
        return self.assignments.shape[0]

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Get indices of points assigned to a specific cluster."""
        return torch.where(self.assignments == cluster_idx)[0]

    def count_per_cluster(self) -> Tensor:
        """Count points per cluster."""
        return torch.bincount(self.assignments, minlength=self.n_clusters)

    def total_distance(self) -> float:
        """Sum of the per-point distances, accumulated in double precision."""
        return self.distances.sum(dtype=torch.float64).item()

    def __iter__(self):
        # Allows ``assignments, distances = result``
        return iter((self.assignments, self.distances))

    def to(self, device: torch.device) -> 'AssignmentResult':
        """Move to specified device."""
        return AssignmentResult(self.assignments.to(device), self.distances.to(device),
                                self.n_clusters)


class RefinementStatus(Enum):
    """States of the refinement loop."""
    RUNNING = 'running'
    CONVERGED = 'converged'
    ITERATION_LIMIT_REACHED = 'iteration_limit_reached'


@dataclass
class AlgorithmState:
    """State of the refinement loop after one iteration.

    Used for convergence checking and debugging.
    """
    iteration: int
    cost: float
    n_empty_clusters: int = 0
    converged: bool = False
    elapsed: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RefinementResult:
    """Outcome of a refinement run.

    ``assignments`` is the assignment that produced ``centers``: the final
    centers are the means of exactly those groups.
    """
    centers: Tensor
    n_iter: int
    converged: bool
    cost_trajectory: List[float]
    assignments: Optional[Tensor] = None
    status: RefinementStatus = RefinementStatus.RUNNING
    history: List[AlgorithmState] = field(default_factory=list)

    @property
    def final_cost(self) -> float:
        """Cost after the last iteration (``inf`` if none ran)."""
        return self.cost_trajectory[-1] if self.cost_trajectory else float('inf')

    def __iter__(self):
        # Allows ``centers, n_iter, converged, costs = result``
        return iter((self.centers, self.n_iter, self.converged, self.cost_trajectory))
