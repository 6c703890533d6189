"""
Core interfaces for the kclust clustering engine.

This module defines the abstract base classes that all components must implement,
so that metrics, seeding, assignment and update strategies can be swapped freely.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from torch import Tensor


class DistanceMetric(ABC):
    """Abstract base class for distance computations between vector sets.

    A metric always offers direct pairwise evaluation. Metrics that can be
    expanded as ``|x|^2 - 2 x.y + |y|^2`` additionally expose per-vector
    auxiliary values (squared norms) so that repeated evaluation against the
    same data set only pays for the cross term.
    """

    @abstractmethod
    def compute(self, x: Tensor, y: Tensor) -> Tensor:
        """Compute all pairwise distances.

        Args:
            x: (m, d) tensor of query vectors
            y: (n, d) tensor of data vectors

        Returns:
            (m, n) tensor of distances
        """
        pass

    @abstractmethod
    def compute_paired(self, x: Tensor, y: Tensor) -> Tensor:
        """Compute distances between corresponding rows.

        Args:
            x: (n, d) tensor
            y: (n, d) tensor

        Returns:
            (n,) tensor of distances
        """
        pass

    def distance(self, a: Tensor, b: Tensor) -> float:
        """Distance between two single vectors."""
        return self.compute_paired(a.reshape(1, -1), b.reshape(1, -1))[0].item()

    @property
    def supports_precomputed_norms(self) -> bool:
        """Whether ``precompute_norms``/``compute_from_norms`` are available."""
        return False

    def precompute_norms(self, x: Tensor) -> Tensor:
        """Per-vector auxiliary values, (n, d) -> (n,)."""
        raise NotImplementedError(f"{type(self).__name__} does not support precomputed norms")

    def compute_from_norms(self, x: Tensor, y: Tensor,
                           x_norms: Tensor, y_norms: Tensor) -> Tensor:
        """Pairwise distances using precomputed norms for both sides."""
        raise NotImplementedError(f"{type(self).__name__} does not support precomputed norms")


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-center assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor, centers: Tensor,
                            data_norms: Optional[Tensor] = None,
                            **kwargs) -> Any:
        """Compute cluster assignments for points.

        Args:
            points: (n, d) tensor of data points
            centers: (k, d) tensor of centers
            data_norms: Optional (n,) precomputed norms of ``points``
            **kwargs: Strategy-specific parameters

        Returns:
            AssignmentResult with (n,) indices and (n,) distances
        """
        pass


class CenterUpdater(ABC):
    """Abstract base class for center update strategies."""

    @abstractmethod
    def update(self, centers: Tensor, points: Tensor, assignments: Tensor,
               **kwargs) -> Tensor:
        """Compute new centers given points and their assignments.

        Args:
            centers: (k, d) current centers
            points: (n, d) tensor of all data points
            assignments: (n,) hard assignments
            **kwargs: Update-specific parameters

        Returns:
            (k, d) tensor of updated centers
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for center initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   **kwargs) -> Tensor:
        """Initialize cluster centers.

        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of centers to initialize
            **kwargs: Strategy-specific parameters

        Returns:
            (n_clusters, d) tensor of initial centers
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> Tensor:
        """Compute objective function value.

        Args:
            points: (n, d) tensor of data points
            centers: (k, d) tensor of centers
            assignments: (n,) hard assignments

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
