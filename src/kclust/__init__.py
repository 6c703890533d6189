"""
kclust: k-means++ seeding and Lloyd refinement on torch tensors.

This package provides:
- k-means++ seeding with greedy local trials
- nearest-center assignment and cost evaluation
- Lloyd refinement with pluggable convergence tests
- a K-means estimator with an sklearn-style interface

Example usage:
    >>> import torch
    >>> from kclust import kmeans_plusplus, refine
    >>>
    >>> X = torch.randn(1000, 10)
    >>> centers = kmeans_plusplus(X, n_clusters=5, random_state=0)
    >>> centers, n_iter, converged, costs = refine(X, centers)
    >>>
    >>> from kclust import KMeans
    >>> labels = KMeans(n_clusters=5, random_state=0).fit_predict(X)
"""

__version__ = '0.1.0'

# Functional API
from .initialization import kmeans_plusplus
from .assignments import assign
from .algorithms import refine, cost

# Estimators
from .algorithms.kmeans import KMeans
from .algorithms.lloyd import LloydRefinement

# Strategies
from .initialization import KMeansPlusPlusInit, UniformInit, FromPreviousInit
from .assignments import HardAssignment
from .updates import MeanUpdater
from .algorithms.objective import KMeansObjective

# Metrics
from .distances import (
    EuclideanDistance,
    WeightedEuclideanDistance,
    MinimumImageDistance,
    get_metric
)

# Visualization
from .visualization import (
    plot_clusters_2d,
    plot_cluster_boundaries,
    plot_cost_trajectory
)

# Convenience imports
from .base import (
    ClusterState,
    AssignmentResult,
    RefinementResult,
    RefinementStatus,
    InvalidInputError,
    InsufficientDataError,
    DimensionalityError
)

__all__ = [
    # Functional API
    'kmeans_plusplus',
    'assign',
    'refine',
    'cost',

    # Estimators
    'KMeans',
    'LloydRefinement',

    # Strategies
    'KMeansPlusPlusInit',
    'UniformInit',
    'FromPreviousInit',
    'HardAssignment',
    'MeanUpdater',
    'KMeansObjective',

    # Metrics
    'EuclideanDistance',
    'WeightedEuclideanDistance',
    'MinimumImageDistance',
    'get_metric',

    # Core data structures
    'ClusterState',
    'AssignmentResult',
    'RefinementResult',
    'RefinementStatus',

    # Errors
    'InvalidInputError',
    'InsufficientDataError',
    'DimensionalityError',

    # Visualization
    'plot_clusters_2d',
    'plot_cluster_boundaries',
    'plot_cost_trajectory',

    # Version
    '__version__'
]
