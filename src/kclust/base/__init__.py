"""Base classes and interfaces for the kclust clustering engine."""

from .interfaces import (
    DistanceMetric,
    AssignmentStrategy,
    CenterUpdater,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    ClusterState,
    AssignmentResult,
    AlgorithmState,
    RefinementResult,
    RefinementStatus
)

from .exceptions import (
    InvalidInputError,
    InsufficientDataError,
    DimensionalityError
)

from .progress import ProgressChannel

__all__ = [
    # Interfaces
    'DistanceMetric',
    'AssignmentStrategy',
    'CenterUpdater',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'ClusterState',
    'AssignmentResult',
    'AlgorithmState',
    'RefinementResult',
    'RefinementStatus',

    # Errors
    'InvalidInputError',
    'InsufficientDataError',
    'DimensionalityError',

    # Progress
    'ProgressChannel'
]
