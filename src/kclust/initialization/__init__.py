"""Initialization strategies for clustering algorithms."""

from .random import UniformInit
from .kmeans_plusplus import KMeansPlusPlusInit, kmeans_plusplus, default_n_local_trials
from .from_previous import FromPreviousInit

__all__ = [
    'UniformInit',
    'KMeansPlusPlusInit',
    'kmeans_plusplus',
    'default_n_local_trials',
    'FromPreviousInit'
]
