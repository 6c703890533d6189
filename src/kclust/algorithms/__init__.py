"""Clustering algorithms: cost, Lloyd refinement and the K-means estimator."""

from .objective import KMeansObjective, cost
from .lloyd import LloydRefinement, refine
from .kmeans import KMeans

__all__ = [
    'KMeansObjective',
    'cost',
    'LloydRefinement',
    'refine',
    'KMeans'
]
