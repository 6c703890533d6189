"""Visualization utilities for clustering results."""

from .plot_clusters import (
    plot_clusters_2d,
    plot_cluster_boundaries,
    plot_cost_trajectory
)

__all__ = [
    'plot_clusters_2d',
    'plot_cluster_boundaries',
    'plot_cost_trajectory'
]
