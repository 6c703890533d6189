"""
Cluster visualization utilities.

Plots 2D clusterings with their centers and nearest-center cells, and
the per-iteration diagnostics recorded during seeding and refinement.
"""

from typing import Optional, Union, List, Any, Sequence
import torch
from torch import Tensor
import matplotlib.pyplot as plt
import numpy as np


def _to_numpy(X: Union[Tensor, np.ndarray, list]) -> np.ndarray:
    if isinstance(X, Tensor):
        return X.detach().cpu().numpy()
    return np.asarray(X)


def plot_clusters_2d(X: Union[Tensor, np.ndarray],
                     labels: Union[Tensor, np.ndarray],
                     centers: Optional[Union[Tensor, np.ndarray]] = None,
                     ax: Optional[plt.Axes] = None,
                     colors: Optional[List[str]] = None,
                     alpha: float = 0.7,
                     center_marker: str = 'X',
                     center_size: int = 200,
                     point_size: int = 50,
                     show_legend: bool = True,
                     title: Optional[str] = None) -> plt.Axes:
    """Plot 2D clustering results.

    Args:
        X: (n, 2) data points
        labels: (n,) cluster labels
        centers: Optional (k, 2) cluster centers
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        center_marker: Marker for centers
        center_size: Size of center markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    X_np = _to_numpy(X)
    labels_np = _to_numpy(labels)
    if X_np.ndim != 2 or X_np.shape[1] != 2:
        raise ValueError(f"plot_clusters_2d needs (n, 2) data, got shape {X_np.shape}")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    unique_labels = np.unique(labels_np)
    n_clusters = len(unique_labels)

    if colors is None:
        cmap = plt.get_cmap('tab10' if n_clusters <= 10 else 'tab20')
        colors = [cmap(i % cmap.N) for i in range(n_clusters)]

    for i, label in enumerate(unique_labels):
        mask = labels_np == label
        ax.scatter(X_np[mask, 0], X_np[mask, 1],
                   c=[colors[i % len(colors)]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=f'Cluster {label}')

    if centers is not None:
        centers_np = _to_numpy(centers)
        ax.scatter(centers_np[:, 0], centers_np[:, 1],
                   c='black',
                   marker=center_marker,
                   s=center_size,
                   edgecolors='white',
                   linewidth=2,
                   label='Centers',
                   zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_cluster_boundaries(X: Union[Tensor, np.ndarray],
                            model: Any,
                            ax: Optional[plt.Axes] = None,
                            resolution: int = 100,
                            alpha: float = 0.3,
                            show_data: bool = True,
                            title: Optional[str] = None) -> plt.Axes:
    """Shade the nearest-center cell of every grid location.

    Args:
        X: (n, 2) data points
        model: Fitted estimator with ``predict`` and ``cluster_centers_``
        ax: Matplotlib axes
        resolution: Grid points per axis
        alpha: Cell transparency
        show_data: Whether to overlay the data points
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 8))

    X_np = _to_numpy(X)

    x_min, x_max = X_np[:, 0].min() - 0.5, X_np[:, 0].max() + 0.5
    y_min, y_max = X_np[:, 1].min() - 0.5, X_np[:, 1].max() + 0.5

    xx, yy = np.meshgrid(np.linspace(x_min, x_max, resolution),
                         np.linspace(y_min, y_max, resolution))

    centers = model.cluster_centers_
    mesh_points = torch.tensor(np.c_[xx.ravel(), yy.ravel()],
                               dtype=centers.dtype, device=centers.device)

    Z = _to_numpy(model.predict(mesh_points)).reshape(xx.shape)
    ax.contourf(xx, yy, Z, alpha=alpha, cmap='viridis')

    if show_data:
        plot_clusters_2d(X, model.predict(X), centers=centers, ax=ax, show_legend=False)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')
    ax.set_title(title or 'Nearest-Center Cells')

    return ax


def plot_cost_trajectory(costs: Sequence[float],
                         ax: Optional[plt.Axes] = None,
                         log_scale: bool = False,
                         xlabel: str = 'Iteration',
                         ylabel: str = 'Cost',
                         title: Optional[str] = None) -> plt.Axes:
    """Plot a cost (or seeding potential) sequence against its index.

    Works with ``RefinementResult.cost_trajectory``,
    ``KMeans.cost_trajectory_`` and ``KMeansPlusPlusInit.potentials_``.
    """
    values = np.asarray(list(costs), dtype=np.float64)
    if values.ndim != 1 or values.size == 0:
        raise ValueError("costs must be a non-empty 1D sequence")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    ax.plot(np.arange(values.size), values, marker='o', linewidth=1.5, markersize=4)
    if log_scale and (values > 0).all():
        ax.set_yscale('log')

    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)

    return ax
