# tests/test_visualization.py
"""
Plot helpers render without error on the Agg backend.
"""

import matplotlib.pyplot as plt
import numpy as np
import pytest
import torch

from kclust import KMeans
from kclust.initialization import KMeansPlusPlusInit
from kclust.visualization import plot_clusters_2d, plot_cluster_boundaries, plot_cost_trajectory

from data_gen import make_blobs


@pytest.fixture
def fitted(seed_all):
    X, _, _ = make_blobs(n_per=30, seed=seed_all)
    return X, KMeans(n_clusters=3, random_state=0).fit(X)


def test_plot_clusters_2d(fitted):
    X, km = fitted
    ax = plot_clusters_2d(X, km.labels_, centers=km.cluster_centers_, title="blobs")
    assert ax.get_title() == "blobs"
    # One scatter per cluster plus the centers
    assert len(ax.collections) == 4
    plt.close("all")


def test_plot_clusters_2d_rejects_3d():
    with pytest.raises(ValueError):
        plot_clusters_2d(np.zeros((5, 3)), np.zeros(5, dtype=int))


def test_plot_cluster_boundaries(fitted):
    X, km = fitted
    fig, ax = plt.subplots()
    out = plot_cluster_boundaries(torch.from_numpy(X), km, ax=ax, resolution=20)
    assert out is ax
    assert ax.get_title() == "Nearest-Center Cells"
    plt.close(fig)


def test_plot_cost_trajectory(fitted):
    X, km = fitted
    ax = plot_cost_trajectory(km.cost_trajectory_, log_scale=True)
    (line,) = ax.get_lines()
    assert len(line.get_xdata()) == km.n_iter_
    plt.close("all")

    init = KMeansPlusPlusInit(random_state=0)
    init.initialize(torch.from_numpy(X), 3)
    ax = plot_cost_trajectory(init.potentials_, xlabel="Center", ylabel="Potential")
    assert ax.get_ylabel() == "Potential"
    plt.close("all")


def test_plot_cost_trajectory_rejects_empty():
    with pytest.raises(ValueError):
        plot_cost_trajectory([])
