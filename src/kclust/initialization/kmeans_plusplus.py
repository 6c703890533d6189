"""
K-means++ initialization strategy with greedy local trials.

Selects initial cluster centers by D² sampling: several candidates are drawn
with probability proportional to their distance to the nearest chosen
center, and the candidate that reduces the total potential the most is kept.
"""

import math
from typing import Callable, List, Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, DistanceMetric
from ..base.exceptions import DimensionalityError
from ..base.progress import ProgressChannel
from ..distances import get_metric, compute_distances, precompute_norms
from ..utils.device import ThreadContext
from ..utils.validation import check_n_clusters, check_random_state, validate_data


def default_n_local_trials(n_clusters: int) -> int:
    """Candidates per step: 2 + floor(log(k))."""
    return 2 + int(math.log(n_clusters))


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for well-separated starting centers.

    Algorithm:
    1. Choose the first center uniformly at random
    2. For each remaining center:
       - Draw ``n_local_trials`` candidates with probability proportional to
         each point's distance to its nearest existing center
       - Keep the candidate whose addition gives the smallest potential
         (first one on exact ties)

    All random draws come from one generator, on the calling thread, in a
    fixed order, so a fixed seed reproduces the centers exactly.

    Attributes (set by ``initialize``):
        center_indices_: list of the data indices chosen as centers
        potentials_: potential after each chosen center (non-increasing)
        n_local_trials_: number of candidates drawn per step
    """

    def __init__(self, n_local_trials: Optional[int] = None,
                 metric: Union[str, DistanceMetric] = 'euclidean',
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 callback: Optional[Callable] = None,
                 verbose: int = 0):
        """
        Args:
            n_local_trials: Number of candidates to try for each center.
                           If None, uses 2 + log(k)
            metric: Distance metric or metric name
            random_state: Seed or generator; None for a randomly seeded one
            callback: Progress hook, called once per chosen center
            verbose: Verbosity level
        """
        if n_local_trials is not None and n_local_trials < 1:
            raise ValueError(f"n_local_trials must be positive, got {n_local_trials}")
        self.n_local_trials = n_local_trials
        self.metric = get_metric(metric)
        self.random_state = random_state
        self.callback = callback
        self.verbose = verbose

        self.center_indices_: List[int] = []
        self.potentials_: List[float] = []
        self.n_local_trials_: Optional[int] = None

    def initialize(self, points: Tensor, n_clusters: int,
                   **kwargs) -> Tensor:
        """Initialize cluster centers using k-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters

        Returns:
            (n_clusters, d) tensor; every row is a copy of a data point
        """
        if points.dim() != 2:
            raise DimensionalityError("input data does not have two dimensions.")

        n_points, dimension = points.shape
        check_n_clusters(n_clusters, n_points)

        generator = check_random_state(self.random_state)
        progress = ProgressChannel(self.callback)
        metric = self.metric

        if self.n_local_trials is None:
            n_local_trials = default_n_local_trials(n_clusters)
        else:
            n_local_trials = self.n_local_trials
        self.n_local_trials_ = n_local_trials

        # Reused by every distance evaluation below
        data_norms = None
        if metric.supports_precomputed_norms:
            data_norms = precompute_norms(points, metric)

        centers = torch.empty(n_clusters, dimension, dtype=points.dtype, device=points.device)
        center_indices = []
        potentials = []

        # Choose first center uniformly at random
        first_idx = torch.randint(n_points, (1,), generator=generator).item()
        centers[0] = points[first_idx]
        center_indices.append(first_idx)

        # (n,) distance of every point to its nearest chosen center
        min_distance = compute_distances(
            centers[:1], points, metric, data_norms=data_norms
        )[0]
        cumulative = torch.cumsum(min_distance, dim=0, dtype=torch.float64)
        potential = cumulative[-1].item()
        potentials.append(potential)

        if self.verbose >= 2:
            print(f"Center {0:3d}: point {first_idx}, potential = {potential:.6f}")
        progress.notify(0, potential)

        for c in range(1, n_clusters):
            # Potential-weighted uniform draws, sorted ascending
            trial_values = torch.rand(n_local_trials, generator=generator, dtype=torch.float64)
            trial_values, _ = torch.sort(trial_values * potential)

            # First index whose cumulative distance reaches the drawn value.
            # A value beyond the last prefix sum (round-off) maps to the last point.
            candidate_ids = torch.searchsorted(cumulative, trial_values.to(cumulative.device))
            candidate_ids = torch.clamp(candidate_ids, max=n_points - 1)

            # (n_trials, n) distances, then "what if this candidate were added"
            candidate_distances = compute_distances(
                points[candidate_ids], points, metric, data_norms=data_norms
            )
            candidate_distances = torch.minimum(candidate_distances, min_distance.unsqueeze(0))
            candidate_potentials = candidate_distances.sum(dim=1, dtype=torch.float64)

            # argmin keeps the first candidate among exact ties
            best = torch.argmin(candidate_potentials).item()
            best_idx = candidate_ids[best].item()

            potential = candidate_potentials[best].item()
            min_distance = candidate_distances[best].clone()
            cumulative = torch.cumsum(min_distance, dim=0, dtype=torch.float64)

            centers[c] = points[best_idx]
            center_indices.append(best_idx)
            potentials.append(potential)

            if self.verbose >= 2:
                print(f"Center {c:3d}: point {best_idx}, potential = {potential:.6f}")
            progress.notify(c, potential)

        if self.verbose:
            print(f"Initialized {n_clusters} centers, potential = {potential:.6f}")

        self.center_indices_ = center_indices
        self.potentials_ = potentials

        return centers


def kmeans_plusplus(data: Tensor,
                    n_clusters: int,
                    metric: Union[str, DistanceMetric] = 'euclidean',
                    random_state: Optional[Union[int, torch.Generator]] = None,
                    n_local_trials: Optional[int] = None,
                    n_threads: Optional[int] = None,
                    callback: Optional[Callable] = None,
                    verbose: int = 0) -> Tensor:
    """Select ``n_clusters`` initial centers from ``data`` with k-means++.

    Args:
        data: (n, d) data points (tensor, numpy array or nested list)
        n_clusters: Number of centers, 1 <= n_clusters <= n
        metric: Distance metric or metric name
        random_state: Non-negative seed for reproducible centers; None or
            negative for a randomly seeded generator
        n_local_trials: Candidates per step (None for 2 + log(k))
        n_threads: Worker threads for the distance kernels
        callback: Progress hook, called once per chosen center with no
            arguments or with ``(center_index, potential)``; any other
            signature raises TypeError
        verbose: Verbosity level

    Returns:
        (n_clusters, d) tensor of centers

    Raises:
        DimensionalityError: If ``data`` is not two-dimensional
        InsufficientDataError: If ``n_clusters`` exceeds the number of points
    """
    data = validate_data(data)
    strategy = KMeansPlusPlusInit(
        n_local_trials=n_local_trials,
        metric=metric,
        random_state=random_state,
        callback=callback,
        verbose=verbose
    )
    with ThreadContext(n_threads):
        return strategy.initialize(data, n_clusters)
