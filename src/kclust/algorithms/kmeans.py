"""
K-means clustering estimator.

Seeds with k-means++ (or uniform sampling, or given centers) and refines
with Lloyd's algorithm, using the modular components.
"""

from typing import Callable, Optional, Union
import numpy as np
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import RefinementResult
from ..base.interfaces import ConvergenceCriterion, DistanceMetric
from ..assignments.hard import HardAssignment
from ..distances import get_metric, compute_distances
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.random import UniformInit
from ..initialization.from_previous import FromPreviousInit
from ..updates.mean import MeanUpdater
from ..utils.convergence import make_criterion
from ..utils.device import ThreadContext
from .lloyd import LloydRefinement
from .objective import KMeansObjective


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Classic K-means that partitions data into K clusters by minimizing
    the sum of distances (squared Euclidean by default) to the nearest
    center.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    init : str or array-like, default='k-means++'
        Initialization method:
        - 'k-means++' : k-means++ with greedy local trials
        - 'uniform' (or 'random') : k distinct data points
        - array of shape (n_clusters, n_features) : Use as initial centers
    max_iter : int, default=100
        Maximum number of iterations
    tol : float, default=1e-5
        Convergence tolerance, interpreted by ``convergence``
    metric : str or DistanceMetric, default='euclidean'
        Distance metric
    n_local_trials : int, optional
        Candidates per k-means++ step (None for 2 + log(k))
    convergence : str or ConvergenceCriterion, default='cost'
        'cost', 'centers' or 'assignments'
    n_threads : int, optional
        Worker threads for the distance kernels
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed for reproducible seeding
    device : str or torch.device, optional
        Device for computation (CPU/GPU)
    init_callback, iteration_callback : callable, optional
        Progress hooks for seeding and refinement

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centers
    labels_ : Tensor of shape (n_samples,)
        Nearest-center assignment of the training data to the final centers
    inertia_ : float
        Cost of the training data under ``labels_``
    n_iter_ : int
        Number of iterations run
    converged_ : bool
        Whether the convergence test passed within ``max_iter``
    cost_trajectory_ : list of float
        Cost after each iteration
    initial_centers_ : Tensor of shape (n_clusters, n_features)
        Centers refinement started from
    """

    _param_names = BaseClusteringAlgorithm._param_names + (
        'init', 'metric', 'n_local_trials', 'convergence',
        'init_callback', 'iteration_callback'
    )

    def __init__(self,
                 n_clusters: int,
                 init: Union[str, Tensor, np.ndarray, list] = 'k-means++',
                 max_iter: int = 100,
                 tol: float = 1e-5,
                 metric: Union[str, DistanceMetric] = 'euclidean',
                 n_local_trials: Optional[int] = None,
                 convergence: Union[str, ConvergenceCriterion] = 'cost',
                 n_threads: Optional[int] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None,
                 init_callback: Optional[Callable] = None,
                 iteration_callback: Optional[Callable] = None):
        """Initialize K-means algorithm."""
        super().__init__(
            n_clusters=n_clusters,
            max_iter=max_iter,
            tol=tol,
            n_threads=n_threads,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.init = init
        self.metric = metric
        self.n_local_trials = n_local_trials
        self.convergence = convergence
        self.init_callback = init_callback
        self.iteration_callback = iteration_callback

    def _create_components(self) -> None:
        """Create K-means specific components."""
        metric = get_metric(self.metric)

        self.assignment_strategy = HardAssignment(metric)
        self.update_strategy = MeanUpdater()

        # Initialization
        if isinstance(self.init, str):
            if self.init == 'k-means++':
                self.initialization_strategy = KMeansPlusPlusInit(
                    n_local_trials=self.n_local_trials,
                    metric=metric,
                    random_state=self.random_state,
                    callback=self.init_callback,
                    verbose=self.verbose
                )
            elif self.init in ('uniform', 'random'):
                self.initialization_strategy = UniformInit(random_state=self.random_state)
            else:
                raise ValueError(f"Unknown init method: {self.init}")
        else:
            # Custom initial centers provided
            self.initialization_strategy = FromPreviousInit(self.init)

        self.convergence_criterion = make_criterion(self.convergence, self.tol)
        self.objective = KMeansObjective(metric)

    def _refine(self, X: Tensor, initial_centers: Tensor,
                data_norms: Optional[Tensor] = None) -> RefinementResult:
        refinement = LloydRefinement(
            assignment_strategy=self.assignment_strategy,
            update_strategy=self.update_strategy,
            objective=self.objective,
            convergence_criterion=self.convergence_criterion,
            max_iter=self.max_iter,
            callback=self.iteration_callback,
            verbose=self.verbose
        )
        return refinement.run(X, initial_centers, data_norms=data_norms)

    def transform(self, X: Union[Tensor, np.ndarray]) -> Tensor:
        """Distances from each point to every center.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data

        Returns
        -------
        distances : Tensor of shape (n_samples, n_clusters)
        """
        self._check_fitted()
        X = self._validate_data(X)
        with ThreadContext(self.n_threads):
            distances = compute_distances(self.cluster_centers_, X, self.assignment_strategy.metric,
                                          data_norms=self._data_norms(X))
        return distances.T.contiguous()

    def fit_transform(self, X: Union[Tensor, np.ndarray], y: Optional[Tensor] = None) -> Tensor:
        """Fit, then return the (n_samples, n_clusters) distance matrix."""
        return self.fit(X).transform(X)

    def score(self, X: Union[Tensor, np.ndarray], y: Optional[Tensor] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data
        y : Ignored
            Not used

        Returns
        -------
        score : float
            Negative of the sum of distances to the nearest centers
        """
        labels = self.predict(X)
        X = self._validate_data(X)
        with ThreadContext(self.n_threads):
            return -self.objective.compute(X, self.cluster_centers_, labels).item()
