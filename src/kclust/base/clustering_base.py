"""
Base class for center-based clustering estimators.

Provides the common skeleton: validate data, build components, seed,
refine, then expose the fitted state with an sklearn-style interface.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union
import time
import torch
from torch import Tensor
import numpy as np

from .interfaces import (
    AssignmentStrategy, CenterUpdater, InitializationStrategy,
    ConvergenceCriterion, ClusteringObjective
)
from .data_structures import AlgorithmState, RefinementResult
from .exceptions import DimensionalityError
from ..utils.device import (
    parse_device, get_device_info, estimate_memory_usage, ThreadContext
)
from ..utils.validation import (
    validate_data, check_n_clusters, check_iteration_params
)


class BaseClusteringAlgorithm:
    """Base class implementing seed-then-refine fitting.

    Subclasses need to specify:
    - Assignment strategy
    - Center update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function
    and how to run refinement from a set of initial centers.
    """

    _param_names = ('n_clusters', 'max_iter', 'tol', 'n_threads',
                    'verbose', 'random_state', 'device')

    def __init__(self,
                 n_clusters: int,
                 max_iter: int = 100,
                 tol: float = 1e-5,
                 n_threads: Optional[int] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            n_clusters: Number of clusters K
            max_iter: Maximum refinement iterations
            tol: Convergence tolerance
            n_threads: Worker threads for the distance kernels (None keeps
                the torch default)
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Seed or generator for reproducibility
            device: Torch device (None for CPU, 'auto' for best available)
        """
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.tol = tol
        self.n_threads = n_threads
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)

        # These will be set by subclasses
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[CenterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.converged_ = False
        self.history_: List[AlgorithmState] = []
        self.cost_trajectory_: List[float] = []
        self.initial_centers_: Optional[Tensor] = None
        self.cluster_centers_: Optional[Tensor] = None
        self.labels_: Optional[Tensor] = None
        self.inertia_: Optional[float] = None

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    @abstractmethod
    def _refine(self, X: Tensor, initial_centers: Tensor,
                data_norms: Optional[Tensor] = None) -> RefinementResult:
        """Run refinement from ``initial_centers`` using the components."""
        pass

    def fit(self, X: Union[Tensor, np.ndarray], y: Optional[Tensor] = None) -> 'BaseClusteringAlgorithm':
        """Fit the clustering model.

        Args:
            X: (n, d) data
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        return self._fit(X)

    def fit_predict(self, X: Union[Tensor, np.ndarray], y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster assignments of the training data."""
        self._fit(X)
        return self.labels_

    def predict(self, X: Union[Tensor, np.ndarray]) -> Tensor:
        """Predict cluster assignments for new data.

        Args:
            X: (n, d) data

        Returns:
            (n,) tensor of cluster assignments
        """
        self._check_fitted()
        X = self._validate_data(X)
        with ThreadContext(self.n_threads):
            result = self.assignment_strategy.compute_assignments(
                X, self.cluster_centers_, data_norms=self._data_norms(X)
            )
        return result.assignments

    def _fit(self, X: Union[Tensor, np.ndarray]) -> 'BaseClusteringAlgorithm':
        """Internal fit method: seed, refine, then store the fitted state."""
        self.fitted_ = False
        X = self._validate_data(X)
        check_n_clusters(self.n_clusters, X.shape[0])
        check_iteration_params(self.max_iter, self.tol)

        self._create_components()

        with ThreadContext(self.n_threads):
            if self.verbose:
                print(f"Initializing {self.n_clusters} clusters...")
            if self.verbose >= 2:
                self._report_resources(X)

            start_time = time.time()
            initial_centers = self.initialization_strategy.initialize(X, self.n_clusters)
            self.initial_centers_ = initial_centers.clone()

            data_norms = self._data_norms(X)
            result = self._refine(X, initial_centers, data_norms)

            # Labels against the final centers, not the ones before the last update
            final = self.assignment_strategy.compute_assignments(
                X, result.centers, data_norms=data_norms
            )
            inertia = self.objective.compute(X, result.centers, final.assignments).item()

        self.cluster_centers_ = result.centers
        self.labels_ = final.assignments
        self.inertia_ = inertia
        self.n_iter_ = result.n_iter
        self.converged_ = result.converged
        self.cost_trajectory_ = list(result.cost_trajectory)
        self.history_ = list(result.history)

        if self.verbose:
            print(f"Total fitting time: {time.time() - start_time:.3f}s")

        self.fitted_ = True
        return self

    def _data_norms(self, X: Tensor) -> Optional[Tensor]:
        """Precomputed norms of X for the assignment metric, if it supports them."""
        metric = getattr(self.assignment_strategy, 'metric', None)
        if metric is None or not metric.supports_precomputed_norms:
            return None
        return metric.precompute_norms(X)

    def _report_resources(self, X: Tensor) -> None:
        info = get_device_info(X.device)
        estimate = estimate_memory_usage(X.shape[0], X.shape[1], self.n_clusters, dtype=X.dtype)
        print(f"Device: {info['device']} ({info['num_threads']} threads), "
              f"estimated memory: {estimate['total'] / 1024 ** 2:.1f} MB")

    def _validate_data(self, X: Union[Tensor, np.ndarray]) -> Tensor:
        """Validate and prepare input data."""
        X = validate_data(X, device=self.device)
        if self.fitted_ and X.shape[1] != self.cluster_centers_.shape[1]:
            raise DimensionalityError(
                f"X has {X.shape[1]} features, but the model was fitted with "
                f"{self.cluster_centers_.shape[1]}")
        if self.fitted_ and X.dtype != self.cluster_centers_.dtype:
            X = X.to(self.cluster_centers_.dtype)
        return X

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted before use; call fit first")

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {name: getattr(self, name) for name in self._param_names}

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key not in self._param_names:
                raise ValueError(f"Invalid parameter {key!r} for {type(self).__name__}")
            if key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self
