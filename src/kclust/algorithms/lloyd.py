"""
Lloyd refinement: alternate nearest-center assignment and mean updates
until the convergence test passes or the iteration budget runs out.
"""

from typing import Callable, Optional, Union
import time
import warnings
from torch import Tensor

from ..base.interfaces import (
    AssignmentStrategy, CenterUpdater, ConvergenceCriterion,
    ClusteringObjective, DistanceMetric
)
from ..base.data_structures import (
    AlgorithmState, RefinementResult, RefinementStatus
)
from ..base.progress import ProgressChannel
from ..assignments.hard import HardAssignment
from ..updates.mean import MeanUpdater
from ..distances import get_metric, precompute_norms
from ..utils.convergence import make_criterion
from ..utils.device import ThreadContext
from ..utils.validation import (
    validate_data, validate_centers, check_n_clusters, check_iteration_params
)
from .objective import KMeansObjective


class LloydRefinement:
    """Refinement loop over pluggable components.

    The loop is sequential; only the kernels inside each step run in
    parallel. The centers it is given are copied and never modified.

    Per iteration:
    1. assign every point to its nearest center
    2. move each center to the mean of its points (empty clusters keep
       their previous center)
    3. evaluate the cost of the new centers under this assignment
    4. report progress, then test convergence
    """

    def __init__(self,
                 assignment_strategy: AssignmentStrategy,
                 update_strategy: CenterUpdater,
                 objective: ClusteringObjective,
                 convergence_criterion: ConvergenceCriterion,
                 max_iter: int = 100,
                 callback: Optional[Callable] = None,
                 verbose: int = 0):
        self.assignment_strategy = assignment_strategy
        self.update_strategy = update_strategy
        self.objective = objective
        self.convergence_criterion = convergence_criterion
        self.max_iter = max_iter
        self.callback = callback
        self.verbose = verbose
        self.status = RefinementStatus.RUNNING

    def run(self, points: Tensor, initial_centers: Tensor,
            data_norms: Optional[Tensor] = None) -> RefinementResult:
        """Refine ``initial_centers`` on ``points``.

        Args:
            points: (n, d) validated data
            initial_centers: (k, d) validated centers
            data_norms: Optional (n,) precomputed norms of ``points``

        Returns:
            RefinementResult
        """
        progress = ProgressChannel(self.callback)
        self.convergence_criterion.reset()
        self.status = RefinementStatus.RUNNING

        centers = initial_centers.clone()
        assignments = None
        cost_trajectory = []
        history = []
        n_iter = 0
        converged = False

        start_time = time.time()

        for iteration in range(self.max_iter):
            iter_start_time = time.time()

            # Assignment step
            result = self.assignment_strategy.compute_assignments(
                points, centers, data_norms=data_norms
            )

            # Update step
            new_centers = self.update_strategy.update(centers, points, result.assignments)
            n_empty = (result.count_per_cluster() == 0).sum().item()

            # Compute objective
            cost_value = self.objective.compute(points, new_centers, result.assignments).item()

            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'cost': cost_value,
                'assignments': result.assignments,
                'centers': new_centers,
                'previous_centers': centers
            })

            centers = new_centers
            assignments = result.assignments
            n_iter = iteration + 1

            iter_time = time.time() - iter_start_time
            cost_trajectory.append(cost_value)
            history.append(AlgorithmState(
                iteration=iteration,
                cost=cost_value,
                n_empty_clusters=n_empty,
                converged=converged,
                elapsed=iter_time
            ))

            # Logging
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                print(f"Iteration {iteration:3d}: cost = {cost_value:.6f} "
                      f"({iter_time:.3f}s)")
            if self.verbose >= 2 and n_empty:
                print(f"Iteration {iteration:3d}: {n_empty} empty cluster(s) kept their centers")

            progress.notify(iteration, cost_value)

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration}")
                break

        if converged:
            self.status = RefinementStatus.CONVERGED
        else:
            self.status = RefinementStatus.ITERATION_LIMIT_REACHED

        total_time = time.time() - start_time

        if self.verbose:
            if not converged:
                warnings.warn(f"Failed to converge after {self.max_iter} iterations")
            print(f"Total refinement time: {total_time:.3f}s")

        return RefinementResult(
            centers=centers,
            n_iter=n_iter,
            converged=converged,
            cost_trajectory=cost_trajectory,
            assignments=assignments,
            status=self.status,
            history=history
        )


def refine(data: Tensor,
           initial_centers: Tensor,
           metric: Union[str, DistanceMetric] = 'euclidean',
           n_threads: Optional[int] = None,
           max_iter: int = 100,
           tol: float = 1e-5,
           callback: Optional[Callable] = None,
           convergence: Union[str, ConvergenceCriterion] = 'cost',
           verbose: int = 0) -> RefinementResult:
    """Refine centers to a local optimum with Lloyd's algorithm.

    Args:
        data: (n, d) data points
        initial_centers: (k, d) starting centers, k <= n; not modified
        metric: Distance metric or metric name
        n_threads: Worker threads for the distance kernels
        max_iter: Iteration budget
        tol: Convergence tolerance
        callback: Progress hook, called once per iteration with no
            arguments or with ``(iteration, cost)``; any other signature
            raises TypeError
        convergence: 'cost' (relative cost change), 'centers' (squared
            center shift), 'assignments' (fraction of points that moved),
            or a ConvergenceCriterion
        verbose: Verbosity level

    Returns:
        RefinementResult; unpacks as ``centers, n_iter, converged, costs``
    """
    metric = get_metric(metric)
    data = validate_data(data)
    centers = validate_centers(initial_centers, data.shape[1], dtype=data.dtype, device=data.device)
    check_n_clusters(centers.shape[0], data.shape[0])
    check_iteration_params(max_iter, tol)

    refinement = LloydRefinement(
        assignment_strategy=HardAssignment(metric),
        update_strategy=MeanUpdater(),
        objective=KMeansObjective(metric),
        convergence_criterion=make_criterion(convergence, tol),
        max_iter=max_iter,
        callback=callback,
        verbose=verbose
    )

    with ThreadContext(n_threads):
        data_norms = None
        if metric.supports_precomputed_norms:
            data_norms = precompute_norms(data, metric)
        return refinement.run(data, centers, data_norms=data_norms)
