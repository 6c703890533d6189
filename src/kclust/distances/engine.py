"""
Dense distance-matrix kernel shared by seeding, assignment and refinement.

The matrix is laid out (M, N): one row per query vector (candidate or
center), one column per data point. Columns are processed in batches so
that large data sets never materialize the full broadcast intermediates;
each batch is a single torch kernel running on the intra-op thread pool.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric
from ..base.exceptions import DimensionalityError
from ..utils.device import get_batch_size


def precompute_norms(data: Tensor, metric: DistanceMetric) -> Tensor:
    """Per-point auxiliary values (squared norms) for repeated evaluation.

    Args:
        data: (n, d) data points
        metric: Metric supporting precomputed norms

    Returns:
        (n,) tensor, computed once per run and read-only afterwards
    """
    if not metric.supports_precomputed_norms:
        raise ValueError(f"{metric!r} does not support precomputed norms")
    return metric.precompute_norms(data)


def compute_distances(queries: Tensor,
                      data: Tensor,
                      metric: DistanceMetric,
                      query_norms: Optional[Tensor] = None,
                      data_norms: Optional[Tensor] = None,
                      batch_size: Optional[int] = None) -> Tensor:
    """Compute the (M, N) distance matrix between queries and data.

    When the metric supports it and ``data_norms`` is given, the squared-norm
    expansion is used and only the cross term is computed per pair; query
    norms are computed here if not supplied. Otherwise every pair is
    evaluated directly. Both paths agree within floating-point tolerance.

    Args:
        queries: (m, d) query vectors
        data: (n, d) data vectors
        metric: Distance metric
        query_norms: Optional (m,) precomputed norms of the queries
        data_norms: Optional (n,) precomputed norms of the data
        batch_size: Data columns per kernel launch (None for automatic)

    Returns:
        (m, n) tensor of distances
    """
    if queries.dim() != 2 or data.dim() != 2:
        raise DimensionalityError(f"Expected 2D query and data tensors, "
                                  f"got {queries.dim()}D and {data.dim()}D")
    if queries.shape[1] != data.shape[1]:
        raise DimensionalityError(f"Query dimension {queries.shape[1]} does not match "
                                  f"data dimension {data.shape[1]}")

    n_queries, dimension = queries.shape
    n_points = data.shape[0]

    use_norms = metric.supports_precomputed_norms and data_norms is not None
    if use_norms:
        if data_norms.shape != (n_points,):
            raise ValueError(f"data_norms must have shape ({n_points},), got {tuple(data_norms.shape)}")
        if query_norms is None:
            query_norms = metric.precompute_norms(queries)

    if batch_size is None:
        # The direct path broadcasts over the feature axis as well
        rows = n_queries if use_norms else n_queries * dimension
        batch_size = get_batch_size(n_points, rows, data.device, data.dtype)

    if batch_size >= n_points:
        if use_norms:
            return metric.compute_from_norms(queries, data, query_norms, data_norms)
        return metric.compute(queries, data)

    distances = torch.empty(n_queries, n_points, dtype=data.dtype, device=data.device)
    for start in range(0, n_points, batch_size):
        stop = min(start + batch_size, n_points)
        if use_norms:
            distances[:, start:stop] = metric.compute_from_norms(
                queries, data[start:stop], query_norms, data_norms[start:stop]
            )
        else:
            distances[:, start:stop] = metric.compute(queries, data[start:stop])

    return distances
