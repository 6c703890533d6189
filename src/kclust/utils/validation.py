"""
Input validation utilities.

Provides functions for validating and converting data before clustering.
Precondition failures are reported synchronously, before any computation.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..base.exceptions import InsufficientDataError, DimensionalityError


def _to_tensor(X, dtype: Optional[torch.dtype], device: Optional[torch.device]) -> Tensor:
    if isinstance(X, Tensor):
        pass
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.ascontiguousarray(X))
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if dtype is None:
        # Keep float32/float64 as given; everything else becomes float32
        dtype = X.dtype if X.dtype.is_floating_point else torch.float32
    return X.to(dtype=dtype, device=device)


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: Optional[torch.dtype] = None,
                  device: Optional[torch.device] = None,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1) -> Tensor:
    """Validate and convert input data to a (n_samples, n_features) tensor.

    Args:
        X: Input data (tensor, numpy array, or list)
        dtype: Target data type (None keeps a floating input dtype)
        device: Target device (None keeps the input device)
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required

    Returns:
        Validated tensor

    Raises:
        DimensionalityError: If the data is not two-dimensional
        ValueError: If the data is empty or not finite
    """
    X = _to_tensor(X, dtype, device)

    if X.dim() != 2:
        raise DimensionalityError(
            f"input data does not have two dimensions: expected (n_samples, n_features), "
            f"got {X.dim()}D with shape {tuple(X.shape)}")

    n_samples, n_features = X.shape
    if n_samples < ensure_min_samples:
        raise ValueError(f"Found {n_samples} samples, but need at least "
                         f"{ensure_min_samples}")
    if n_features < 1:
        raise ValueError("Found 0 features, but need at least 1")

    if ensure_finite and not torch.isfinite(X).all():
        raise ValueError("Input contains NaN or infinite values")

    return X


def validate_centers(centers: Union[Tensor, np.ndarray, list],
                     n_features: int,
                     dtype: Optional[torch.dtype] = None,
                     device: Optional[torch.device] = None,
                     n_clusters: Optional[int] = None) -> Tensor:
    """Validate a (k, n_features) center array against the data.

    Raises:
        DimensionalityError: Wrong rank or feature count
        ValueError: Wrong number of centers
    """
    centers = _to_tensor(centers, dtype, device)

    if centers.dim() != 2:
        raise DimensionalityError(f"centers must be two-dimensional, got {centers.dim()}D")
    if centers.shape[1] != n_features:
        raise DimensionalityError(f"centers have dimension {centers.shape[1]}, "
                                  f"but data has dimension {n_features}")
    if centers.shape[0] < 1:
        raise ValueError("At least one center is required")
    if n_clusters is not None and centers.shape[0] != n_clusters:
        raise ValueError(f"Got {centers.shape[0]} centers, but n_clusters={n_clusters}")

    return centers


def validate_assignments(assignments: Union[Tensor, np.ndarray, list],
                         n_samples: int,
                         n_clusters: int,
                         device: Optional[torch.device] = None) -> Tensor:
    """Validate hard assignments.

    Args:
        assignments: Cluster index per sample
        n_samples: Expected number of samples
        n_clusters: Number of centers; every entry must lie in [0, n_clusters)

    Returns:
        Validated (n_samples,) long tensor
    """
    if isinstance(assignments, np.ndarray):
        assignments = torch.from_numpy(np.ascontiguousarray(assignments))
    elif isinstance(assignments, (list, tuple)):
        assignments = torch.tensor(assignments)
    elif not isinstance(assignments, Tensor):
        raise TypeError(f"Cannot convert {type(assignments)} to assignment tensor")

    if assignments.dtype.is_floating_point:
        raise TypeError(f"Assignments must be integers, got {assignments.dtype}")
    assignments = assignments.to(dtype=torch.long, device=device)

    if assignments.dim() != 1:
        raise DimensionalityError(f"Assignments must be 1D, got {assignments.dim()}D")
    if len(assignments) != n_samples:
        raise ValueError(f"Expected {n_samples} assignments, got {len(assignments)}")
    if n_samples > 0 and (assignments.min() < 0 or assignments.max() >= n_clusters):
        raise ValueError(f"Assignments must lie in [0, {n_clusters})")

    return assignments


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        TypeError: If not an integer
        ValueError: If not positive
        InsufficientDataError: If larger than the number of samples
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise ValueError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InsufficientDataError(
            f"not enough data to initialize desired number of centers: "
            f"provided samples ({n_samples}) < n_clusters ({n_clusters})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create a reproducible generator.

    Args:
        random_state: Non-negative seed, a generator (returned as-is), or
            None/negative for a generator seeded from system entropy

    Returns:
        torch.Generator
    """
    if isinstance(random_state, torch.Generator):
        return random_state

    generator = torch.Generator()
    if random_state is None:
        generator.seed()
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        if random_state < 0:
            generator.seed()
        else:
            generator.manual_seed(int(random_state))
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")
    return generator


def check_n_threads(n_threads: Optional[int]) -> Optional[int]:
    """Validate a worker thread count (None leaves torch's setting alone)."""
    if n_threads is None:
        return None
    if isinstance(n_threads, bool) or not isinstance(n_threads, (int, np.integer)):
        raise TypeError(f"n_threads must be int or None, got {type(n_threads)}")
    if n_threads < 1:
        raise ValueError(f"n_threads must be positive, got {n_threads}")
    return int(n_threads)


def check_iteration_params(max_iter: int, tol: float) -> None:
    """Validate refinement budget and tolerance."""
    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)):
        raise TypeError(f"max_iter must be int, got {type(max_iter)}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")
    if tol < 0:
        raise ValueError(f"tol must be >= 0, got {tol}")
