# tests/utils.py
"""
Small, reusable helpers used across the kclust test suite.

Functions:
- to_numpy(x): tensor or array-like to numpy.
- sort_rows(A): rows in lexicographic order, for comparing center sets.
- match_centers(A, B): best row permutation of B onto A and the max abs error.
- labels_equal_up_to_perm(y1, y2): same partition, possibly relabeled.
- perm_invariant_accuracy(y_pred, y_true): best accuracy over label relabelings.
- is_non_increasing(values, rtol): monotonicity check with float slack.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import itertools
import json
import time
from contextlib import contextmanager
from typing import Any, Dict, Sequence, Tuple, Union

import numpy as np
import torch

ArrayLike = Union[np.ndarray, torch.Tensor]


def to_numpy(x: ArrayLike) -> np.ndarray:
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def sort_rows(A: ArrayLike) -> np.ndarray:
    """Rows of A in lexicographic order."""
    A_np = to_numpy(A)
    order = np.lexsort(A_np.T[::-1])
    return A_np[order]


def match_centers(A: ArrayLike, B: ArrayLike) -> Tuple[Tuple[int, ...], float]:
    """
    Best permutation p of B's rows onto A's rows (B[p[i]] matched to A[i]).

    Returns
    -------
    (perm, max_abs_err)

    Notes
    -----
    O(k!) brute force; tests keep k small.
    """
    A_np = to_numpy(A).astype(np.float64)
    B_np = to_numpy(B).astype(np.float64)
    if A_np.shape != B_np.shape:
        raise ValueError(f"Shape mismatch: {A_np.shape} vs {B_np.shape}")
    k = A_np.shape[0]

    best_err = np.inf
    best_perm: Tuple[int, ...] = tuple(range(k))
    for perm in itertools.permutations(range(k)):
        err = float(np.max(np.abs(A_np - B_np[list(perm)]))) if k else 0.0
        if err < best_err:
            best_err = err
            best_perm = perm
    return best_perm, best_err


def labels_equal_up_to_perm(y1: ArrayLike, y2: ArrayLike) -> bool:
    """True if y1 and y2 describe the same partition."""
    a = to_numpy(y1)
    b = to_numpy(y2)
    if a.shape != b.shape:
        return False
    mapping: Dict[int, int] = {}
    reverse: Dict[int, int] = {}
    for u, v in zip(a.tolist(), b.tolist()):
        if mapping.setdefault(u, v) != v or reverse.setdefault(v, u) != u:
            return False
    return True


def perm_invariant_accuracy(y_pred: ArrayLike, y_true: ArrayLike) -> float:
    """
    Best accuracy over relabelings of y_pred.

    Returns
    -------
    float in [0, 1]
    """
    y_pred = to_numpy(y_pred)
    y_true = to_numpy(y_true)
    if y_pred.shape != y_true.shape or y_pred.ndim != 1:
        raise ValueError(f"Expected matching 1D labels, got {y_pred.shape} and {y_true.shape}")
    labels = np.unique(np.concatenate([y_pred, y_true]))
    best = 0.0
    for perm in itertools.permutations(labels):
        mapping = dict(zip(labels.tolist(), perm))
        relabeled = np.array([mapping[v] for v in y_pred.tolist()])
        best = max(best, float(np.mean(relabeled == y_true)))
    return best


def is_non_increasing(values: Sequence[float], rtol: float = 1e-6) -> bool:
    """Each value is at most the previous one, up to relative slack rtol."""
    vals = [float(v) for v in values]
    return all(b <= a + rtol * max(abs(a), 1.0) for a, b in zip(vals, vals[1:]))


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("fit", {"n": 400, "d": 3, "K": 2}):
    ...     model.fit(X)

    Output
    ------
    [timing] fit {"n":400,"d":3,"K":2} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = " " + json.dumps(meta, separators=(",", ":"), default=str) if meta else ""
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
