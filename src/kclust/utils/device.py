"""
Device and thread management utilities.

Provides device selection, worker-thread control for torch's intra-op
thread pool, and batch sizing for distance kernels.
"""

import math
from typing import Optional, Union, Dict, Any
import torch
import warnings

from .validation import check_n_threads


def get_default_device() -> torch.device:
    """Get the default device based on availability.

    Returns:
        Default device (cuda if available, else cpu)
    """
    if torch.cuda.is_available():
        return torch.device('cuda')
    elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return torch.device('mps')
    else:
        return torch.device('cpu')


def parse_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Parse device specification.

    Args:
        device: Device specification
            - None: Use CPU
            - 'auto': Use best available
            - 'cpu': Use CPU
            - 'cuda': Use default CUDA device
            - 'cuda:X': Use CUDA device X
            - 'mps': Use Apple Metal Performance Shaders
            - torch.device: Use as-is

    Returns:
        Parsed device
    """
    if device is None:
        return torch.device('cpu')

    if device == 'auto':
        return get_default_device()

    if isinstance(device, torch.device):
        return device

    if isinstance(device, str):
        if device == 'cpu':
            return torch.device('cpu')
        elif device.startswith('cuda'):
            if not torch.cuda.is_available():
                warnings.warn("CUDA not available, falling back to CPU")
                return torch.device('cpu')
            return torch.device(device)
        elif device == 'mps':
            if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                return torch.device('mps')
            else:
                warnings.warn("MPS not available, falling back to CPU")
                return torch.device('cpu')
        else:
            raise ValueError(f"Unknown device: {device}")
    else:
        raise TypeError(f"Device must be str or torch.device, got {type(device)}")


def _bytes_per_element(dtype: torch.dtype) -> int:
    if dtype == torch.float64:
        return 8
    elif dtype in (torch.float16, torch.bfloat16):
        return 2
    return 4


def estimate_memory_usage(n_samples: int, n_features: int, n_clusters: int,
                          n_local_trials: Optional[int] = None,
                          dtype: torch.dtype = torch.float32) -> Dict[str, int]:
    """Estimate memory usage of a seeding + refinement run.

    Args:
        n_samples: Number of samples
        n_features: Number of features
        n_clusters: Number of clusters
        n_local_trials: Candidates per seeding step (None for 2 + log(k))
        dtype: Data type

    Returns:
        Dictionary with memory estimates in bytes
    """
    bytes_per_element = _bytes_per_element(dtype)
    if n_local_trials is None:
        n_local_trials = 2 + int(math.log(n_clusters))

    estimates = {}
    estimates['data'] = n_samples * n_features * bytes_per_element
    estimates['norms'] = n_samples * bytes_per_element
    estimates['centers'] = n_clusters * n_features * bytes_per_element
    # Seeding keeps the running minimum plus a float64 prefix sum
    estimates['seeding'] = n_samples * (bytes_per_element + 8)
    estimates['candidates'] = n_local_trials * n_samples * bytes_per_element
    estimates['distances'] = n_samples * n_clusters * bytes_per_element
    estimates['labels'] = n_samples * 8  # int64

    estimates['total'] = sum(estimates.values())

    return estimates


def get_batch_size(n_samples: int, n_rows: int,
                   device: torch.device,
                   dtype: torch.dtype = torch.float32,
                   target_memory_mb: float = 256) -> int:
    """Number of data columns per distance-matrix batch.

    Args:
        n_samples: Total number of data points (columns)
        n_rows: Number of query vectors (rows) in the distance matrix
        device: Target device
        dtype: Data type
        target_memory_mb: Target memory usage per batch in MB

    Returns:
        Recommended batch size
    """
    # Cross term plus result, per column
    bytes_per_column = 2 * max(1, n_rows) * _bytes_per_element(dtype)
    target_bytes = target_memory_mb * 1024 * 1024

    # For GPU, be more conservative
    if device.type == 'cuda':
        free, _ = torch.cuda.mem_get_info(device)
        target_bytes = min(target_bytes, free * 0.8)  # Leave 20% buffer

    batch_size = int(target_bytes / bytes_per_column)
    batch_size = max(1, min(batch_size, n_samples))

    # Round to nice number
    if batch_size < n_samples:
        if batch_size > 1000:
            batch_size = (batch_size // 1000) * 1000
        elif batch_size > 100:
            batch_size = (batch_size // 100) * 100

    return batch_size


class ThreadContext:
    """Context manager that sizes torch's intra-op thread pool.

    Example:
        >>> with ThreadContext(4):
        ...     # Distance kernels here use 4 worker threads
        ...     d = torch.cdist(x, y)

    None leaves the current setting untouched.
    """

    def __init__(self, n_threads: Optional[int] = None):
        """
        Args:
            n_threads: Number of worker threads
        """
        self.n_threads = check_n_threads(n_threads)
        self.prev_threads = None

    def __enter__(self):
        """Enter context."""
        if self.n_threads is not None:
            self.prev_threads = torch.get_num_threads()
            if self.prev_threads != self.n_threads:
                torch.set_num_threads(self.n_threads)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context."""
        if self.prev_threads is not None and torch.get_num_threads() != self.prev_threads:
            torch.set_num_threads(self.prev_threads)
        self.prev_threads = None


def get_device_info(device: Optional[torch.device] = None) -> Dict[str, Any]:
    """Get information about a device and the worker thread pool.

    Args:
        device: Device to query (None for current default)

    Returns:
        Dictionary with device information
    """
    device = get_default_device() if device is None else parse_device(device)

    info = {
        'device': str(device),
        'type': device.type,
        'index': device.index,
        'num_threads': torch.get_num_threads()
    }

    if device.type == 'cuda':
        props = torch.cuda.get_device_properties(device)
        free, total = torch.cuda.mem_get_info(device)
        info.update({
            'name': props.name,
            'total_memory': total,
            'free_memory': free,
        })

    return info
