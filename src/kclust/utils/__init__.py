"""Utility functions for kclust algorithms."""

from .convergence import (
    ChangeInCost,
    CenterShift,
    ChangeInAssignments,
    CombinedCriterion,
    make_criterion
)

from .validation import (
    validate_data,
    validate_centers,
    validate_assignments,
    check_n_clusters,
    check_random_state,
    check_n_threads,
    check_iteration_params
)

from .device import (
    get_default_device,
    parse_device,
    get_device_info,
    estimate_memory_usage,
    get_batch_size,
    ThreadContext
)

__all__ = [
    # Convergence criteria
    'ChangeInCost',
    'CenterShift',
    'ChangeInAssignments',
    'CombinedCriterion',
    'make_criterion',

    # Validation
    'validate_data',
    'validate_centers',
    'validate_assignments',
    'check_n_clusters',
    'check_random_state',
    'check_n_threads',
    'check_iteration_params',

    # Device
    'get_default_device',
    'parse_device',
    'get_device_info',
    'estimate_memory_usage',
    'get_batch_size',
    'ThreadContext'
]
