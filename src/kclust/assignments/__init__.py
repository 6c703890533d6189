"""Assignment strategies for clustering algorithms."""

from .hard import HardAssignment, assign

__all__ = [
    'HardAssignment',
    'assign'
]
