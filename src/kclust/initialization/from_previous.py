"""
Initialization from previous solution or custom centers.

Useful for warm starts or when you have good initial guesses.
"""

from typing import Union
import numpy as np
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..base.data_structures import ClusterState
from ..utils.validation import validate_centers


class FromPreviousInit(InitializationStrategy):
    """Initialize from previous cluster centers or custom starting points.

    Accepts either:
    - A tensor/array of shape (n_clusters, dimension) with initial centers
    - A ClusterState object from a previous run
    """

    def __init__(self, initial_state: Union[Tensor, np.ndarray, list, ClusterState]):
        """
        Args:
            initial_state: Previous solution to use for initialization
        """
        if not isinstance(initial_state, (Tensor, np.ndarray, list, ClusterState)):
            raise TypeError(f"Unknown initial_state type: {type(initial_state)}")
        self.initial_state = initial_state

    def initialize(self, points: Tensor, n_clusters: int,
                   **kwargs) -> Tensor:
        """Initialize from previous state.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters

        Returns:
            (n_clusters, d) copy of the previous centers
        """
        if isinstance(self.initial_state, ClusterState):
            centers = self.initial_state.centers
        else:
            centers = self.initial_state

        centers = validate_centers(centers, points.shape[1], dtype=points.dtype,
                                   device=points.device, n_clusters=n_clusters)
        return centers.clone()
