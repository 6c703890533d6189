"""
Minimum-image distance for data in a periodic box.

Each coordinate difference is wrapped to its nearest periodic image before
the Euclidean norm is taken. Typical for molecular simulation coordinates.
"""

from typing import Union
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class MinimumImageDistance(DistanceMetric):
    """(Squared) Euclidean distance under periodic boundary conditions.

    Has no squared-norm expansion, so the distance engine always evaluates
    it directly.
    """

    def __init__(self, box: Union[float, Tensor], squared: bool = True):
        """
        Args:
            box: Box edge length, a scalar or a (d,) tensor of per-axis lengths
            squared: Whether to return squared distances
        """
        box = torch.as_tensor(box, dtype=torch.float64)
        if box.dim() > 1:
            raise ValueError(f"box must be a scalar or 1D, got {box.dim()}D")
        if (box <= 0).any():
            raise ValueError("box lengths must be positive")
        self.box = box
        self.squared = squared

    def _wrap(self, diff: Tensor) -> Tensor:
        box = self.box.to(device=diff.device, dtype=diff.dtype)
        if box.dim() == 1 and box.shape[0] != diff.shape[-1]:
            raise ValueError(f"Expected dimension {box.shape[0]}, got {diff.shape[-1]}")
        return diff - box * torch.round(diff / box)

    def _finalize(self, squared_distances: Tensor) -> Tensor:
        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)

    def compute(self, x: Tensor, y: Tensor) -> Tensor:
        diff = self._wrap(x.unsqueeze(1) - y.unsqueeze(0))
        return self._finalize(torch.sum(diff * diff, dim=2))

    def compute_paired(self, x: Tensor, y: Tensor) -> Tensor:
        diff = self._wrap(x - y)
        return self._finalize(torch.sum(diff * diff, dim=1))

    def __repr__(self) -> str:
        return f"MinimumImageDistance(box={self.box.tolist()}, squared={self.squared})"
