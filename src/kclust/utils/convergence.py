"""
Convergence criteria for the refinement loop.

Available tests:
- Relative change in cost (default)
- Squared displacement of the centers
- Fraction of points that change clusters

All tests treat a value *at or below* the tolerance as converged.
"""

from typing import Dict, Any, Union
import torch

from ..base.interfaces import ConvergenceCriterion


class ChangeInCost(ConvergenceCriterion):
    """Convergence based on relative change of the cost between iterations.

    The change is ``|cost - prev| / cost``, or 0 when the cost is exactly 0.
    """

    def __init__(self, tol: float = 1e-5, patience: int = 1):
        """
        Args:
            tol: Relative tolerance for cost change
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        self.tol = tol
        self.patience = patience
        self._prev_cost = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if cost has stabilized."""
        current_cost = float(current_state['cost'])

        if self._prev_cost is None:
            self._prev_cost = current_cost
            # Nothing to compare against; only an exact fixed point at 0 counts
            stable = current_cost == 0.0
            self._stable_count = 1 if stable else 0
            return stable and self._stable_count >= self.patience

        abs_change = abs(current_cost - self._prev_cost)
        rel_change = abs_change / current_cost if current_cost != 0.0 else 0.0

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'cost': current_cost,
            'abs_change': abs_change,
            'rel_change': rel_change
        })

        if rel_change <= self.tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_cost = current_cost

        return converged

    def reset(self):
        super().reset()
        self._prev_cost = None
        self._stable_count = 0


class CenterShift(ConvergenceCriterion):
    """Convergence based on the total squared displacement of the centers."""

    def __init__(self, tol: float = 1e-5, patience: int = 1):
        """
        Args:
            tol: Tolerance on sum_j ||c_j(new) - c_j(old)||^2
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        self.tol = tol
        self.patience = patience
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if centers have stopped moving."""
        centers = current_state['centers']
        prev_centers = current_state['previous_centers']

        shift = torch.sum((centers - prev_centers) ** 2, dtype=torch.float64).item()

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'center_shift': shift
        })

        if shift <= self.tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        return converged

    def reset(self):
        super().reset()
        self._stable_count = 0


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence based on fraction of points that change clusters."""

    def __init__(self, tol: float = 1e-5, patience: int = 1):
        """
        Args:
            tol: Fraction of changed points at or below which we are stable
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        self.tol = tol
        self.patience = patience
        self._prev_assignments = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments have stabilized."""
        current_assignments = current_state['assignments']

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False

        n_changed = (current_assignments != self._prev_assignments).sum().item()
        n_total = len(current_assignments)
        change_fraction = n_changed / n_total

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed,
            'change_fraction': change_fraction
        })

        if change_fraction <= self.tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_assignments = current_assignments.clone()

        return converged

    def reset(self):
        super().reset()
        self._prev_assignments = None
        self._stable_count = 0


class CombinedCriterion(ConvergenceCriterion):
    """Combine multiple convergence criteria with AND/OR logic."""

    def __init__(self, criteria: list[ConvergenceCriterion],
                 mode: str = 'any'):
        """
        Args:
            criteria: List of convergence criteria
            mode: 'any' (OR) or 'all' (AND)
        """
        super().__init__()
        self.criteria = criteria
        self.mode = mode

        if mode not in ['any', 'all']:
            raise ValueError(f"Mode must be 'any' or 'all', got {mode}")

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check all criteria and combine results."""
        # Every criterion sees every state, so no short-circuiting
        results = [criterion.check(current_state) for criterion in self.criteria]

        if self.mode == 'any':
            converged = any(results)
        else:
            converged = all(results)

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'individual_results': results,
            'converged': converged
        })

        return converged

    def reset(self):
        """Reset all sub-criteria."""
        super().reset()
        for criterion in self.criteria:
            criterion.reset()


_CRITERIA = {
    'cost': ChangeInCost,
    'centers': CenterShift,
    'assignments': ChangeInAssignments,
}


def make_criterion(convergence: Union[str, ConvergenceCriterion],
                   tol: float) -> ConvergenceCriterion:
    """Resolve a criterion name ('cost', 'centers', 'assignments') or instance."""
    if isinstance(convergence, ConvergenceCriterion):
        return convergence
    if convergence not in _CRITERIA:
        raise ValueError(f"Unknown convergence criterion: {convergence!r}. "
                         f"Expected one of {sorted(_CRITERIA)} or a ConvergenceCriterion")
    return _CRITERIA[convergence](tol=tol)
