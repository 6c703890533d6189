"""
Serialized progress notification for seeding and refinement.

Callbacks are only ever fired from the sequential control flow, between
tensor kernels, and never from a worker thread. The lock keeps notifications
from different runs sharing one callback from interleaving. It is reentrant,
so a callback may itself start another run on the same thread.
"""

import inspect
import threading
from typing import Callable, Optional


class ProgressChannel:
    """Handoff point between the clustering control flow and a user callback.

    The callback may take no arguments, or ``(index, value)``: the index of
    the chosen center and the current potential during seeding, or the
    iteration number and the current cost during refinement. Any other
    signature is rejected with ``TypeError`` when the channel is created.

    Args:
        callback: Callable or None (no-op)
    """

    _lock = threading.RLock()

    def __init__(self, callback: Optional[Callable] = None):
        if callback is not None and not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback)}")
        self.callback = callback
        self.n_notifications = 0
        self._takes_args = self._accepts_arguments(callback)

    @staticmethod
    def _accepts_arguments(callback: Optional[Callable]) -> bool:
        if callback is None:
            return False
        try:
            signature = inspect.signature(callback)
        except (TypeError, ValueError):
            # Builtins without introspectable signatures get the full form
            return True
        params = signature.parameters.values()
        positional = [
            p for p in params
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        if any(p.kind == p.VAR_POSITIONAL for p in params) or len(positional) >= 2:
            return True
        required = [p for p in positional if p.default is p.empty]
        if required:
            raise TypeError(
                f"callback must accept no arguments or (index, value), "
                f"got signature {signature}")
        return False

    @property
    def active(self) -> bool:
        return self.callback is not None

    def notify(self, index: int, value: float) -> None:
        """Deliver one progress event."""
        if self.callback is None:
            return
        with self._lock:
            self.n_notifications += 1
            if self._takes_args:
                self.callback(int(index), float(value))
            else:
                self.callback()
