import functools
import threading
from typing import Any, Callable, TypeVar, cast

from launch_curve.common.errors import ReentrancyBlocked


F = TypeVar("F", bound=Callable[..., Any])


class ReentrancyGuard:
    """
    Exclusive, non-reentrant lock around a state-mutating call.

    Acquisition never blocks: if the lock is already held (a collaborator
    calling back into the curve mid-operation) ReentrancyBlocked is raised.
    The lock is released on every exit path.
    """

    def __init__(self, name: str = "curve"):
        self.name = name
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def __enter__(self) -> "ReentrancyGuard":
        if not self._lock.acquire(blocking=False):
            raise ReentrancyBlocked(f"Reentrant call into {self.name} blocked.")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._lock.release()
        return False


def non_reentrant(fn: F) -> F:
    """
    Method decorator for curve entry points. Runs the method under the
    instance's ``_guard`` and, once the lock is released, publishes the events
    it queued on success. Queued events are dropped on failure.
    """

    @functools.wraps(fn)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        with self._guard:
            self._pending_events = []
            try:
                result = fn(self, *args, **kwargs)
            except Exception:
                self._pending_events = []
                raise
            pending, self._pending_events = self._pending_events, []
        self._publish(pending)
        return result

    return cast(F, wrapper)
