import pytest

from launch_curve.common.errors import ReentrancyBlocked
from launch_curve.curves.utils.reentrancy_guard import ReentrancyGuard, non_reentrant


def test_guard_blocks_nested_entry():
    guard = ReentrancyGuard("test")
    with guard:
        assert guard.locked is True
        with pytest.raises(ReentrancyBlocked, match="test"):
            with guard:
                pass
    assert guard.locked is False


def test_guard_released_on_exception():
    guard = ReentrancyGuard()
    with pytest.raises(RuntimeError):
        with guard:
            raise RuntimeError("boom")
    assert guard.locked is False


class _Recorder:
    """Minimal object carrying what non_reentrant expects."""

    def __init__(self):
        self._guard = ReentrancyGuard("recorder")
        self._pending_events = []
        self.published = []

    def _publish(self, events):
        assert self._guard.locked is False
        self.published.extend(events)

    @non_reentrant
    def work(self, value, fail=False):
        self._pending_events.append(value)
        if fail:
            raise ValueError("failed")
        return value * 2

    @non_reentrant
    def recurse(self):
        return self.work(1)


def test_non_reentrant_publishes_after_release():
    rec = _Recorder()
    assert rec.work(3) == 6
    assert rec.published == [3]


def test_non_reentrant_drops_events_on_failure():
    rec = _Recorder()
    with pytest.raises(ValueError):
        rec.work(3, fail=True)
    assert rec.published == []
    assert rec._pending_events == []
    assert rec.work(4) == 8


def test_non_reentrant_blocks_recursion():
    rec = _Recorder()
    with pytest.raises(ReentrancyBlocked):
        rec.recurse()
    assert rec._guard.locked is False


def test_non_reentrant_keeps_name():
    assert _Recorder.work.__name__ == "work"
