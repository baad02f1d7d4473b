# tests/orchestrator/test_run_guard.py
import pytest

from simdash.orchestrator.guard import SingleFlightGuard


def test_second_holder_is_rejected():
    guard = SingleFlightGuard()

    with guard.hold() as first:
        assert first is True
        assert guard.busy
        with guard.hold() as second:
            assert second is False
        # rejected holder must not release the real one
        assert guard.busy

    assert not guard.busy


def test_released_on_exception():
    guard = SingleFlightGuard()

    with pytest.raises(RuntimeError):
        with guard.hold() as acquired:
            assert acquired
            raise RuntimeError("simulation crashed")

    assert not guard.busy
    with guard.hold() as again:
        assert again
